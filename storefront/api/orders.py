# storefront/api/orders.py

from flask import Blueprint, request, jsonify, g
from storefront.jwt_auth import require_jwt
from storefront.services.orders import get_orders, get_order, create_order
from storefront.utils import _handle_service_result
from storefront import api_rate_limit

bp = Blueprint('orders', __name__)
api_rate_limit(bp)


@bp.route('', methods=['GET'])
@require_jwt
def list_orders_route():
    result = get_orders(g.current_user)
    return _handle_service_result(result)


@bp.route('/<int:order_id>', methods=['GET'])
@require_jwt
def get_order_route(order_id):
    result = get_order(g.current_user, order_id)
    return _handle_service_result(result, default_error_status=404)


@bp.route('', methods=['POST'])
@require_jwt
def create_order_route():
    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        return jsonify({"success": False, "error": "No data provided in the request"}), 400

    # Service returns (dict, 201) on success, (dict, 400/409/500) on failure
    result = create_order(g.current_user, data)
    return _handle_service_result(result)
