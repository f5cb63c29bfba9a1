# storefront/api/users.py

from flask import Blueprint, request, jsonify, g
from storefront.jwt_auth import require_jwt
from storefront.services.users import get_profile, update_profile
from storefront.utils import _handle_service_result
from storefront import api_rate_limit

bp = Blueprint('users', __name__)
api_rate_limit(bp)


@bp.route('/profile', methods=['GET'])
@require_jwt
def get_profile_route():
    result = get_profile(g.current_user)
    return _handle_service_result(result)


@bp.route('/profile', methods=['PUT'])
@require_jwt
def update_profile_route():
    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        return jsonify({"success": False, "error": "No data provided in the request"}), 400

    result = update_profile(g.current_user, data)
    return _handle_service_result(result)
