# storefront/api/admin.py
# (This file holds all admin/user management routes.)

from flask import Blueprint, request, jsonify
from storefront.jwt_auth import require_jwt, admin_required
from storefront.services.admin import get_all_users, update_user_role, get_dashboard_stats
from storefront.utils import _handle_service_result
from storefront import api_rate_limit

bp = Blueprint('admin', __name__)
api_rate_limit(bp)


@bp.route('/users', methods=['GET'])
@require_jwt
@admin_required
def get_all_users_route():
    """Returns a list of all users for admin dashboard."""
    result = get_all_users()
    return _handle_service_result(result)


@bp.route('/users/<int:user_id>/role', methods=['POST'])
@require_jwt
@admin_required
def update_user_role_route(user_id):
    """Updates the role of a specified user."""
    data = request.get_json(silent=True)
    new_role = data.get('role') if isinstance(data, dict) else None

    if not new_role:
        return jsonify({"success": False, "error": "Role missing in request body."}), 400

    result = update_user_role(user_id, new_role)
    return _handle_service_result(result)


@bp.route('/stats', methods=['GET'])
@require_jwt
@admin_required
def get_stats_route():
    result = get_dashboard_stats()
    return _handle_service_result(result)
