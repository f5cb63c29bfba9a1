# storefront/api/auth.py

from flask import Blueprint, request, jsonify, g
from storefront.jwt_auth import (
    require_jwt,
    issue_token,
    set_token_cookie,
    clear_token_cookie,
)
from storefront.services.users import register_user, authenticate
from storefront.utils import _handle_service_result
from storefront import api_rate_limit

bp = Blueprint('auth', __name__)
api_rate_limit(bp)


@bp.route('/register', methods=['POST'])
def register_route():
    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        return jsonify({"success": False, "error": "No data provided in the request"}), 400

    result = register_user(data)
    if isinstance(result, tuple):
        return _handle_service_result(result)

    # Registration logs the new user in straight away.
    user = result["user"]
    token = issue_token(user)
    response = jsonify({"success": True, "user": user.to_dict(), "token": token})
    response.status_code = 201
    return set_token_cookie(response, token)


@bp.route('/login', methods=['POST'])
def login_route():
    """
    Verifies credentials and sets the session cookie.

    Response:
        200: User details (token also returned for non-browser clients)
        401: Invalid credentials
        503: No database connected
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    result = authenticate(data.get('email'), data.get('password'))
    if isinstance(result, tuple):
        return _handle_service_result(result)

    user = result["user"]
    token = issue_token(user)
    response = jsonify({"success": True, "user": user.to_dict(), "token": token})
    return set_token_cookie(response, token)


@bp.route('/logout', methods=['POST'])
def logout_route():
    response = jsonify({"success": True, "message": "Logged out."})
    return clear_token_cookie(response)


@bp.route('/me', methods=['GET'])
@require_jwt
def get_current_user():
    """Returns the identity carried by the session token."""
    user = g.current_user
    return jsonify({
        "is_authenticated": True,
        "user_id": user.id,
        "username": user.username,
        "email": user.email,
        "role": user.role,
    }), 200

