"""
JWT Authentication

Session tokens are signed with the app's SECRET_KEY and carried in an
HTTP-only cookie (or, for API clients, an ``Authorization: Bearer`` header).
Routes trust the verified claims and never look the user up per request,
which keeps them working while the API runs on fallback data.
"""

import jwt
from datetime import datetime, timedelta, timezone
from functools import wraps
from dataclasses import dataclass
from flask import request, jsonify, g, current_app


class JWTAuthError(Exception):
    """Custom exception for JWT authentication errors"""
    def __init__(self, message, status_code=401):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


@dataclass
class UserContext:
    """
    Lightweight user context extracted from the token claims.
    """
    id: int          # From 'sub' claim
    email: str
    username: str
    role: str        # CUSTOMER / ADMIN

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "username": self.username,
            "role": self.role,
        }


def extract_token():
    """
    Extracts the token from the session cookie, falling back to the
    Authorization header.

    Raises:
        JWTAuthError: If no token is present or the header is malformed
    """
    token = request.cookies.get(current_app.config['JWT_COOKIE_NAME'])
    if token:
        return token

    auth_header = request.headers.get('Authorization')

    if not auth_header:
        raise JWTAuthError("Authentication required.", 401)

    parts = auth_header.split()

    if len(parts) != 2 or parts[0].lower() != 'bearer':
        raise JWTAuthError("Invalid Authorization header format. Expected 'Bearer <token>'", 401)

    return parts[1]


def issue_token(user):
    """
    Signs a session token for ``user`` (a User model or UserContext).

    Returns:
        str: The encoded JWT
    """
    now = datetime.now(timezone.utc)
    payload = {
        'sub': str(user.id),
        'email': user.email,
        'username': user.username,
        'role': user.role,
        'iat': now,
        'exp': now + timedelta(hours=current_app.config['JWT_EXPIRES_HOURS']),
    }
    return jwt.encode(payload, current_app.config['SECRET_KEY'], algorithm='HS256')


def verify_token(token):
    """
    Verifies a session token and returns the user context it carries.

    Raises:
        JWTAuthError: If the token is invalid, expired, or missing claims
    """
    try:
        payload = jwt.decode(
            token,
            current_app.config['SECRET_KEY'],
            algorithms=['HS256'],
            options={'verify_exp': True, 'require': ['sub', 'exp']},
        )
    except jwt.ExpiredSignatureError:
        raise JWTAuthError("Token has expired", 401)
    except jwt.InvalidTokenError as e:
        raise JWTAuthError(f"Invalid token: {str(e)}", 401)

    try:
        user_id = int(payload['sub'])
    except (TypeError, ValueError):
        raise JWTAuthError("Token has an invalid 'sub' claim", 401)

    if not payload.get('email'):
        raise JWTAuthError("Token missing 'email' claim", 401)

    return UserContext(
        id=user_id,
        email=payload['email'],
        username=payload.get('username') or payload['email'].split('@')[0],
        role=payload.get('role', 'CUSTOMER'),
    )


def set_token_cookie(response, token):
    config = current_app.config
    response.set_cookie(
        config['JWT_COOKIE_NAME'],
        token,
        max_age=config['JWT_EXPIRES_HOURS'] * 3600,
        httponly=True,
        secure=config['JWT_COOKIE_SECURE'],
        samesite='Lax',
    )
    return response


def clear_token_cookie(response):
    response.delete_cookie(current_app.config['JWT_COOKIE_NAME'])
    return response


def require_jwt(f):
    """
    Decorator to protect routes with JWT authentication.

    Puts a UserContext on g.current_user.

    Usage:
        @bp.route('/protected')
        @require_jwt
        def protected_route():
            user = g.current_user
            return jsonify({"message": f"Hello {user.username}"})

    Error Responses:
        401: Missing, invalid, or expired token
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            token = extract_token()
            g.current_user = verify_token(token)
        except JWTAuthError as e:
            return jsonify({"success": False, "error": e.message}), e.status_code

        return f(*args, **kwargs)

    return decorated_function


def admin_required(f):
    """
    Decorator to require ADMIN role for route access.

    Must be used AFTER @require_jwt decorator.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = getattr(g, 'current_user', None)

        if not user:
            return jsonify({"success": False, "error": "Authentication required."}), 401

        if user.role != 'ADMIN':
            return jsonify({"success": False, "error": "Permission denied: Admin access required."}), 403

        return f(*args, **kwargs)

    return decorated_function
