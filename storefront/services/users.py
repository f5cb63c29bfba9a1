# storefront/services/users.py
# Account registration, login and profile management.

from flask import current_app, g
from sqlalchemy.exc import IntegrityError
from storefront.database import Unavailable
from storefront.models import User

MIN_PASSWORD_LENGTH = 8

def _no_database():
    return {"success": False, "error": "Accounts are unavailable while the store runs on fallback data."}, 503


def _text(data, key):
    """Returns the stripped string under key, or None when it is missing or not a string."""
    value = data.get(key)
    if not isinstance(value, str):
        return None
    return value.strip()


def _validate_email(email):
    return bool(email) and '@' in email and '.' in email.rsplit('@', 1)[-1]


def register_user(data):
    """
    Creates a CUSTOMER account.

    Returns:
        tuple: (dict, status_code) on error, or dict with the new user on success
    """
    if isinstance(g.database, Unavailable):
        return _no_database()

    email = (_text(data, 'email') or '').lower()
    username = _text(data, 'username') or ''
    password = data.get('password')
    if not isinstance(password, str):
        password = ''

    if not _validate_email(email):
        return {"success": False, "error": "A valid email is required."}, 400
    if not username:
        return {"success": False, "error": "Username is required."}, 400
    if len(password) < MIN_PASSWORD_LENGTH:
        return {"success": False, "error": f"Password must be at least {MIN_PASSWORD_LENGTH} characters."}, 400

    db = g.database.handle
    try:
        user = User(email=email, username=username, role='CUSTOMER')
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return {"success": False, "error": "Email or username is already registered."}, 409
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Could not create account for {email}: {str(e)}")
        return {"success": False, "error": "Could not create account."}, 500

    current_app.logger.info(f"Registered new user {user.username} (ID: {user.id})")
    return {"success": True, "user": user}


def authenticate(email, password):
    """
    Checks credentials.

    Returns:
        tuple: (dict, status_code) on error, or dict holding the User model under 'user'
    """
    if isinstance(g.database, Unavailable):
        return _no_database()

    if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
        return {"success": False, "error": "Email and password are required."}, 400

    try:
        user = User.query.filter_by(email=email.strip().lower()).first()
    except Exception as e:
        return {"success": False, "error": f"Database error during login: {str(e)}"}, 500

    if user is None or not user.check_password(password):
        current_app.logger.warning(f"Failed login attempt for {email}")
        return {"success": False, "error": "Invalid email or password."}, 401

    return {"success": True, "user": user}


def get_profile(user_context):
    """Returns the stored profile, or the token claims in fallback mode."""
    if isinstance(g.database, Unavailable):
        return {"success": True, "user": user_context.to_dict(), "source": "token"}

    db = g.database.handle
    try:
        user = db.session.get(User, user_context.id)
    except Exception as e:
        return {"success": False, "error": f"Database error fetching profile: {str(e)}"}, 500

    if user is None:
        return {"success": False, "error": "User not found."}, 404
    return {"success": True, "user": user.to_dict(), "source": "database"}


def update_profile(user_context, data):
    """Updates username, email and/or password of the current user."""
    if isinstance(g.database, Unavailable):
        return _no_database()

    db = g.database.handle
    try:
        user = db.session.get(User, user_context.id)
        if user is None:
            return {"success": False, "error": "User not found."}, 404

        if 'email' in data:
            email = (_text(data, 'email') or '').lower()
            if not _validate_email(email):
                return {"success": False, "error": "A valid email is required."}, 400
            user.email = email

        if 'username' in data:
            username = _text(data, 'username')
            if not username:
                return {"success": False, "error": "Username cannot be empty."}, 400
            user.username = username

        password = data.get('password')
        if password:
            if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
                return {"success": False, "error": f"Password must be at least {MIN_PASSWORD_LENGTH} characters."}, 400
            user.set_password(password)

        db.session.commit()
        return {"success": True, "user": user.to_dict()}

    except IntegrityError:
        db.session.rollback()
        return {"success": False, "error": "Email or username is already registered."}, 409
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Could not update profile for user {user_context.id}: {str(e)}")
        return {"success": False, "error": "Could not update profile."}, 500
