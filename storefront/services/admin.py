# storefront/services/admin.py
# Admin dashboard: user management and store statistics.

from flask import current_app, g
from sqlalchemy import func
from storefront import fallback
from storefront.database import Unavailable
from storefront.models import ROLES, Order, Product, User


def get_all_users():
    """Fetches all users, excluding password hashes, for the admin dashboard."""
    if isinstance(g.database, Unavailable):
        return {"success": True, "users": [], "source": "fallback"}

    try:
        users = User.query.order_by(User.id).all()
        return {"success": True, "users": [u.to_dict() for u in users], "source": "database"}
    except Exception as e:
        return {"success": False, "error": f"Database error fetching users: {str(e)}"}, 500


def update_user_role(user_id, new_role):
    """
    Changes a user's role. The new role shows up in their token on next login.
    """
    if new_role not in ROLES:
        return {"success": False, "error": "Invalid role specified."}, 400

    if isinstance(g.database, Unavailable):
        return {"success": False, "error": "User management is unavailable while the store runs on fallback data."}, 503

    db = g.database.handle
    try:
        user = db.session.get(User, user_id)
        if not user:
            return {"success": False, "error": "User not found."}, 404

        user.role = new_role
        db.session.commit()

        current_app.logger.info(
            f"Role for {user.username} set to {new_role} by {g.current_user.username}"
        )
        return {"success": True, "message": f"Role for user {user.username} updated to {new_role}."}
    except Exception as e:
        db.session.rollback()
        return {"success": False, "error": f"Could not update role: {str(e)}"}, 500


def get_dashboard_stats():
    """
    Returns headline numbers: users, products, orders, revenue and low stock.
    """
    if isinstance(g.database, Unavailable):
        products = fallback.list_products()
        return {
            "success": True,
            "stats": {
                "users": 0,
                "products": len(products),
                "orders": 0,
                "revenue": 0.0,
                "low_stock": [p['id'] for p in products if p['stock'] < 10],
            },
            "source": "fallback",
        }

    db = g.database.handle
    try:
        revenue = db.session.query(func.sum(Order.total)).filter(Order.status != 'CANCELLED').scalar()
        low_stock = Product.query.filter(Product.stock < 10).order_by(Product.id).all()

        return {
            "success": True,
            "stats": {
                "users": User.query.count(),
                "products": Product.query.count(),
                "orders": Order.query.count(),
                # Handle None (no orders yet) - return 0
                "revenue": float(revenue or 0.0),
                "low_stock": [p.id for p in low_stock],
            },
            "source": "database",
        }
    except Exception as e:
        return {"success": False, "error": f"Database error: {str(e)}"}, 500
