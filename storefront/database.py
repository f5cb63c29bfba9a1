# storefront/database.py
"""
Database Connector

Decides, once per process, whether requests are served from the live database
or from the static fallback catalog.

The outcome is a two-variant state:
- Unavailable(): no database configured, unreachable, or schema missing
- Available(handle): the Flask-SQLAlchemy extension, connected and validated

Every consumer branches on the variant; there is no nullable handle to forget
to check.
"""

from dataclasses import dataclass
from typing import ClassVar, Union
from flask import current_app
from flask_sqlalchemy import SQLAlchemy
from . import db, DATABASE_STATE_KEY


@dataclass(frozen=True)
class Unavailable:
    connected: ClassVar[bool] = False


@dataclass(frozen=True)
class Available:
    handle: SQLAlchemy
    connected: ClassVar[bool] = True


DatabaseState = Union[Unavailable, Available]


def initialize_database(app):
    """
    Connects to the configured database and validates the schema.

    Never raises: every failure path logs and returns Unavailable().

    Returns:
        Available | Unavailable
    """
    if not app.config.get('SQLALCHEMY_DATABASE_URI'):
        app.logger.warning("No DATABASE_URL provided - using fallback data")
        return Unavailable()

    from .models import User

    try:
        db.init_app(app)
        with app.app_context():
            if app.config.get('AUTO_CREATE_SCHEMA'):
                db.create_all()

            # A trivial read proves both connectivity and that the tables exist.
            User.query.count()

        app.logger.info("Database connected and schema validated successfully")
        return Available(handle=db)

    except Exception as e:
        app.logger.warning("Database connection or schema validation failed - using fallback data")
        app.logger.warning(f"Database error: {str(e)}")
        _release(app)
        return Unavailable()


def _release(app):
    """Best-effort cleanup of a partially established connection."""
    try:
        with app.app_context():
            db.session.remove()
            db.engine.dispose()
    except Exception as e:
        app.logger.warning(f"Error releasing database connection: {str(e)}")


def shutdown_database(app, state):
    """Closes the database handle on process shutdown."""
    if isinstance(state, Available):
        with app.app_context():
            state.handle.engine.dispose()
        app.logger.info("Database connections closed")


def get_database_state(app=None):
    """Returns the state recorded at startup for ``app`` (default: the current app)."""
    app = app or current_app
    return app.extensions.get(DATABASE_STATE_KEY, Unavailable())


def create_schema(app, seed=False):
    """
    Creates all tables. With ``seed``, copies the fallback catalog into an empty
    product table.

    Returns:
        int: Number of products inserted.
    """
    from .fallback import list_products
    from .models import Product

    with app.app_context():
        db.create_all()
        if not seed or Product.query.count() > 0:
            return 0

        products = [
            Product(
                name=item['name'],
                description=item['description'],
                price=item['price'],
                category=item['category'],
                image_url=item['image_url'],
                stock=item['stock'],
            )
            for item in list_products()
        ]
        db.session.add_all(products)
        db.session.commit()
        app.logger.info(f"Seeded {len(products)} products from the fallback catalog")
        return len(products)
