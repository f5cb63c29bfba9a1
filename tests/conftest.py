"""
Shared fixtures: one app serving fallback data, one backed by an in-memory
SQLite database seeded with a small catalog and two accounts.
"""

import pytest
from storefront import create_app, db, limiter
from storefront.config import Config, HostedConfig
from storefront.jwt_auth import UserContext, issue_token
from storefront.models import Product, User


class FallbackTestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = None
    HOSTED = False
    APP_ENV = 'test'
    DEBUG_ERRORS = False
    SECRET_KEY = 'test-secret-key'
    FRONTEND_URL = 'http://localhost:5000'
    CORS_ORIGINS = ['http://localhost:5000', 'https://atomvercel20.vercel.app']
    RATELIMIT_STORAGE_URI = 'memory://'
    JWT_COOKIE_SECURE = False


class DatabaseTestConfig(FallbackTestConfig):
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    AUTO_CREATE_SCHEMA = True


class HostedTestConfig(HostedConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SECRET_KEY = 'test-secret-key'
    RATELIMIT_STORAGE_URI = 'memory://'


CUSTOMER_PASSWORD = 'customer-pass'
ADMIN_PASSWORD = 'admin-pass-123'


def make_token(app, user_id=1, role='CUSTOMER', email='customer@example.com', username='customer'):
    with app.app_context():
        return issue_token(UserContext(id=user_id, email=email, username=username, role=role))


def build_app(config_class):
    """Builds an app and clears the rate-limit storage it now owns."""
    app = create_app(config_class)
    limiter.reset()
    return app


def auth_header(token):
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def app():
    yield build_app(FallbackTestConfig)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db_app():
    app = create_app(DatabaseTestConfig)
    limiter.reset()

    with app.app_context():
        customer = User(username='customer', email='customer@example.com', role='CUSTOMER')
        customer.set_password(CUSTOMER_PASSWORD)
        admin = User(username='admin', email='admin@example.com', role='ADMIN')
        admin.set_password(ADMIN_PASSWORD)
        db.session.add_all([
            customer,
            admin,
            Product(name='Mechanical Keyboard', description='Hot-swappable switches', price=120.0,
                    category='Electronics', stock=5),
            Product(name='Mouse Pad', description='Extended desk mat', price=25.5,
                    category='Accessories', stock=2),
            Product(name='Monitor Arm', description='Gas spring arm', price=80.0,
                    category='Accessories', stock=0),
        ])
        db.session.commit()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def db_client(db_app):
    return db_app.test_client()


@pytest.fixture
def customer_token(db_app):
    with db_app.app_context():
        user = User.query.filter_by(email='customer@example.com').one()
        return make_token(db_app, user_id=user.id, email=user.email, username=user.username)


@pytest.fixture
def admin_token(db_app):
    with db_app.app_context():
        user = User.query.filter_by(email='admin@example.com').one()
        return make_token(db_app, user_id=user.id, role='ADMIN', email=user.email, username=user.username)
