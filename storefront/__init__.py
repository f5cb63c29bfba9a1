# storefront/__init__.py

import logging
import click
from flask import Flask, current_app
from flask_sqlalchemy import SQLAlchemy
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_talisman import Talisman
from .config import get_config

db = SQLAlchemy()

# Talisman and Limiter keep their options and storage on the instance, so
# init_app rebinds them to the most recently created app. One app per process;
# tests that build several apps call limiter.reset() before each one.
talisman = Talisman()


def _is_counted(response):
    """Successful (2xx) responses do not use up the rate limit budget."""
    return not 200 <= response.status_code < 300


limiter = Limiter(get_remote_address)

# One budget per client across every API blueprint (health stays exempt).
api_rate_limit = limiter.shared_limit(
    lambda: current_app.config['RATE_LIMIT'],
    scope='api',
    deduct_when=_is_counted,
)

DATABASE_STATE_KEY = 'storefront.database'


def create_app(config_class=None):
    """
    Builds the API application.

    The configuration class is resolved once and passed in explicitly; the
    serverless adapter hands over ``HostedConfig``, tests hand over their own.
    """
    config_class = config_class or get_config()

    app = Flask(__name__)
    app.config.from_object(config_class)

    # Configure logging to show INFO level messages
    app.logger.setLevel(logging.INFO)
    if not any(getattr(h, '_storefront', False) for h in app.logger.handlers):
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)
        formatter = logging.Formatter('[%(asctime)s] %(levelname)s: %(message)s')
        handler.setFormatter(formatter)
        handler._storefront = True
        app.logger.addHandler(handler)

    from .database import Unavailable, initialize_database

    # --- 1. DATABASE (RUNTIME MODE SELECTOR) ---
    if app.config['HOSTED']:
        # Serverless invocations are short-lived: no pool, no startup latency.
        app.logger.info("Running in serverless mode - using fallback data")
        state = Unavailable()
    else:
        state = initialize_database(app)

    # Set once here, only ever read afterwards.
    app.extensions[DATABASE_STATE_KEY] = state

    # --- 2. MIDDLEWARE CHAIN ---
    from .middleware import install_middleware
    install_middleware(app, state)

    # --- 3. REGISTER BLUEPRINTS ---
    from .api.health import bp as health_bp
    from .api.auth import bp as auth_bp
    from .api.users import bp as users_bp
    from .api.products import bp as products_bp
    from .api.orders import bp as orders_bp
    from .api.admin import bp as admin_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(products_bp, url_prefix='/api/products')
    app.register_blueprint(orders_bp, url_prefix='/api/orders')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')
    app.register_blueprint(health_bp, url_prefix='/api')

    # --- 4. ERROR & NOT-FOUND HANDLERS ---
    from .errors import register_error_handlers
    register_error_handlers(app)

    # --- 5. CLI ---
    @app.cli.command('init-db')
    @click.option('--seed', is_flag=True, help='Copy the fallback product catalog into the database.')
    def init_db_command(seed):
        """Creates the database tables."""
        from .database import create_schema
        if not app.config.get('SQLALCHEMY_DATABASE_URI'):
            raise click.ClickException("DATABASE_URL is not set; nothing to initialise.")
        if app.config['HOSTED']:
            raise click.ClickException("Schema creation is not available in serverless mode.")
        inserted = create_schema(app, seed=seed)
        click.echo(f"Database tables created. {inserted} product(s) seeded.")

    return app
