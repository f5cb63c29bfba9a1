# storefront/middleware.py
"""
Request pipeline shared by every route.

Stages run in this order for each request:
1. Proxy trust (one upstream hop) so client addresses are real
2. Security headers (Flask-Talisman)
3. CORS allow-list (Flask-Cors)
4. Rate limiting (Flask-Limiter)
5. Eager body parsing (JSON / URL-encoded, 10 MB ceiling)
6. Context injection (database state on flask.g)

Cookies are parsed by Werkzeug on access (request.cookies); nothing to install.
"""

import re
from flask import request, g
from flask_cors import CORS
from werkzeug.exceptions import BadRequest, RequestEntityTooLarge
from werkzeug.middleware.proxy_fix import ProxyFix
from . import limiter, talisman


class BodyParsingError(Exception):
    """Raised when a request body is malformed or over the size ceiling."""
    pass


def install_middleware(app, state):
    # 1. Trust exactly one proxy hop for X-Forwarded-For
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1)

    # 2. Security headers; TLS is terminated by the platform, not here
    talisman.init_app(app, force_https=False)

    # 3. CORS
    CORS(app, supports_credentials=True, origins=[
        *app.config['CORS_ORIGINS'],
        re.compile(app.config['CORS_ORIGIN_PATTERN']),
    ])

    # 4. Rate limiting (RATE_LIMIT per client address; storage from RATELIMIT_* config)
    limiter.init_app(app)

    # 5. Body parsing
    @app.before_request
    def parse_request_body():
        try:
            if request.is_json:
                request.get_json()
            elif request.mimetype == 'application/x-www-form-urlencoded':
                request.form
        except RequestEntityTooLarge:
            raise BodyParsingError("Request body exceeds the 10mb limit")
        except BadRequest as e:
            raise BodyParsingError(f"Malformed request body: {e.description}")

    # 6. Context injection
    @app.before_request
    def attach_database_state():
        g.database = state
        g.db_connected = state.connected
