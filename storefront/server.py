# storefront/server.py
"""
Standalone runner.

Lifecycle: starting -> serving -> shutting-down -> terminated.
The database is initialised eagerly by create_app; this module only decides
whether to bind a local listener and tears everything down on SIGTERM.
"""

import signal
import sys
import threading
from werkzeug.serving import make_server
from . import create_app
from .config import get_config
from .database import get_database_state, shutdown_database

LOCAL_HOST = '127.0.0.1'


def should_bind_listener(config_class):
    """Serverless and production processes never bind a local socket."""
    return not config_class.HOSTED and config_class.APP_ENV != 'production'


def serve(config_class=None):
    """
    Builds the app and, in local mode, serves it on the loopback interface
    until SIGTERM.

    Returns:
        Flask: The application, when no listener is bound.
    """
    config_class = config_class or get_config()
    app = create_app(config_class)

    if not should_bind_listener(config_class):
        app.logger.info("No local listener bound (serverless or production mode)")
        return app

    port = app.config['PORT']
    # A bind failure is fatal: let it propagate.
    server = make_server(LOCAL_HOST, port, app, threaded=True)
    state = get_database_state(app)

    app.logger.info(f"Backend server running on http://{LOCAL_HOST}:{port}")
    app.logger.info(f"Health check available at http://{LOCAL_HOST}:{port}/api/health")
    app.logger.info(f"Database: {'Connected' if state.connected else 'Using fallback data'}")

    def handle_sigterm(signum, frame):
        app.logger.info("SIGTERM signal received: closing HTTP server")
        # shutdown() waits for serve_forever() to return, which runs in this thread.
        threading.Thread(target=server.shutdown, daemon=True).start()

    signal.signal(signal.SIGTERM, handle_sigterm)

    try:
        server.serve_forever()
    finally:
        server.server_close()
        app.logger.info("HTTP server closed")
        shutdown_database(app, state)

    sys.exit(0)
