# storefront/wsgi.py
# Entry point for an external WSGI server, e.g. `gunicorn storefront.wsgi:app`.

from storefront import create_app

app = create_app()
