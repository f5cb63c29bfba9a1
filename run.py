from storefront.server import serve

# This is the entry point for local development.
# It builds the app, connects the database (if configured) and serves
# on 127.0.0.1:$PORT until SIGTERM.

if __name__ == '__main__':
    serve()
