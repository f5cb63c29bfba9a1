# storefront/errors.py
# Terminal handlers: every failure leaves the API as a JSON body.

from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException


def register_error_handlers(app):

    @app.errorhandler(404)
    @app.errorhandler(405)
    def route_not_found(e):
        return jsonify({"error": "Route not found"}), 404

    @app.errorhandler(429)
    def rate_limit_exceeded(e):
        retry_after = current_app.config['RATE_LIMIT_RETRY_AFTER']
        response = jsonify({
            "error": "Too many requests, please try again later.",
            "retryAfter": retry_after,
        })
        response.status_code = 429
        response.headers.setdefault('Retry-After', str(retry_after))
        return response

    @app.errorhandler(Exception)
    def unhandled_exception(e):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.name, "message": e.description}), e.code

        current_app.logger.exception(f"Unhandled error: {str(e)}")
        if current_app.config.get('DEBUG_ERRORS'):
            message = str(e)
        else:
            message = "Internal server error"
        return jsonify({"error": "Something went wrong!", "message": message}), 500
