# storefront/utils.py
"""
General-purpose helpers shared by the route modules.
"""

from flask import jsonify


def _handle_service_result(result, default_error_status=500):
    """
    Parses the result from a service function.
    If it's a tuple (error_dict, status_code), it uses the custom status code.
    Otherwise, it assumes success (status 200) or uses the default error status.

    Adds 'error_code' field to error responses for structured frontend handling.
    """
    # Check if the result is a tuple (error_dict, status_code)
    if isinstance(result, tuple) and len(result) == 2:
        error_dict, status_code = result
        if not error_dict.get("success", True):
            error_dict["error_code"] = error_dict.get("error_code", status_code)
        return jsonify(error_dict), status_code

    # If not a tuple, check the 'success' key in the dictionary
    if result.get("success"):
        return jsonify(result), 200
    else:
        result["error_code"] = result.get("error_code", default_error_status)
        return jsonify(result), default_error_status

