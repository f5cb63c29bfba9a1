# storefront/api/health.py

from datetime import datetime, timezone
from flask import Blueprint, jsonify
from storefront import limiter

bp = Blueprint('health', __name__)


@bp.route('/health', methods=['GET'])
@limiter.exempt
def health_check():
    """Liveness probe. Never touches the database and is never rate limited."""
    timestamp = datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')
    return jsonify({"status": "OK", "timestamp": timestamp}), 200
