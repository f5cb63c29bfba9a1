# storefront/api/products.py
# Public catalog routes; no authentication required.

from flask import Blueprint, request
from storefront.services.products import get_products, get_product, get_categories
from storefront.utils import _handle_service_result
from storefront import api_rate_limit

bp = Blueprint('products', __name__)
api_rate_limit(bp)


@bp.route('', methods=['GET'])
def list_products_route():
    category = request.args.get('category')
    search = request.args.get('search')
    result = get_products(category=category, search=search)
    return _handle_service_result(result)


@bp.route('/categories', methods=['GET'])
def list_categories_route():
    result = get_categories()
    return _handle_service_result(result)


@bp.route('/<int:product_id>', methods=['GET'])
def get_product_route(product_id):
    result = get_product(product_id)
    # Service returns a tuple (dict, 404 or 500) on failure
    return _handle_service_result(result, default_error_status=404)
