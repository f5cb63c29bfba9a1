# storefront/services/products.py

from flask import g
from sqlalchemy import or_
from storefront import fallback
from storefront.database import Unavailable
from storefront.models import Product


def get_products(category=None, search=None):
    """
    Lists the catalog, optionally filtered by category and a search term
    matched against name and description.
    """
    if isinstance(g.database, Unavailable):
        products = fallback.list_products(category=category, search=search)
        return {"success": True, "products": products, "count": len(products), "source": "fallback"}

    try:
        query = Product.query.order_by(Product.id)
        if category:
            query = query.filter(Product.category.ilike(category))
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Product.name.ilike(pattern), Product.description.ilike(pattern)))

        products = [p.to_dict() for p in query.all()]
        return {"success": True, "products": products, "count": len(products), "source": "database"}
    except Exception as e:
        return {"success": False, "error": f"Database error fetching products: {str(e)}"}, 500


def get_product(product_id):
    if isinstance(g.database, Unavailable):
        product = fallback.find_product(product_id)
    else:
        try:
            record = g.database.handle.session.get(Product, product_id)
        except Exception as e:
            return {"success": False, "error": f"Database error fetching product: {str(e)}"}, 500
        product = record.to_dict() if record else None

    if product is None:
        return {"success": False, "error": "Product not found."}, 404
    return {"success": True, "product": product}


def get_categories():
    if isinstance(g.database, Unavailable):
        return {"success": True, "categories": fallback.list_categories()}

    db = g.database.handle
    try:
        rows = db.session.query(Product.category).filter(Product.category.isnot(None)).distinct().all()
        return {"success": True, "categories": sorted(row[0] for row in rows)}
    except Exception as e:
        return {"success": False, "error": f"Database error fetching categories: {str(e)}"}, 500
