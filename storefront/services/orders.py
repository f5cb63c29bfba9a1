# storefront/services/orders.py
# Order placement and history for the current user.

from datetime import datetime, timezone
from flask import current_app, g
from storefront import fallback
from storefront.database import Unavailable
from storefront.models import Order, OrderItem, Product


def _is_integer(value):
    # bool is an int subclass
    return isinstance(value, int) and not isinstance(value, bool)


def _parse_items(raw_items):
    """
    Validates the requested line items and merges duplicate products.

    Returns:
        tuple: (dict of product_id -> quantity, error message or None)
    """
    if not isinstance(raw_items, list) or not raw_items:
        return None, "Order must contain at least one item."

    quantities = {}
    for item in raw_items:
        if not isinstance(item, dict):
            return None, "Each item must be an object with product_id and quantity."
        product_id = item.get('product_id')
        quantity = item.get('quantity', 1)
        if not _is_integer(product_id) or not _is_integer(quantity):
            return None, "product_id and quantity must be integers."
        if quantity < 1:
            return None, "Quantity must be at least 1."
        quantities[product_id] = quantities.get(product_id, 0) + quantity

    return quantities, None


def get_orders(user_context):
    """Returns the current user's orders, newest first."""
    if isinstance(g.database, Unavailable):
        # Fallback mode keeps no order history.
        return {"success": True, "orders": [], "source": "fallback"}

    try:
        orders = (
            Order.query.filter_by(user_id=user_context.id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )
        return {"success": True, "orders": [o.to_dict() for o in orders], "source": "database"}
    except Exception as e:
        return {"success": False, "error": f"Database error fetching orders: {str(e)}"}, 500


def get_order(user_context, order_id):
    """Admins can read any order; customers only their own."""
    if isinstance(g.database, Unavailable):
        return {"success": False, "error": "Order not found."}, 404

    try:
        order = g.database.handle.session.get(Order, order_id)
    except Exception as e:
        return {"success": False, "error": f"Database error fetching order: {str(e)}"}, 500

    if order is None or (order.user_id != user_context.id and user_context.role != 'ADMIN'):
        return {"success": False, "error": "Order not found."}, 404
    return {"success": True, "order": order.to_dict()}


def create_order(user_context, data):
    """
    Places an order for the current user.

    In fallback mode the order is priced against the static catalog and echoed
    back with 'persisted': False.

    Returns:
        tuple: (dict, status_code); 201 on success
    """
    quantities, error = _parse_items(data.get('items'))
    if error:
        return {"success": False, "error": error}, 400

    shipping_address = data.get('shipping_address')

    if isinstance(g.database, Unavailable):
        return _create_fallback_order(user_context, quantities, shipping_address)

    db = g.database.handle
    try:
        products = Product.query.filter(Product.id.in_(list(quantities))).all()
        by_id = {p.id: p for p in products}

        missing = sorted(set(quantities) - set(by_id))
        if missing:
            return {"success": False, "error": f"Unknown product(s): {missing}"}, 400

        # Check and decrement in one statement so concurrent orders cannot oversell.
        # Sorted ids keep the row lock order stable.
        for product_id in sorted(quantities):
            quantity = quantities[product_id]
            updated = (
                Product.query
                .filter(Product.id == product_id, Product.stock >= quantity)
                .update({Product.stock: Product.stock - quantity}, synchronize_session=False)
            )
            if updated == 0:
                name = by_id[product_id].name
                db.session.rollback()
                return {"success": False, "error": f"Insufficient stock for {name}."}, 409

        order = Order(user_id=user_context.id, status='PENDING', shipping_address=shipping_address)
        total = 0.0
        for product_id, quantity in quantities.items():
            product = by_id[product_id]
            order.items.append(OrderItem(product=product, quantity=quantity, unit_price=product.price))
            total += quantity * product.price
        order.total = round(total, 2)

        db.session.add(order)
        db.session.commit()

        current_app.logger.info(f"Order {order.id} placed by user {user_context.id} (total {order.total})")
        return {"success": True, "order": order.to_dict(), "persisted": True}, 201

    except Exception as e:
        db.session.rollback()
        return {"success": False, "error": f"Could not place order: {str(e)}"}, 500


def _create_fallback_order(user_context, quantities, shipping_address):
    items = []
    total = 0.0
    for product_id, quantity in quantities.items():
        product = fallback.find_product(product_id)
        if product is None:
            return {"success": False, "error": f"Unknown product(s): [{product_id}]"}, 400
        if product['stock'] < quantity:
            return {"success": False, "error": f"Insufficient stock for {product['name']}."}, 409
        subtotal = quantity * product['price']
        total += subtotal
        items.append({
            'id': None,
            'product_id': product_id,
            'product_name': product['name'],
            'quantity': quantity,
            'unit_price': product['price'],
            'subtotal': subtotal,
        })

    order = {
        'id': None,
        'user_id': user_context.id,
        'status': 'PENDING',
        'total': round(total, 2),
        'shipping_address': shipping_address,
        'created_at': datetime.now(timezone.utc).isoformat(),
        'items': items,
    }
    return {"success": True, "order": order, "persisted": False}, 201
