# storefront/fallback.py
# Static catalog served while no database is connected.
# Nothing written in fallback mode is persisted.

FALLBACK_PRODUCTS = [
    {
        'id': 1,
        'name': 'Wireless Headphones',
        'description': 'Over-ear Bluetooth headphones with active noise cancelling and 30-hour battery life.',
        'price': 199.99,
        'category': 'Electronics',
        'image_url': 'https://images.unsplash.com/photo-1505740420928-5e560c06d30e',
        'stock': 25,
    },
    {
        'id': 2,
        'name': 'Smart Watch',
        'description': 'Fitness tracking, heart-rate monitor and notifications on your wrist.',
        'price': 299.99,
        'category': 'Electronics',
        'image_url': 'https://images.unsplash.com/photo-1523275335684-37898b6baf30',
        'stock': 15,
    },
    {
        'id': 3,
        'name': 'Leather Backpack',
        'description': 'Full-grain leather backpack with a padded 15-inch laptop sleeve.',
        'price': 149.99,
        'category': 'Accessories',
        'image_url': 'https://images.unsplash.com/photo-1553062407-98eeb64c6a62',
        'stock': 30,
    },
    {
        'id': 4,
        'name': 'Running Shoes',
        'description': 'Lightweight running shoes with responsive cushioning.',
        'price': 129.99,
        'category': 'Footwear',
        'image_url': 'https://images.unsplash.com/photo-1542291026-7eec264c27ff',
        'stock': 40,
    },
    {
        'id': 5,
        'name': 'Coffee Maker',
        'description': 'Programmable 12-cup drip coffee maker with thermal carafe.',
        'price': 89.99,
        'category': 'Home',
        'image_url': 'https://images.unsplash.com/photo-1495474472287-4d71bcdd2085',
        'stock': 20,
    },
    {
        'id': 6,
        'name': 'Desk Lamp',
        'description': 'Dimmable LED desk lamp with USB charging port.',
        'price': 49.99,
        'category': 'Home',
        'image_url': 'https://images.unsplash.com/photo-1507473885765-e6ed057f782c',
        'stock': 50,
    },
]


def list_products(category=None, search=None):
    """Returns copies of the fallback products, optionally filtered."""
    products = FALLBACK_PRODUCTS
    if category:
        products = [p for p in products if p['category'].lower() == category.lower()]
    if search:
        term = search.lower()
        products = [
            p for p in products
            if term in p['name'].lower() or term in p['description'].lower()
        ]
    return [dict(p) for p in products]


def find_product(product_id):
    for product in FALLBACK_PRODUCTS:
        if product['id'] == product_id:
            return dict(product)
    return None


def list_categories():
    return sorted({p['category'] for p in FALLBACK_PRODUCTS})
