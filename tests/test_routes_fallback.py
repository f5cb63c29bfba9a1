"""Every route with no database connected."""

import pytest

from storefront.fallback import FALLBACK_PRODUCTS

from conftest import auth_header, make_token


@pytest.fixture
def token(app):
    return make_token(app)


@pytest.fixture
def admin(app):
    return make_token(app, user_id=2, role='ADMIN', email='admin@example.com', username='admin')


# --- Catalog ---

def test_products_come_from_fallback_catalog(client):
    body = client.get('/api/products').get_json()

    assert body["source"] == "fallback"
    assert body["count"] == len(FALLBACK_PRODUCTS)
    assert [p["id"] for p in body["products"]] == [1, 2, 3, 4, 5, 6]


def test_products_filtered_by_category_and_search(client):
    body = client.get('/api/products?category=home').get_json()
    assert {p["name"] for p in body["products"]} == {"Coffee Maker", "Desk Lamp"}

    body = client.get('/api/products?search=leather').get_json()
    assert [p["id"] for p in body["products"]] == [3]


def test_fallback_catalog_is_not_mutated_by_callers(client):
    client.get('/api/products').get_json()["products"][0]["price"] = 0

    assert client.get('/api/products/1').get_json()["product"]["price"] == 199.99


def test_single_product(client):
    response = client.get('/api/products/4')

    assert response.status_code == 200
    assert response.get_json()["product"]["name"] == "Running Shoes"


def test_unknown_product(client):
    response = client.get('/api/products/99')

    assert response.status_code == 404
    assert response.get_json()["error_code"] == 404


def test_categories(client):
    body = client.get('/api/products/categories').get_json()

    assert body["categories"] == ["Accessories", "Electronics", "Footwear", "Home"]


# --- Accounts ---

@pytest.mark.parametrize('path', ['/api/auth/register', '/api/auth/login'])
def test_accounts_need_a_database(client, path):
    response = client.post(path, json={'email': 'a@example.com', 'username': 'a', 'password': 'long-enough'})

    assert response.status_code == 503
    assert response.get_json()["success"] is False


def test_logout_clears_cookie(client):
    response = client.post('/api/auth/logout')

    assert response.status_code == 200
    assert 'token=;' in response.headers['Set-Cookie']


def test_me_reads_token_claims(client, token):
    body = client.get('/api/auth/me', headers=auth_header(token)).get_json()

    assert body["user_id"] == 1
    assert body["role"] == "CUSTOMER"


def test_me_accepts_session_cookie(client, token):
    client.set_cookie('token', token)

    assert client.get('/api/auth/me').status_code == 200


def test_me_requires_token(client):
    response = client.get('/api/auth/me')

    assert response.status_code == 401
    assert response.get_json() == {"success": False, "error": "Authentication required."}


def test_me_rejects_bad_token(client):
    response = client.get('/api/auth/me', headers=auth_header('not-a-jwt'))

    assert response.status_code == 401


def test_profile_falls_back_to_token_claims(client, token):
    body = client.get('/api/users/profile', headers=auth_header(token)).get_json()

    assert body["source"] == "token"
    assert body["user"]["email"] == "customer@example.com"


def test_profile_update_needs_a_database(client, token):
    response = client.put('/api/users/profile', json={'username': 'new'}, headers=auth_header(token))

    assert response.status_code == 503


# --- Orders ---

def test_order_is_priced_but_not_persisted(client, token):
    response = client.post('/api/orders', json={
        'items': [{'product_id': 6, 'quantity': 2}, {'product_id': 6, 'quantity': 1}],
        'shipping_address': '1 Main St',
    }, headers=auth_header(token))

    assert response.status_code == 201
    body = response.get_json()
    assert body["persisted"] is False
    assert body["order"]["id"] is None
    assert body["order"]["total"] == 149.97
    assert body["order"]["items"][0]["quantity"] == 3


def test_order_with_unknown_product(client, token):
    response = client.post('/api/orders', json={'items': [{'product_id': 42}]}, headers=auth_header(token))

    assert response.status_code == 400


def test_order_exceeding_stock(client, token):
    response = client.post('/api/orders', json={'items': [{'product_id': 2, 'quantity': 16}]},
                           headers=auth_header(token))

    assert response.status_code == 409


@pytest.mark.parametrize('items', [[], 'nope', [{'product_id': 'x'}], [{'product_id': 1, 'quantity': 0}]])
def test_invalid_order_items(client, token, items):
    response = client.post('/api/orders', json={'items': items}, headers=auth_header(token))

    assert response.status_code == 400


def test_order_history_is_empty(client, token):
    body = client.get('/api/orders', headers=auth_header(token)).get_json()

    assert body == {"success": True, "orders": [], "source": "fallback"}


def test_single_order_is_not_found(client, token):
    assert client.get('/api/orders/1', headers=auth_header(token)).status_code == 404


def test_orders_require_auth(client):
    assert client.get('/api/orders').status_code == 401


# --- Admin ---

def test_admin_stats_from_fallback(client, admin):
    body = client.get('/api/admin/stats', headers=auth_header(admin)).get_json()

    assert body["stats"] == {"users": 0, "products": 6, "orders": 0, "revenue": 0.0, "low_stock": []}


def test_admin_routes_reject_customers(client, token):
    response = client.get('/api/admin/users', headers=auth_header(token))

    assert response.status_code == 403


def test_admin_user_list_is_empty(client, admin):
    assert client.get('/api/admin/users', headers=auth_header(admin)).get_json()["users"] == []


def test_role_change_needs_a_database(client, admin):
    response = client.post('/api/admin/users/1/role', json={'role': 'ADMIN'}, headers=auth_header(admin))

    assert response.status_code == 503


def test_order_with_non_object_body(client, token):
    response = client.post('/api/orders', json=[1], headers=auth_header(token))

    assert response.status_code == 400
    assert response.get_json()["error"] == "No data provided in the request"


def test_fractional_quantity_is_rejected(client, token):
    response = client.post('/api/orders', json={'items': [{'product_id': 1, 'quantity': 2.7}]},
                           headers=auth_header(token))

    assert response.status_code == 400
