from bistro.api import api


def test_back_office_requires_a_session(client):
    for path in (api.admin.dashboard.path, api.admin.orders.path, api.admin.notices.path):
        response = client.get(path)
        assert response.status_code == 401
        assert response.json() == {"message": "Unauthorized"}

    assert client.get(api.admin.session.path).status_code == 401


def test_login_rejects_bad_credentials(client):
    response = client.post(api.admin.login.path, json={"username": "admin", "password": "wrong-password"})
    assert response.status_code == 401
    assert response.json() == {"message": "Invalid admin credentials"}

    response = client.post(api.admin.login.path, json={"username": "admin", "password": "123"})
    assert response.status_code == 400
    assert response.json()["field"] == "password"


def test_login_session_and_logout(client):
    response = client.post(api.admin.login.path, json={"username": "admin", "password": "admin123"})
    assert response.status_code == 200
    assert response.json()["username"] == "admin"
    assert "ph_admin_session" in response.headers["set-cookie"]
    assert "httponly" in response.headers["set-cookie"].lower()

    session = client.get(api.admin.session.path)
    assert session.status_code == 200
    assert session.json()["username"] == "admin"

    assert client.post(api.admin.logout.path).status_code == 204
    assert client.get(api.admin.session.path).status_code == 401


def test_tampered_cookie_is_rejected(client):
    client.cookies.set("ph_admin_session", "not-a-real-token")
    assert client.get(api.admin.dashboard.path).status_code == 401


def test_dashboard_counts(admin_client, place_order):
    place_order([{"menuItemId": 1, "quantity": 1}])
    latest = place_order([{"menuItemId": 2, "quantity": 1}])

    response = admin_client.get(api.admin.dashboard.path)

    assert response.status_code == 200
    body = response.json()
    assert body["counts"] == {
        "menuItems": 8,
        "categories": 4,
        "orders": 2,
        "activeNotices": 0,
        "cateringInquiries": 0,
    }
    assert body["recentOrders"][0]["id"] == latest["id"]


def test_menu_item_create_and_update(admin_client):
    response = admin_client.post(
        api.admin.create_menu_item.path,
        json={"categoryId": 4, "name": "Panna Cotta", "description": "Vanilla, berries", "price": "9.5"},
    )
    assert response.status_code == 201
    item = response.json()
    assert item["price"] == "9.50"
    assert item["imageUrl"] == "logo.png"

    response = admin_client.patch(
        api.admin.update_menu_item.url(item_id=item["id"]), json={"price": "10.25", "isPopular": True}
    )
    assert response.status_code == 200
    assert response.json()["price"] == "10.25"
    assert response.json()["isPopular"] is True

    desserts = admin_client.get(api.menu.list.path).json()[3]["items"]
    assert [i["name"] for i in desserts] == ["Classic Tiramisu", "Panna Cotta"]


def test_menu_item_errors(admin_client):
    response = admin_client.post(
        api.admin.create_menu_item.path,
        json={"categoryId": 99, "name": "Ghost", "description": "Not on any menu", "price": "5"},
    )
    assert response.status_code == 404
    assert response.json() == {"message": "Category not found"}

    response = admin_client.patch(api.admin.update_menu_item.url(item_id=999), json={"price": "5"})
    assert response.status_code == 404

    response = admin_client.patch(api.admin.update_menu_item.url(item_id=1), json={})
    assert response.status_code == 400


def test_price_change_leaves_past_orders_alone(admin_client, place_order):
    order = place_order([{"menuItemId": 1, "quantity": 2}])

    admin_client.patch(api.admin.update_menu_item.url(item_id=1), json={"price": "30.00"})

    stored = admin_client.get(api.admin.order.url(order_id=order["id"])).json()
    assert stored["totalAmount"] == "36.00"
    assert stored["items"][0]["priceAtTime"] == "18.00"


def test_admin_order_routes(admin_client, place_order):
    order = place_order([{"menuItemId": 6, "quantity": 1}])

    assert [o["id"] for o in admin_client.get(api.admin.orders.path).json()] == [order["id"]]

    status_url = api.admin.update_order_status.url(order_id=order["id"])
    delete_url = api.admin.delete_order.url(order_id=order["id"])
    assert admin_client.delete(delete_url).status_code == 400
    assert admin_client.patch(status_url, json={"status": "delivered"}).json()["status"] == "delivered"
    assert admin_client.delete(delete_url).status_code == 204
    assert admin_client.get(api.admin.order.url(order_id=order["id"])).status_code == 404


def test_categories(admin_client):
    response = admin_client.get(api.admin.categories.path)
    assert [c["slug"] for c in response.json()] == ["pizzas", "pasta", "starters", "desserts"]
