from bistro.api import api


def _inquiry(**overrides):
    return {
        "name": "Lucia Bianchi",
        "email": "lucia@example.com",
        "phone": "5550100456",
        "eventDate": "2026-12-05T18:30:00+01:00",
        "guestCount": 40,
        "message": "  Birthday dinner, two vegetarian guests  ",
        **overrides,
    }


def test_create_inquiry(client):
    response = client.post(api.catering.create.path, json=_inquiry())

    assert response.status_code == 201
    body = response.json()
    assert body["id"] > 0
    assert body["guestCount"] == 40
    assert body["eventDate"] == "2026-12-05T17:30:00.000Z"
    assert body["createdAt"].endswith("Z")
    assert body["message"] == "Birthday dinner, two vegetarian guests"


def test_inquiry_validation(client):
    response = client.post(api.catering.create.path, json=_inquiry(guestCount=0))
    assert response.status_code == 400
    assert response.json()["field"] == "guestCount"

    response = client.post(api.catering.create.path, json=_inquiry(phone="123"))
    assert response.status_code == 400
    assert response.json()["field"] == "phone"


def test_admin_sees_inquiries(admin_client):
    admin_client.post(api.catering.create.path, json=_inquiry())

    response = admin_client.get(api.admin.catering.path)

    assert response.status_code == 200
    assert [i["email"] for i in response.json()] == ["lucia@example.com"]
