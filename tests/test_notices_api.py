from datetime import datetime, timedelta

from bistro.api import api


def _notice(**overrides):
    return {
        "title": "Holiday hours",
        "body": "We close at 9pm on the 24th.",
        **overrides,
    }


def _create(admin_client, **overrides):
    response = admin_client.post(api.admin.create_notice.path, json=_notice(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


def test_public_notices_are_active_and_ranked(admin_client):
    past = (datetime.utcnow() - timedelta(days=1)).isoformat()
    normal = _create(admin_client, title="Normal news")
    high = _create(admin_client, title="Urgent news", priority="high")
    _create(admin_client, title="Low news", priority="low")
    _create(admin_client, title="Hidden", isActive=False)
    _create(admin_client, title="Expired", expiresAt=past)

    response = admin_client.get(api.notices.list.path)

    assert response.status_code == 200
    titles = [n["title"] for n in response.json()]
    assert titles == ["Urgent news", "Normal news", "Low news"]
    assert high["priority"] == "high"
    assert normal["isActive"] is True

    assert len(admin_client.get(api.admin.notices.path).json()) == 5


def test_notice_validation(admin_client):
    response = admin_client.post(api.admin.create_notice.path, json=_notice(title="  Hi "))
    assert response.status_code == 400
    assert response.json()["field"] == "title"

    response = admin_client.post(api.admin.create_notice.path, json=_notice(actionUrl="ftp://example.com"))
    assert response.status_code == 400
    assert response.json() == {"message": "Invalid url", "field": "actionUrl"}

    created = _create(admin_client, actionUrl="https://example.com/menu", actionLabel="See menu")
    assert created["actionUrl"] == "https://example.com/menu"


def test_update_and_clear_optional_fields(admin_client):
    notice = _create(admin_client, actionUrl="https://example.com", actionLabel="Book")
    url = api.admin.update_notice.url(notice_id=notice["id"])

    response = admin_client.patch(url, json={"actionUrl": None, "actionLabel": None, "priority": "high"})

    assert response.status_code == 200
    body = response.json()
    assert body["actionUrl"] is None
    assert body["actionLabel"] is None
    assert body["priority"] == "high"
    assert body["title"] == "Holiday hours"

    response = admin_client.patch(url, json={})
    assert response.status_code == 400
    assert response.json()["message"] == "At least one field is required"


def test_delete_notice(admin_client):
    notice = _create(admin_client)
    url = api.admin.delete_notice.url(notice_id=notice["id"])

    assert admin_client.delete(url).status_code == 204
    assert admin_client.get(api.notices.list.path).json() == []
    assert admin_client.delete(url).status_code == 404
    assert admin_client.patch(url, json={"title": "Again"}).status_code == 404
