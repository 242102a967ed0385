"""관리자 사용자 관리(역할 변경/비활성화)와 알림 API를 검증하는 자동화 테스트입니다."""

from app.services import notification_service
from tests.conftest import auth_headers, login


def test_admin_lists_users_and_changes_roles(client, seed_users):
    admin = auth_headers(client, "admin")
    assert client.get("/api/v1/users", headers=auth_headers(client, "moderator")).status_code == 403

    users = client.get("/api/v1/users", headers=admin).json()
    assert {u["username"] for u in users} == {"admin", "moderator", "reader", "other"}

    reader_id = seed_users["user"].user_id
    promoted = client.patch(f"/api/v1/users/{reader_id}/role", json={"role": "MODERATOR"}, headers=admin)
    assert promoted.status_code == 200
    assert promoted.json()["role"] == "MODERATOR"

    bad_role = client.patch(f"/api/v1/users/{reader_id}/role", json={"role": "ROOT"}, headers=admin)
    assert bad_role.status_code == 422


def test_deactivation_revokes_tokens(client, seed_users):
    reader_tokens = login(client, "reader")
    reader_headers = {"Authorization": f"Bearer {reader_tokens['access_token']}"}
    assert client.get("/api/v1/auth/me", headers=reader_headers).status_code == 200

    admin = auth_headers(client, "admin")
    resp = client.patch(f"/api/v1/users/{seed_users['user'].user_id}/active", json={"is_active": False}, headers=admin)
    assert resp.status_code == 200
    assert resp.json()["is_active"] is False

    assert client.get("/api/v1/auth/me", headers=reader_headers).status_code == 401

    self_deactivate = client.patch(
        f"/api/v1/users/{seed_users['admin'].user_id}/active", json={"is_active": False}, headers=admin
    )
    assert self_deactivate.status_code == 400
    assert self_deactivate.json()["detail"] == "You cannot deactivate your own account"

    missing = client.patch("/api/v1/users/9999/active", json={"is_active": False}, headers=admin)
    assert missing.status_code == 404
    assert missing.json()["detail"] == "User with id 9999 not found"


def test_notifications_read_flow(client, db, seed_users):
    user_id = seed_users["user"].user_id
    for i in range(3):
        notification_service.create_notification(db, user_id=user_id, noti_type="test", title=f"Notice {i}")
    notification_service.create_notification(db, user_id=seed_users["other"].user_id, noti_type="test", title="Theirs")

    headers = auth_headers(client, "reader")
    listed = client.get("/api/v1/notifications", headers=headers).json()
    assert [n["title"] for n in listed] == ["Notice 2", "Notice 1", "Notice 0"]
    assert client.get("/api/v1/notifications/unread-count", headers=headers).json() == {"unread_count": 3}

    read = client.patch(f"/api/v1/notifications/{listed[0]['noti_id']}/read", headers=headers)
    assert read.json()["is_read"] is True
    assert client.get("/api/v1/notifications", params={"unread_only": True}, headers=headers).json()[0]["title"] == "Notice 1"

    theirs = notification_service.get_notifications(db, seed_users["other"].user_id)[0]
    assert client.patch(f"/api/v1/notifications/{theirs.noti_id}/read", headers=headers).status_code == 404

    client.post("/api/v1/notifications/read-all", headers=headers)
    assert client.get("/api/v1/notifications/unread-count", headers=headers).json() == {"unread_count": 0}
