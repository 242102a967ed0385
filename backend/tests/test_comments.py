"""댓글 작성/답글/권한/알림 흐름을 검증하는 자동화 테스트입니다."""

from app.models.notification import Notification
from tests.conftest import auth_headers, create_article


def _comment(client, headers, content_id, text="Nice read", parent_id=None, content_type="article"):
    payload = {"content": text, "content_type": content_type, "content_id": content_id}
    if parent_id is not None:
        payload["parent_id"] = parent_id
    return client.post("/api/v1/comments", json=payload, headers=headers)


def test_comment_on_missing_content_returns_404(client, seed_users):
    resp = _comment(client, auth_headers(client, "reader"), 12345)
    assert resp.status_code == 404


def test_reply_must_belong_to_same_content(client, seed_users, seed_author):
    admin = auth_headers(client, "admin")
    first = create_article(client, admin, seed_author.author_id, title="First")
    second = create_article(client, admin, seed_author.author_id, title="Second")
    reader = auth_headers(client, "reader")

    parent = _comment(client, reader, first["article_id"]).json()
    wrong = _comment(client, reader, second["article_id"], parent_id=parent["comment_id"])
    assert wrong.status_code == 400

    missing_parent = _comment(client, reader, first["article_id"], parent_id=999)
    assert missing_parent.status_code == 404

    reply = _comment(client, reader, first["article_id"], text="Agreed", parent_id=parent["comment_id"])
    assert reply.status_code == 201

    listed = client.get(f"/api/v1/comments/content/article/{first['article_id']}").json()
    assert listed["meta"]["total"] == 1
    assert [r["content"] for r in listed["data"][0]["replies"]] == ["Agreed"]

    count = client.get(f"/api/v1/comments/content/article/{first['article_id']}/count").json()
    assert count == {"content_type": "article", "content_id": first["article_id"], "count": 2}


def test_comment_notifies_content_creator_and_parent_owner(client, db, seed_users, seed_author):
    article = create_article(client, auth_headers(client, "moderator"), seed_author.author_id)
    parent = _comment(client, auth_headers(client, "reader"), article["article_id"]).json()
    _comment(client, auth_headers(client, "other"), article["article_id"], parent_id=parent["comment_id"])

    moderator_notis = db.query(Notification).filter(Notification.user_id == seed_users["moderator"].user_id).all()
    assert [n.noti_type for n in moderator_notis] == ["content_comment"]

    reader_notis = db.query(Notification).filter(Notification.user_id == seed_users["user"].user_id).all()
    assert [n.noti_type for n in reader_notis] == ["comment_reply"]


def test_only_owner_can_edit_and_admin_can_delete(client, seed_users, seed_author):
    article = create_article(client, auth_headers(client, "admin"), seed_author.author_id)
    comment = _comment(client, auth_headers(client, "reader"), article["article_id"]).json()
    comment_id = comment["comment_id"]

    other_edit = client.put(f"/api/v1/comments/{comment_id}", json={"content": "hijack"}, headers=auth_headers(client, "other"))
    assert other_edit.status_code == 403

    own_edit = client.put(f"/api/v1/comments/{comment_id}", json={"content": "edited"}, headers=auth_headers(client, "reader"))
    assert own_edit.status_code == 200
    assert own_edit.json()["content"] == "edited"

    other_delete = client.delete(f"/api/v1/comments/{comment_id}", headers=auth_headers(client, "other"))
    assert other_delete.status_code == 403

    admin_delete = client.delete(f"/api/v1/comments/{comment_id}", headers=auth_headers(client, "admin"))
    assert admin_delete.status_code == 200
    assert client.get(f"/api/v1/comments/{comment_id}").status_code == 404


def test_deleting_parent_removes_replies(client, seed_users, seed_author):
    article = create_article(client, auth_headers(client, "admin"), seed_author.author_id)
    reader = auth_headers(client, "reader")
    parent = _comment(client, reader, article["article_id"]).json()
    reply = _comment(client, reader, article["article_id"], parent_id=parent["comment_id"]).json()

    assert client.delete(f"/api/v1/comments/{parent['comment_id']}", headers=reader).status_code == 200
    assert client.get(f"/api/v1/comments/{reply['comment_id']}").status_code == 404


def test_comment_count_appears_on_article(client, seed_users, seed_author):
    article = create_article(client, auth_headers(client, "admin"), seed_author.author_id)
    assert client.get("/api/v1/articles").json()["data"][0]["comment_count"] == 0

    _comment(client, auth_headers(client, "reader"), article["article_id"])
    assert client.get("/api/v1/articles").json()["data"][0]["comment_count"] == 1


def test_comment_validation(client, seed_users, seed_author):
    article = create_article(client, auth_headers(client, "admin"), seed_author.author_id)
    reader = auth_headers(client, "reader")
    assert _comment(client, reader, article["article_id"], text="").status_code == 422
    assert _comment(client, reader, article["article_id"], text="x" * 5001).status_code == 422
    assert _comment(client, reader, article["article_id"], content_type="podcast").status_code == 422
