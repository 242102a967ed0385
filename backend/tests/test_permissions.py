"""역할(USER/MODERATOR/ADMIN)별 쓰기 권한 경계를 검증하는 자동화 테스트입니다."""

import pytest

from tests.conftest import auth_headers, create_article


@pytest.mark.parametrize("path", ["/api/v1/articles", "/api/v1/blog-posts", "/api/v1/stories", "/api/v1/wiki"])
def test_content_writes_need_editor_role(client, seed_users, seed_author, path):
    payload = {"title": "Role Check", "content": "x", "author_id": seed_author.author_id}
    assert client.post(path, json=payload).status_code in (401, 403)
    assert client.post(path, json=payload, headers=auth_headers(client, "reader")).status_code == 403
    assert client.post(path, json=payload, headers=auth_headers(client, "moderator")).status_code == 201


def test_public_reads_need_no_token(client, seed_users, seed_author):
    article = create_article(client, auth_headers(client, "admin"), seed_author.author_id, status="PUBLISHED")
    assert client.get("/api/v1/articles").status_code == 200
    assert client.get(f"/api/v1/articles/{article['article_id']}").status_code == 200
    assert client.get("/api/v1/authors").status_code == 200
    assert client.get("/api/v1/wiki/tree").status_code == 200
    assert client.get("/api/v1/comments").status_code == 200
    assert client.get("/api/v1/ratings").status_code == 200


def test_role_change_forces_relogin(client, seed_users):
    reader_headers = auth_headers(client, "reader")
    admin = auth_headers(client, "admin")
    client.patch(f"/api/v1/users/{seed_users['user'].user_id}/role", json={"role": "MODERATOR"}, headers=admin)

    assert client.get("/api/v1/auth/me", headers=reader_headers).status_code == 401
    fresh = auth_headers(client, "reader")
    assert client.get("/api/v1/auth/me", headers=fresh).json()["role"] == "MODERATOR"
