"""기사(Article) CRUD, 슬러그 규칙, 목록 필터/캐시를 검증하는 자동화 테스트입니다."""

from app.models.content_version import ContentVersion
from tests.conftest import auth_headers, create_article


def test_create_article_generates_slug_and_version(client, db, seed_users, seed_author):
    headers = auth_headers(client, "moderator")
    body = create_article(client, headers, seed_author.author_id, title="Hello, World!")

    assert body["slug"] == "hello-world"
    assert body["status"] == "DRAFT"
    assert body["published_at"] is None
    assert body["author"]["name"] == "Jane Writer"
    assert body["user_id"] == seed_users["moderator"].user_id

    versions = db.query(ContentVersion).filter(
        ContentVersion.content_type == "article",
        ContentVersion.content_id == body["article_id"],
    ).all()
    assert [v.version_number for v in versions] == [1]
    assert versions[0].change_note == "Auto-saved version"


def test_duplicate_slug_conflicts(client, seed_users, seed_author):
    headers = auth_headers(client, "admin")
    create_article(client, headers, seed_author.author_id, title="Same Title")
    resp = client.post(
        "/api/v1/articles",
        json={"title": "same title", "content": "x", "author_id": seed_author.author_id},
        headers=headers,
    )
    assert resp.status_code == 409


def test_regular_user_cannot_create(client, seed_users, seed_author):
    resp = client.post(
        "/api/v1/articles",
        json={"title": "Nope", "content": "x", "author_id": seed_author.author_id},
        headers=auth_headers(client, "reader"),
    )
    assert resp.status_code == 403


def test_unknown_author_and_taxonomy_return_404(client, seed_users, seed_author):
    headers = auth_headers(client, "admin")
    missing_author = client.post(
        "/api/v1/articles",
        json={"title": "Orphan", "content": "x", "author_id": 9999},
        headers=headers,
    )
    assert missing_author.status_code == 404

    missing_tag = client.post(
        "/api/v1/articles",
        json={"title": "Tagged", "content": "x", "author_id": seed_author.author_id, "tag_ids": [42]},
        headers=headers,
    )
    assert missing_tag.status_code == 404


def test_published_article_gets_published_at(client, seed_users, seed_author):
    body = create_article(client, auth_headers(client, "admin"), seed_author.author_id, status="PUBLISHED")
    assert body["status"] == "PUBLISHED"
    assert body["published_at"] is not None


def test_scheduled_article_requires_time(client, seed_users, seed_author):
    resp = client.post(
        "/api/v1/articles",
        json={"title": "Later", "content": "x", "author_id": seed_author.author_id, "status": "SCHEDULED"},
        headers=auth_headers(client, "admin"),
    )
    assert resp.status_code == 422


def test_update_title_regenerates_slug_and_checks_conflicts(client, seed_users, seed_author):
    headers = auth_headers(client, "admin")
    first = create_article(client, headers, seed_author.author_id, title="First Post")
    create_article(client, headers, seed_author.author_id, title="Second Post")

    renamed = client.put(
        f"/api/v1/articles/{first['article_id']}",
        json={"title": "Renamed Post"},
        headers=headers,
    )
    assert renamed.status_code == 200
    assert renamed.json()["slug"] == "renamed-post"

    # 자기 자신의 슬러그는 충돌로 보지 않는다.
    same = client.put(
        f"/api/v1/articles/{first['article_id']}",
        json={"title": "Renamed Post", "excerpt": "short"},
        headers=headers,
    )
    assert same.status_code == 200
    assert same.json()["excerpt"] == "short"

    clash = client.put(
        f"/api/v1/articles/{first['article_id']}",
        json={"title": "Second Post"},
        headers=headers,
    )
    assert clash.status_code == 409


def test_publish_transition_sets_published_at_once(client, seed_users, seed_author):
    headers = auth_headers(client, "admin")
    article = create_article(client, headers, seed_author.author_id)
    published = client.put(f"/api/v1/articles/{article['article_id']}", json={"status": "PUBLISHED"}, headers=headers)
    first_published_at = published.json()["published_at"]
    assert first_published_at is not None

    again = client.put(f"/api/v1/articles/{article['article_id']}", json={"content": "edited"}, headers=headers)
    assert again.json()["published_at"] == first_published_at


def test_get_by_slug_increments_view_count(client, seed_users, seed_author):
    article = create_article(client, auth_headers(client, "admin"), seed_author.author_id, title="Viewed")
    assert client.get("/api/v1/articles/slug/viewed").json()["view_count"] == 1
    assert client.get("/api/v1/articles/slug/viewed").json()["view_count"] == 2
    # id 조회는 조회수를 올리지 않는다.
    assert client.get(f"/api/v1/articles/{article['article_id']}").json()["view_count"] == 2
    assert client.get("/api/v1/articles/slug/missing").status_code == 404


def test_list_pagination_and_filters(client, seed_users, seed_author, seed_taxonomy):
    headers = auth_headers(client, "admin")
    for i in range(3):
        create_article(client, headers, seed_author.author_id, title=f"Plain {i}")
    create_article(
        client,
        headers,
        seed_author.author_id,
        title="Rocket Launch",
        status="PUBLISHED",
        category_ids=[seed_taxonomy["category"].category_id],
        tag_ids=[seed_taxonomy["tag"].tag_id],
    )

    page = client.get("/api/v1/articles", params={"page": 1, "limit": 2}).json()
    assert page["meta"] == {"total": 4, "page": 1, "limit": 2, "total_pages": 2}
    assert len(page["data"]) == 2

    by_category = client.get("/api/v1/articles", params={"category": "science"}).json()
    assert [a["title"] for a in by_category["data"]] == ["Rocket Launch"]
    assert by_category["data"][0]["categories"][0]["slug"] == "science"

    by_tag = client.get("/api/v1/articles", params={"tag": "space"}).json()
    assert by_tag["meta"]["total"] == 1

    published = client.get("/api/v1/articles", params={"status": "PUBLISHED"}).json()
    assert published["meta"]["total"] == 1

    searched = client.get("/api/v1/articles", params={"search": "rocket"}).json()
    assert searched["meta"]["total"] == 1

    too_big = client.get("/api/v1/articles", params={"limit": 101})
    assert too_big.status_code == 422


def test_list_cache_is_invalidated_on_write(client, seed_users, seed_author):
    headers = auth_headers(client, "admin")
    create_article(client, headers, seed_author.author_id, title="One")
    assert client.get("/api/v1/articles").json()["meta"]["total"] == 1

    create_article(client, headers, seed_author.author_id, title="Two")
    assert client.get("/api/v1/articles").json()["meta"]["total"] == 2


def test_delete_requires_admin_and_removes_versions(client, db, seed_users, seed_author):
    article = create_article(client, auth_headers(client, "moderator"), seed_author.author_id)
    article_id = article["article_id"]

    forbidden = client.delete(f"/api/v1/articles/{article_id}", headers=auth_headers(client, "moderator"))
    assert forbidden.status_code == 403

    resp = client.delete(f"/api/v1/articles/{article_id}", headers=auth_headers(client, "admin"))
    assert resp.status_code == 200
    assert client.get(f"/api/v1/articles/{article_id}").status_code == 404
    assert db.query(ContentVersion).filter(ContentVersion.content_id == article_id).count() == 0

    again = client.delete(f"/api/v1/articles/{article_id}", headers=auth_headers(client, "admin"))
    assert again.status_code == 404


def test_blog_posts_share_content_rules(client, seed_users, seed_author):
    headers = auth_headers(client, "admin")
    resp = client.post(
        "/api/v1/blog-posts",
        json={"title": "Dev Diary", "content": "Notes", "author_id": seed_author.author_id},
        headers=headers,
    )
    assert resp.status_code == 201
    assert resp.json()["slug"] == "dev-diary"
    assert client.get("/api/v1/blog-posts/slug/dev-diary").json()["blog_post_id"] == resp.json()["blog_post_id"]


def test_title_without_slug_characters_is_rejected(client, seed_users, seed_author):
    resp = client.post(
        "/api/v1/articles",
        json={"title": "!!!", "content": "Body text", "author_id": seed_author.author_id},
        headers=auth_headers(client, "admin"),
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Cannot generate a slug from this title"
