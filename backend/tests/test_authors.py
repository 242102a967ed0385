"""작성자(Author) CRUD와 작성자별 콘텐츠 조회를 검증하는 자동화 테스트입니다."""

from tests.conftest import auth_headers, create_article


def test_author_crud_and_slug_conflicts(client, seed_users):
    headers = auth_headers(client, "moderator")
    created = client.post("/api/v1/authors", json={"name": "Ada Lovelace", "bio": "Analyst"}, headers=headers)
    assert created.status_code == 201
    author = created.json()
    assert author["slug"] == "ada-lovelace"
    assert author["content_counts"]["article"] == 0

    dup = client.post("/api/v1/authors", json={"name": "Ada  Lovelace"}, headers=headers)
    assert dup.status_code == 409

    client.post("/api/v1/authors", json={"name": "Grace Hopper"}, headers=headers)
    rename_clash = client.put(f"/api/v1/authors/{author['author_id']}", json={"name": "Grace Hopper"}, headers=headers)
    assert rename_clash.status_code == 409

    renamed = client.put(f"/api/v1/authors/{author['author_id']}", json={"name": "Ada King"}, headers=headers)
    assert renamed.json()["slug"] == "ada-king"
    assert client.get("/api/v1/authors/slug/ada-king").json()["author_id"] == author["author_id"]

    assert client.post("/api/v1/authors", json={"name": "Nobody"}, headers=auth_headers(client, "reader")).status_code == 403
    assert client.delete(f"/api/v1/authors/{author['author_id']}", headers=headers).status_code == 403
    assert client.delete(f"/api/v1/authors/{author['author_id']}", headers=auth_headers(client, "admin")).status_code == 200
    assert client.get(f"/api/v1/authors/{author['author_id']}").status_code == 404


def test_list_authors_search_and_sort(client, seed_users):
    headers = auth_headers(client, "admin")
    for name in ("Charlie Brown", "Alice Smith", "Bob Stone"):
        client.post("/api/v1/authors", json={"name": name}, headers=headers)

    listed = client.get("/api/v1/authors").json()
    assert [a["name"] for a in listed["data"]] == ["Alice Smith", "Bob Stone", "Charlie Brown"]
    assert listed["meta"]["total"] == 3

    desc = client.get("/api/v1/authors", params={"sort_order": "desc", "limit": 1}).json()
    assert desc["data"][0]["name"] == "Charlie Brown"
    assert desc["meta"]["total_pages"] == 3

    found = client.get("/api/v1/authors", params={"search": "stone"}).json()
    assert [a["name"] for a in found["data"]] == ["Bob Stone"]


def test_author_with_content_cannot_be_deleted(client, seed_users, seed_author):
    headers = auth_headers(client, "admin")
    create_article(client, headers, seed_author.author_id)
    resp = client.delete(f"/api/v1/authors/{seed_author.author_id}", headers=headers)
    assert resp.status_code == 400


def test_author_content_lists_published_items(client, seed_users, seed_author):
    headers = auth_headers(client, "admin")
    create_article(client, headers, seed_author.author_id, title="Draft Piece")
    create_article(client, headers, seed_author.author_id, title="Live Piece", status="PUBLISHED")

    resp = client.get(f"/api/v1/authors/{seed_author.author_id}/content", params={"content_type": "articles"})
    assert resp.status_code == 200
    body = resp.json()
    assert [item["title"] for item in body["data"]] == ["Live Piece"]
    assert body["data"][0]["content_type"] == "article"

    singular = client.get(f"/api/v1/authors/{seed_author.author_id}/content", params={"content_type": "article"})
    assert singular.json()["meta"]["total"] == 1

    bad = client.get(f"/api/v1/authors/{seed_author.author_id}/content", params={"content_type": "podcasts"})
    assert bad.status_code == 400

    counts = client.get(f"/api/v1/authors/{seed_author.author_id}").json()["content_counts"]
    assert counts["article"] == 2
