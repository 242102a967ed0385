"""평점 upsert와 평균 계산을 검증하는 자동화 테스트입니다."""

from tests.conftest import auth_headers, create_article


def _rate(client, headers, content_id, value):
    return client.post(
        "/api/v1/ratings",
        json={"value": value, "content_type": "article", "content_id": content_id},
        headers=headers,
    )


def test_second_rating_updates_the_first(client, seed_users, seed_author):
    article = create_article(client, auth_headers(client, "admin"), seed_author.author_id)
    reader = auth_headers(client, "reader")

    first = _rate(client, reader, article["article_id"], 2)
    second = _rate(client, reader, article["article_id"], 5)
    assert first.status_code == 201
    assert second.status_code == 201
    assert first.json()["rating_id"] == second.json()["rating_id"]
    assert second.json()["value"] == 5

    listed = client.get(f"/api/v1/ratings/content/article/{article['article_id']}").json()
    assert listed["meta"]["total"] == 1


def test_average_and_count(client, seed_users, seed_author):
    article = create_article(client, auth_headers(client, "admin"), seed_author.author_id)
    url = f"/api/v1/ratings/content/article/{article['article_id']}/average"
    assert client.get(url).json() == {"average": 0.0, "count": 0}

    _rate(client, auth_headers(client, "reader"), article["article_id"], 4)
    _rate(client, auth_headers(client, "other"), article["article_id"], 5)
    assert client.get(url).json() == {"average": 4.5, "count": 2}

    listed = client.get("/api/v1/articles").json()["data"][0]
    assert listed["rating_count"] == 2
    assert listed["average_rating"] == 4.5


def test_rating_value_bounds_and_missing_content(client, seed_users, seed_author):
    article = create_article(client, auth_headers(client, "admin"), seed_author.author_id)
    reader = auth_headers(client, "reader")
    assert _rate(client, reader, article["article_id"], 0).status_code == 422
    assert _rate(client, reader, article["article_id"], 6).status_code == 422
    assert _rate(client, reader, 999, 3).status_code == 404


def test_user_rating_lookup(client, seed_users, seed_author):
    article = create_article(client, auth_headers(client, "admin"), seed_author.author_id)
    reader = auth_headers(client, "reader")
    url = f"/api/v1/ratings/user/article/{article['article_id']}"
    assert client.get(url, headers=reader).json() is None

    _rate(client, reader, article["article_id"], 3)
    assert client.get(url, headers=reader).json()["value"] == 3


def test_update_and_delete_ownership(client, seed_users, seed_author):
    article = create_article(client, auth_headers(client, "admin"), seed_author.author_id)
    rating = _rate(client, auth_headers(client, "reader"), article["article_id"], 3).json()
    rating_id = rating["rating_id"]

    assert client.put(f"/api/v1/ratings/{rating_id}", json={"value": 1}, headers=auth_headers(client, "other")).status_code == 403
    updated = client.put(f"/api/v1/ratings/{rating_id}", json={"value": 1}, headers=auth_headers(client, "reader"))
    assert updated.json()["value"] == 1

    assert client.delete(f"/api/v1/ratings/{rating_id}", headers=auth_headers(client, "other")).status_code == 403
    assert client.delete(f"/api/v1/ratings/{rating_id}", headers=auth_headers(client, "admin")).status_code == 200
    assert client.get(f"/api/v1/ratings/{rating_id}").status_code == 404
