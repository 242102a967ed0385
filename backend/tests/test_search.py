"""MeiliSearch 연동 검색/자동완성/색인 동작을 httpx 대역으로 검증하는 자동화 테스트입니다."""

import httpx

from app.config import settings
from app.services.search_service import SearchService
from tests.conftest import auth_headers, create_article


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            request = httpx.Request("POST", "http://search.test")
            raise httpx.HTTPStatusError("error", request=request, response=httpx.Response(self.status_code, request=request))

    def json(self):
        return self._payload


def _enable_search(monkeypatch):
    monkeypatch.setattr(settings, "MEILI_ENABLED", True)
    monkeypatch.setattr(settings, "MEILI_HOST", "http://search.test")
    monkeypatch.setattr(settings, "MEILI_MASTER_KEY", "master")


def test_search_disabled_returns_503(client):
    resp = client.get("/api/v1/search", params={"q": "rocket"})
    assert resp.status_code == 503


def test_build_filter_always_restricts_to_published():
    assert SearchService.build_filter(None, None) == ["status = PUBLISHED"]
    assert SearchService.build_filter(["article", "story"], None) == [
        ["content_type = article", "content_type = story"],
        "status = PUBLISHED",
    ]
    assert SearchService.build_filter(["article"], "author_id = 3") == [
        "author_id = 3",
        ["content_type = article"],
        "status = PUBLISHED",
    ]


def test_user_filter_cannot_escape_published_clause(client, monkeypatch):
    _enable_search(monkeypatch)
    sent = []

    def fake_post(url, headers=None, json=None, timeout=None):
        sent.append(json["filter"])
        return FakeResponse({"hits": [], "query": json["q"], "limit": 20, "offset": 0, "estimatedTotalHits": 0})

    monkeypatch.setattr("httpx.post", fake_post)
    crafted = "content_type = article) OR (content_type = article"
    resp = client.get("/api/v1/search", params={"q": "leak", "filter": crafted})
    assert resp.status_code == 200, resp.text

    # 사용자 필터는 독립된 배열 요소로 전달되고, 발행 조건은 항상 별도 요소로 AND 된다.
    assert sent == [[crafted, "status = PUBLISHED"]]


def test_invalid_filter_returns_400(client, monkeypatch):
    _enable_search(monkeypatch)
    monkeypatch.setattr("httpx.post", lambda url, headers=None, json=None, timeout=None: FakeResponse({}, status_code=400))
    resp = client.get("/api/v1/search", params={"q": "x", "filter": "status = ("})
    assert resp.status_code == 400


def test_search_is_cached_and_tracked(client, monkeypatch):
    _enable_search(monkeypatch)
    calls = []

    def fake_post(url, headers=None, json=None, timeout=None):
        calls.append((url, json))
        return FakeResponse({
            "hits": [{"id": "article-1", "title": "Rocket"}],
            "query": json["q"],
            "processingTimeMs": 3,
            "limit": json["limit"],
            "offset": json["offset"],
            "estimatedTotalHits": 1,
        })

    monkeypatch.setattr("httpx.post", fake_post)

    first = client.get("/api/v1/search", params={"q": "Rocket", "content_types": "article"})
    assert first.status_code == 200, first.text
    assert first.json()["estimated_total_hits"] == 1
    assert calls[0][0] == "http://search.test/indexes/content/search"
    assert calls[0][1]["filter"] == [["content_type = article"], "status = PUBLISHED"]

    second = client.get("/api/v1/search", params={"q": "Rocket", "content_types": "article"})
    assert second.json() == first.json()
    assert len(calls) == 1

    popular = client.get("/api/v1/search/popular").json()
    assert popular == [{"query": "rocket", "count": 2}]


def test_search_rejects_unknown_content_type(client, monkeypatch):
    _enable_search(monkeypatch)
    resp = client.get("/api/v1/search", params={"q": "x", "content_types": "podcast"})
    assert resp.status_code == 400


def test_autocomplete_maps_hits(client, monkeypatch):
    _enable_search(monkeypatch)

    def fake_post(url, headers=None, json=None, timeout=None):
        return FakeResponse({"hits": [{"content_id": 4, "title": "Rockets", "slug": "rockets", "content_type": "story"}]})

    monkeypatch.setattr("httpx.post", fake_post)
    resp = client.get("/api/v1/search/autocomplete", params={"q": "Roc"})
    assert resp.json() == [{"id": 4, "title": "Rockets", "slug": "rockets", "content_type": "story"}]


def test_content_writes_are_indexed(client, monkeypatch, seed_users, seed_author):
    _enable_search(monkeypatch)
    posted, deleted = [], []

    def fake_post(url, headers=None, json=None, timeout=None):
        posted.append((url, json))
        return FakeResponse({"taskUid": 1})

    def fake_delete(url, headers=None, timeout=None):
        deleted.append(url)
        return FakeResponse({"taskUid": 2})

    monkeypatch.setattr("httpx.post", fake_post)
    monkeypatch.setattr("httpx.delete", fake_delete)

    headers = auth_headers(client, "admin")
    article = create_article(client, headers, seed_author.author_id, title="Indexed Article")

    url, documents = posted[-1]
    assert url == "http://search.test/indexes/content/documents"
    assert documents[0]["id"] == f"article-{article['article_id']}"
    assert documents[0]["author_name"] == "Jane Writer"
    assert documents[0]["excerpt"] == "Body text"

    client.delete(f"/api/v1/articles/{article['article_id']}", headers=headers)
    assert deleted == [f"http://search.test/indexes/content/documents/article-{article['article_id']}"]


def test_clear_cache_requires_admin(client, seed_users):
    assert client.post("/api/v1/search/clear-cache", headers=auth_headers(client, "reader")).status_code == 403
    resp = client.post("/api/v1/search/clear-cache", headers=auth_headers(client, "admin"))
    assert resp.status_code == 200


def test_index_single_item_requires_existing_content(client, seed_users):
    resp = client.post("/api/v1/search/index/article/999", headers=auth_headers(client, "admin"))
    assert resp.status_code == 404


def test_autocomplete_failure_is_not_cached(client, monkeypatch):
    _enable_search(monkeypatch)

    def failing_post(url, headers=None, json=None, timeout=None):
        raise httpx.ConnectError("search backend down")

    monkeypatch.setattr("httpx.post", failing_post)
    assert client.get("/api/v1/search/autocomplete", params={"q": "guide"}).json() == []

    def recovered_post(url, headers=None, json=None, timeout=None):
        return FakeResponse({"hits": [{"content_id": 7, "title": "Guide", "slug": "guide", "content_type": "wiki_page"}]})

    monkeypatch.setattr("httpx.post", recovered_post)
    resp = client.get("/api/v1/search/autocomplete", params={"q": "guide"})
    assert resp.json() == [{"id": 7, "title": "Guide", "slug": "guide", "content_type": "wiki_page"}]
