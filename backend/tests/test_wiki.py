"""위키 페이지 계층(부모/자식, 순환 방지, 트리, 브레드크럼)을 검증하는 자동화 테스트입니다."""

import pytest

from app.services import wiki_service
from tests.conftest import auth_headers


def _page(client, headers, author_id, title, parent_id=None, status="PUBLISHED"):
    payload = {"title": title, "content": f"{title} body", "author_id": author_id, "status": status}
    if parent_id is not None:
        payload["parent_id"] = parent_id
    resp = client.post("/api/v1/wiki", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_create_with_missing_parent_returns_404(client, seed_users, seed_author):
    resp = client.post(
        "/api/v1/wiki",
        json={"title": "Orphan", "content": "x", "author_id": seed_author.author_id, "parent_id": 999},
        headers=auth_headers(client, "admin"),
    )
    assert resp.status_code == 404


def test_page_cannot_be_its_own_parent(client, seed_users, seed_author):
    headers = auth_headers(client, "admin")
    page = _page(client, headers, seed_author.author_id, "Self")
    resp = client.put(f"/api/v1/wiki/{page['wiki_page_id']}", json={"parent_id": page["wiki_page_id"]}, headers=headers)
    assert resp.status_code == 400
    assert "own parent" in resp.json()["detail"]


def test_circular_reference_is_rejected(client, db, seed_users, seed_author):
    headers = auth_headers(client, "admin")
    a = _page(client, headers, seed_author.author_id, "A")
    b = _page(client, headers, seed_author.author_id, "B", parent_id=a["wiki_page_id"])
    c = _page(client, headers, seed_author.author_id, "C", parent_id=b["wiki_page_id"])

    assert wiki_service.would_create_circular_reference(db, a["wiki_page_id"], c["wiki_page_id"])
    assert not wiki_service.would_create_circular_reference(db, c["wiki_page_id"], a["wiki_page_id"])

    resp = client.put(f"/api/v1/wiki/{a['wiki_page_id']}", json={"parent_id": c["wiki_page_id"]}, headers=headers)
    assert resp.status_code == 400
    assert "circular" in resp.json()["detail"]

    missing = client.put(f"/api/v1/wiki/{a['wiki_page_id']}", json={"parent_id": 9999}, headers=headers)
    assert missing.status_code == 404

    # 올바른 이동은 허용된다.
    moved = client.put(f"/api/v1/wiki/{c['wiki_page_id']}", json={"parent_id": a["wiki_page_id"]}, headers=headers)
    assert moved.status_code == 200
    assert moved.json()["parent_id"] == a["wiki_page_id"]


def test_delete_page_with_children_is_blocked(client, seed_users, seed_author):
    headers = auth_headers(client, "admin")
    parent = _page(client, headers, seed_author.author_id, "Parent")
    child = _page(client, headers, seed_author.author_id, "Child", parent_id=parent["wiki_page_id"])

    blocked = client.delete(f"/api/v1/wiki/{parent['wiki_page_id']}", headers=headers)
    assert blocked.status_code == 400

    assert client.delete(f"/api/v1/wiki/{child['wiki_page_id']}", headers=headers).status_code == 200
    assert client.delete(f"/api/v1/wiki/{parent['wiki_page_id']}", headers=headers).status_code == 200


def test_children_and_breadcrumbs(client, seed_users, seed_author):
    headers = auth_headers(client, "admin")
    root = _page(client, headers, seed_author.author_id, "Guide")
    _page(client, headers, seed_author.author_id, "Zeta", parent_id=root["wiki_page_id"])
    install = _page(client, headers, seed_author.author_id, "Install", parent_id=root["wiki_page_id"])
    linux = _page(client, headers, seed_author.author_id, "Linux", parent_id=install["wiki_page_id"])

    children = client.get(f"/api/v1/wiki/{root['wiki_page_id']}/children").json()
    assert [c["title"] for c in children] == ["Install", "Zeta"]
    assert children[0]["children_count"] == 1

    crumbs = client.get(f"/api/v1/wiki/{linux['wiki_page_id']}/breadcrumbs").json()
    assert [c["slug"] for c in crumbs] == ["guide", "install", "linux"]

    assert client.get("/api/v1/wiki/9999/breadcrumbs").status_code == 404


def _chain(client, headers, author_id, length, prefix="Level"):
    pages, parent_id = [], None
    for level in range(length):
        page = _page(client, headers, author_id, f"{prefix} {level}", parent_id=parent_id)
        pages.append(page)
        parent_id = page["wiki_page_id"]
    return pages


def _tree_depth(tree):
    node, levels = tree[0], 1
    while node["children"]:
        assert len(node["children"]) == 1
        node = node["children"][0]
        levels += 1
    return node, levels


def test_tree_contains_only_published_pages_and_respects_depth(client, seed_users, seed_author):
    headers = auth_headers(client, "admin")
    _chain(client, headers, seed_author.author_id, 8)
    _page(client, headers, seed_author.author_id, "Hidden Draft", status="DRAFT")

    tree = client.get("/api/v1/wiki/tree").json()
    assert [node["title"] for node in tree] == ["Level 0"]

    # 루트는 깊이 0이므로 MAX_TREE_DEPTH + 1 단계까지 펼쳐진다.
    last, levels = _tree_depth(tree)
    assert levels == wiki_service.MAX_TREE_DEPTH + 1
    assert last["title"] == f"Level {wiki_service.MAX_TREE_DEPTH}"
    assert last["children"] == []
    assert last["has_more_children"] is True


def test_tree_depth_limit_counts_unpublished_children(client, seed_users, seed_author):
    headers = auth_headers(client, "admin")
    pages = _chain(client, headers, seed_author.author_id, wiki_service.MAX_TREE_DEPTH + 1)
    _page(client, headers, seed_author.author_id, "Draft Leaf", parent_id=pages[-1]["wiki_page_id"], status="DRAFT")

    last, levels = _tree_depth(client.get("/api/v1/wiki/tree").json())
    assert levels == wiki_service.MAX_TREE_DEPTH + 1
    assert last["has_more_children"] is True


def test_tree_inside_depth_limit_has_no_more_children_flag(client, seed_users, seed_author):
    headers = auth_headers(client, "admin")
    pages = _chain(client, headers, seed_author.author_id, 2)
    _page(client, headers, seed_author.author_id, "Draft Leaf", parent_id=pages[-1]["wiki_page_id"], status="DRAFT")

    last, levels = _tree_depth(client.get("/api/v1/wiki/tree").json())
    assert levels == 2
    assert last["children"] == []
    assert last["has_more_children"] is False


def test_list_root_pages_and_include_children(client, seed_users, seed_author):
    headers = auth_headers(client, "admin")
    root = _page(client, headers, seed_author.author_id, "Root")
    _page(client, headers, seed_author.author_id, "Leaf", parent_id=root["wiki_page_id"])

    roots = client.get("/api/v1/wiki", params={"parent_id": "null", "include_children": True}).json()
    assert [p["title"] for p in roots["data"]] == ["Root"]
    assert roots["data"][0]["children_count"] == 1
    assert [c["title"] for c in roots["data"][0]["child_pages"]] == ["Leaf"]

    leaves = client.get("/api/v1/wiki", params={"parent_id": root["wiki_page_id"]}).json()
    assert [p["title"] for p in leaves["data"]] == ["Leaf"]
    assert leaves["data"][0]["child_pages"] is None


def test_get_page_by_id_or_slug(client, seed_users, seed_author):
    page = _page(client, auth_headers(client, "admin"), seed_author.author_id, "Handbook")
    assert client.get(f"/api/v1/wiki/{page['wiki_page_id']}").json()["slug"] == "handbook"
    assert client.get("/api/v1/wiki/handbook").json()["wiki_page_id"] == page["wiki_page_id"]
    assert client.get("/api/v1/wiki/nothing-here").status_code == 404


def _walk_to_root(client, wiki_page_id, limit):
    current, steps = wiki_page_id, 0
    while current is not None:
        assert steps <= limit, f"parent chain from {wiki_page_id} does not reach a root"
        current = client.get(f"/api/v1/wiki/{current}").json()["parent_id"]
        steps += 1
    return steps


@pytest.mark.parametrize("length", [2, 3, 4, 6, 8])
def test_reparenting_under_any_descendant_is_rejected(client, seed_users, seed_author, length):
    headers = auth_headers(client, "admin")
    pages = _chain(client, headers, seed_author.author_id, length, prefix="Node")
    root = pages[0]

    for descendant in pages[1:]:
        resp = client.put(
            f"/api/v1/wiki/{root['wiki_page_id']}",
            json={"parent_id": descendant["wiki_page_id"]},
            headers=headers,
        )
        assert resp.status_code == 400
        assert "circular" in resp.json()["detail"]

    # 중간 페이지를 그 조상이나 자손 아래로 옮겨도 순환은 생기지 않는다.
    middle_index = length // 2
    middle = pages[middle_index]
    for index, target in enumerate(pages):
        resp = client.put(
            f"/api/v1/wiki/{middle['wiki_page_id']}",
            json={"parent_id": target["wiki_page_id"]},
            headers=headers,
        )
        assert resp.status_code == (200 if index < middle_index else 400)

    for page in pages:
        _walk_to_root(client, page["wiki_page_id"], limit=length)
