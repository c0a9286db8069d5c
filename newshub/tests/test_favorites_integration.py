from __future__ import annotations

from collections.abc import Callable

import pytest
from flask import Flask
from flask.testing import FlaskClient


def _article(i: int, **extra) -> dict:
    return {"url": f"https://news.example/story/{i}", "title": f"Story {i}", **extra}


def test_favorites_require_session(client: FlaskClient) -> None:
    assert client.get("/api/favorites").status_code == 401
    assert client.post("/api/favorites", json=_article(1)).status_code == 401
    assert client.delete("/api/favorites/abc").status_code == 401


def test_duplicate_favorite_returns_first_id(
    client: FlaskClient, register: Callable[..., dict]
) -> None:
    register()

    first = client.post("/api/favorites", json=_article(1))
    assert first.status_code == 201
    created = first.get_json()
    assert set(created) == {"id", "addedAt"}

    again = client.post("/api/favorites", json=_article(1, title="Different title"))
    assert again.status_code == 409
    error = again.get_json()["error"]
    assert error["code"] == "AlreadyFavorited"
    assert error["id"] == created["id"]

    listing = client.get("/api/favorites").get_json()
    assert listing["total"] == 1
    assert listing["items"][0]["title"] == "Story 1"


def test_add_favorite_validates_url(client: FlaskClient, register: Callable[..., dict]) -> None:
    register()

    missing = client.post("/api/favorites", json={"title": "No url"})
    relative = client.post("/api/favorites", json={"url": "/story/1"})

    assert missing.status_code == 400
    assert missing.get_json()["error"]["fields"] == ["url"]
    assert relative.status_code == 400
    assert relative.get_json()["error"]["message"] == "A valid article URL is required"


def test_pagination_by_added_at(client: FlaskClient, register: Callable[..., dict]) -> None:
    register()
    ids = []
    for i in range(15):
        created = client.post("/api/favorites", json=_article(i))
        assert created.status_code == 201
        ids.append(created.get_json()["id"])

    first = client.get("/api/favorites?page=1&pageSize=12&sortBy=addedAt").get_json()
    second = client.get("/api/favorites?page=2&pageSize=12&sortBy=addedAt").get_json()

    assert first["total"] == second["total"] == 15
    assert len(first["items"]) == 12
    assert len(second["items"]) == 3
    assert (second["page"], second["pageSize"]) == (2, 12)
    assert [item["id"] for item in first["items"]] == list(reversed(ids[3:]))
    assert [item["id"] for item in second["items"]] == list(reversed(ids[:3]))


def test_pagination_past_the_end_is_empty(
    client: FlaskClient, register: Callable[..., dict]
) -> None:
    register()
    client.post("/api/favorites", json=_article(1))

    response = client.get("/api/favorites?page=5")

    assert response.status_code == 200
    assert response.get_json()["items"] == []
    assert response.get_json()["total"] == 1


def test_sort_and_filters(client: FlaskClient, register: Callable[..., dict]) -> None:
    register()
    client.post(
        "/api/favorites",
        json=_article(1, title="Beta", language="EN", publishedAt="2024-03-01T10:00:00Z"),
    )
    client.post(
        "/api/favorites",
        json=_article(2, title="Alpha", language="de", publishedAt="2024-01-15T08:30:00+01:00"),
    )
    client.post("/api/favorites", json=_article(3, title="Gamma", language="en"))

    newest = client.get("/api/favorites").get_json()["items"]
    assert [item["title"] for item in newest] == ["Beta", "Alpha", "Gamma"]

    oldest = client.get("/api/favorites?sortBy=oldest").get_json()["items"]
    assert [item["title"] for item in oldest] == ["Gamma", "Alpha", "Beta"]

    by_title = client.get("/api/favorites?sortBy=title").get_json()["items"]
    assert [item["title"] for item in by_title] == ["Alpha", "Beta", "Gamma"]

    english = client.get("/api/favorites?language=en").get_json()
    assert english["total"] == 2
    assert {item["language"] for item in english["items"]} == {"en"}

    ranged = client.get("/api/favorites?from=2024-02-01&to=2024-12-31").get_json()
    assert [item["title"] for item in ranged["items"]] == ["Beta"]
    assert ranged["items"][0]["publishedAt"].startswith("2024-03-01T10:00:00")

    inverted = client.get("/api/favorites?from=2024-12-31&to=2024-01-01")
    assert inverted.status_code == 400

    bad_sort = client.get("/api/favorites?sortBy=popularity")
    assert bad_sort.status_code == 400
    assert bad_sort.get_json()["error"]["fields"] == ["sortBy"]


def test_foreign_delete_is_not_found(app: Flask, register: Callable[..., dict]) -> None:
    owner = app.test_client()
    intruder = app.test_client()
    register(email="owner@example.com", name="Owner", on=owner)
    register(email="intruder@example.com", name="Intruder", on=intruder)

    favorite_id = owner.post("/api/favorites", json=_article(1)).get_json()["id"]

    foreign = intruder.delete(f"/api/favorites/{favorite_id}")
    assert foreign.status_code == 404
    assert foreign.get_json()["error"]["code"] == "NotFound"
    assert intruder.get("/api/favorites").get_json()["total"] == 0

    assert owner.delete(f"/api/favorites/{favorite_id}").status_code == 204
    assert owner.delete(f"/api/favorites/{favorite_id}").status_code == 404


def test_same_article_for_two_users(app: Flask, register: Callable[..., dict]) -> None:
    alice = app.test_client()
    bob = app.test_client()
    register(email="alice@example.com", on=alice)
    register(email="bob@example.com", name="Bob", on=bob)

    mine = alice.post("/api/favorites", json=_article(7))
    theirs = bob.post("/api/favorites", json=_article(7))

    assert mine.status_code == theirs.status_code == 201
    assert mine.get_json()["id"] != theirs.get_json()["id"]


@pytest.mark.parametrize("sort_by", ["publishedAt", "oldest", "title", "addedAt"])
def test_pages_join_up_to_the_full_listing(
    client: FlaskClient, register: Callable[..., dict], sort_by: str
) -> None:
    register()
    published = [
        "2024-05-01T00:00:00Z",
        None,
        "2024-05-01T00:00:00Z",
        "2023-11-20T12:00:00Z",
        None,
        "2024-07-04T09:15:00Z",
        "2024-05-01T00:00:00Z",
    ]
    titles = ["Same", None, "Same", "Older", None, "Zulu", "Alpha"]
    for i, (published_at, title) in enumerate(zip(published, titles)):
        article = {"url": f"https://news.example/mixed/{i}"}
        if published_at:
            article["publishedAt"] = published_at
        if title:
            article["title"] = title
        assert client.post("/api/favorites", json=article).status_code == 201

    whole = client.get(f"/api/favorites?sortBy={sort_by}&pageSize=100").get_json()
    joined = []
    for page in range(1, 4):
        chunk = client.get(f"/api/favorites?sortBy={sort_by}&pageSize=3&page={page}").get_json()
        assert chunk["total"] == 7
        joined.extend(item["id"] for item in chunk["items"])

    assert len(joined) == len(set(joined)) == 7
    assert joined == [item["id"] for item in whole["items"]]


def test_date_only_upper_bound_covers_the_whole_day(
    client: FlaskClient, register: Callable[..., dict]
) -> None:
    register()
    client.post("/api/favorites", json=_article(1, publishedAt="2024-12-31T18:00:00Z"))
    client.post("/api/favorites", json=_article(2, publishedAt="2025-01-01T00:00:00Z"))

    same_day = client.get("/api/favorites?from=2024-12-31&to=2024-12-31").get_json()
    exact = client.get("/api/favorites?to=2024-12-31T12:00:00Z").get_json()

    assert [item["title"] for item in same_day["items"]] == ["Story 1"]
    assert exact["total"] == 0
    assert client.get("/api/favorites?to=2024-02-30").status_code == 400
