"""
Тесты публичной витрины: главная страница и списки по родителю.
"""

from sqlalchemy.exc import OperationalError

from catalog_api.services import plan_service, post_service


def test_posts_of_empty_category(client, seed):
    category = seed.category()

    response = client.get(f"/api/public/categories/{category.id}/posts")

    assert response.status_code == 200
    body = response.json()
    assert body["data"] == []
    assert body["total"] == 0


def test_posts_of_unknown_category_skip_listing(client, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("listing must not be queried")

    monkeypatch.setattr(post_service, "list_statement", fail)
    monkeypatch.setattr(post_service, "count_statement", fail)

    response = client.get("/api/public/categories/missing/posts")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Category not found"}


def test_posts_of_category_are_filtered(client, seed):
    streaming = seed.category("Streaming")
    music = seed.category("Music")
    seed.post(streaming, "Video service")
    seed.post(music, "Audio service")

    body = client.get(f"/api/public/categories/{streaming.id}/posts").json()

    assert [p["name"] for p in body["data"]] == ["Video service"]
    assert body["data"][0]["category"] == {"id": streaming.id, "name": "Streaming"}


def test_plans_of_unknown_post(client):
    response = client.get("/api/public/posts/missing/plans")

    assert response.status_code == 404
    assert response.json()["message"] == "Post not found"


def test_plans_of_post_sorted_by_price(client, seed):
    post = seed.post(seed.category())
    seed.plan(post, price="49.00", duration="1 year")
    seed.plan(post, price="5.50", duration="1 week")
    seed.plan(post, price="19.99", duration="1 month")

    body = client.get(f"/api/public/posts/{post.id}/plans").json()

    assert [p["price"] for p in body["data"]] == [5.5, 19.99, 49.0]
    assert body["data"][0]["post"]["id"] == post.id


def test_post_detail_includes_plans(client, seed):
    category = seed.category()
    post = seed.post(category)
    seed.plan(post, price="9.00")

    response = client.get(f"/api/public/posts/{post.id}")

    assert response.status_code == 200
    detail = response.json()["data"]
    assert detail["category"]["name"] == category.name
    assert [p["price"] for p in detail["plans"]] == [9.0]


def test_post_detail_unknown(client):
    assert client.get("/api/public/posts/missing").status_code == 404


def test_home_feed(client, seed):
    category = seed.category()
    post = seed.post(category)
    for price in ["1.00", "2.00", "3.00"]:
        seed.plan(post, price=price)
    seed.banner(category)

    response = client.get("/api/public/home", params={"limit": 2})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["banners"]["count"] == 1
    assert data["banners"]["data"][0]["linkedCategory"]["id"] == category.id
    assert data["categories"]["count"] == 1
    latest = data["latestPlans"]
    assert latest["count"] == 2
    assert latest["total"] == 3
    assert latest["totalPages"] == 2
    assert latest["currentPage"] == 1
    assert latest["limit"] == 2


def test_home_feed_fails_when_one_reader_fails(client, seed, monkeypatch):
    seed.plan(seed.post(seed.category()))

    def broken(plan):
        raise OperationalError("SELECT plans", {}, Exception("plans table locked"))

    monkeypatch.setattr(plan_service, "serialize", broken)

    response = client.get("/api/public/home")

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal server error"}


def test_public_routes_need_no_token(client):
    for path in ["/api/public/banners", "/api/public/categories", "/api/public/posts"]:
        assert client.get(path).status_code == 200
