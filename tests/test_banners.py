"""
Тесты баннеров: исключительность ссылки, проверка связанных сущностей
и откат загрузки изображения.
"""

from sqlalchemy import func, select

from catalog_api.db.models import Banner

URL = "/api/banners"


def _banner_count(session_factory) -> int:
    with session_factory() as session:
        return session.scalar(select(func.count()).select_from(Banner))


def test_create_category_banner_drops_plan_reference(
    client, admin_headers, seed, image_upload, storage
):
    category = seed.category()
    plan = seed.plan(seed.post(category))

    response = client.post(
        URL,
        data={
            "title": "Summer sale",
            "linkType": "category",
            "linkedCategoryId": category.id,
            "linkedPlanId": plan.id,
        },
        files=image_upload(),
        headers=admin_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    banner = body["data"]
    assert banner["linkType"] == "category"
    assert banner["linkedCategoryId"] == category.id
    assert banner["linkedPlanId"] is None
    assert banner["linkedCategory"] == {"id": category.id, "name": category.name}
    assert banner["linkedPlan"] is None
    assert banner["imageUrl"].startswith("https://cdn.test/banners/")
    assert len(storage.files) == 1


def test_create_banner_with_missing_category_persists_nothing(
    client, admin_headers, session_factory, image_upload, storage
):
    response = client.post(
        URL,
        data={"title": "Summer sale", "linkType": "category", "linkedCategoryId": "nope"},
        files=image_upload(),
        headers=admin_headers,
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Linked category not found"
    assert _banner_count(session_factory) == 0
    assert storage.files == {}


def test_create_banner_with_missing_plan(client, admin_headers, image_upload):
    response = client.post(
        URL,
        data={"title": "Plan promo", "linkType": "plan", "linkedPlanId": "nope"},
        files=image_upload(),
        headers=admin_headers,
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Linked plan not found"


def test_create_banner_requires_id_for_link_type(
    client, admin_headers, seed, image_upload
):
    category = seed.category()

    response = client.post(
        URL,
        data={"title": "Plan promo", "linkType": "plan", "linkedCategoryId": category.id},
        files=image_upload(),
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert "linkedPlanId" in response.json()["errors"]


def test_create_banner_rejects_unknown_link_type(client, admin_headers, image_upload):
    response = client.post(
        URL,
        data={"title": "Promo", "linkType": "video"},
        files=image_upload(),
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert "linkType" in response.json()["errors"]


def test_create_banner_requires_image(client, admin_headers, seed, session_factory):
    category = seed.category()

    response = client.post(
        URL,
        data={"title": "Promo", "linkType": "category", "linkedCategoryId": category.id},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Banner image is required"
    assert _banner_count(session_factory) == 0


def test_create_banner_rejects_non_image_file(client, admin_headers, seed):
    category = seed.category()

    response = client.post(
        URL,
        data={"title": "Promo", "linkType": "category", "linkedCategoryId": category.id},
        files={"image": ("notes.png", b"not an image at all", "image/png")},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert "image" in response.json()["errors"]


def test_storage_failure_persists_nothing(
    client, admin_headers, seed, image_upload, session_factory, failing_storage
):
    category = seed.category()

    response = client.post(
        URL,
        data={"title": "Promo", "linkType": "category", "linkedCategoryId": category.id},
        files=image_upload(),
        headers=admin_headers,
    )

    assert response.status_code == 500
    assert response.json()["message"] == "Failed to upload banner image"
    assert _banner_count(session_factory) == 0


def test_update_banner_from_category_to_plan(
    client, admin_headers, seed, image_upload, session_factory
):
    category = seed.category()
    plan = seed.plan(seed.post(category))
    created = client.post(
        URL,
        data={"title": "Promo", "linkType": "category", "linkedCategoryId": category.id},
        files=image_upload(),
        headers=admin_headers,
    ).json()["data"]

    response = client.put(
        f"{URL}/{created['id']}",
        data={"linkType": "plan", "linkedPlanId": plan.id},
        headers=admin_headers,
    )

    assert response.status_code == 200
    banner = response.json()["data"]
    assert banner["title"] == "Promo"
    assert banner["imageUrl"] == created["imageUrl"]
    assert banner["linkedCategoryId"] is None
    assert banner["linkedPlan"] == {"id": plan.id, "duration": "1 month", "price": 19.99}

    with session_factory() as session:
        stored = session.get(Banner, created["id"])
        assert stored.link_type == "plan"
        assert stored.linked_category_id is None
        assert stored.linked_plan_id == plan.id


def test_update_banner_type_change_requires_new_id(
    client, admin_headers, seed, image_upload
):
    category = seed.category()
    created = client.post(
        URL,
        data={"title": "Promo", "linkType": "category", "linkedCategoryId": category.id},
        files=image_upload(),
        headers=admin_headers,
    ).json()["data"]

    response = client.post(
        f"{URL}/{created['id']}", data={"linkType": "plan"}, headers=admin_headers
    )

    assert response.status_code == 400
    assert "linkedPlanId" in response.json()["errors"]


def test_update_banner_title_keeps_link(client, admin_headers, seed, image_upload):
    category = seed.category()
    created = client.post(
        URL,
        data={"title": "Promo", "linkType": "category", "linkedCategoryId": category.id},
        files=image_upload(),
        headers=admin_headers,
    ).json()["data"]

    response = client.put(
        f"{URL}/{created['id']}", data={"title": "Winter sale"}, headers=admin_headers
    )

    assert response.status_code == 200
    banner = response.json()["data"]
    assert banner["title"] == "Winter sale"
    assert banner["linkedCategoryId"] == category.id


def test_replacing_banner_image_removes_old_object(
    client, admin_headers, seed, image_upload, storage
):
    category = seed.category()
    created = client.post(
        URL,
        data={"title": "Promo", "linkType": "category", "linkedCategoryId": category.id},
        files=image_upload(),
        headers=admin_headers,
    ).json()["data"]

    response = client.put(
        f"{URL}/{created['id']}",
        files=image_upload(filename="new.png"),
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["data"]["imageUrl"] != created["imageUrl"]
    assert len(storage.files) == 1


def test_delete_banner(client, admin_headers, seed, session_factory):
    banner = seed.banner(seed.category())

    response = client.delete(f"{URL}/{banner.id}", headers=admin_headers)

    assert response.status_code == 200
    assert _banner_count(session_factory) == 0
    assert client.get(f"{URL}/{banner.id}", headers=admin_headers).status_code == 404


def test_orm_hook_clears_mismatched_reference(db, seed):
    category = seed.category()
    plan = seed.plan(seed.post(category))

    banner = Banner(
        title="Direct write",
        image_url="https://cdn.test/x.png",
        link_type="plan",
        linked_category_id=category.id,
        linked_plan_id=plan.id,
    )
    db.add(banner)
    db.commit()

    assert banner.linked_category_id is None
    assert banner.linked_plan_id == plan.id


def test_banner_routes_require_admin(client, user_headers):
    assert client.get(URL).status_code == 401
    assert client.get(URL, headers=user_headers).status_code == 403
