from __future__ import annotations

import pytest
from fastapi import status

from conftest import API_PREFIX, auth_headers, seed_subscription

PRODUCT = "gid://shopify/Product/1"


@pytest.mark.asyncio
async def test_language_lifecycle(client, test_db):
    await seed_subscription(test_db, plan_id="pro")
    headers = auth_headers()

    await client.post(f"{API_PREFIX}/languages", json={"code": "en", "name": "English", "is_default": True}, headers=headers)
    await client.post(f"{API_PREFIX}/languages", json={"code": "fr", "name": "French"}, headers=headers)
    switched = await client.patch(f"{API_PREFIX}/languages/fr", json={"is_default": True}, headers=headers)
    assert switched.status_code == status.HTTP_200_OK
    assert switched.json()["is_default"] is True

    listing = (await client.get(f"{API_PREFIX}/languages", headers=headers)).json()["languages"]
    assert [(lang["code"], lang["is_default"]) for lang in listing] == [("fr", True), ("en", False)]

    refused = await client.delete(f"{API_PREFIX}/languages/fr", headers=headers)
    assert refused.status_code == status.HTTP_400_BAD_REQUEST
    assert refused.json()["message"] == "Cannot delete default language"

    deleted = await client.delete(f"{API_PREFIX}/languages/en", headers=headers)
    assert deleted.json() == {"status": "deleted", "code": "en", "translations_deleted": 0}

    missing = await client.delete(f"{API_PREFIX}/languages/en", headers=headers)
    assert missing.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_save_edit_and_sync_translation(client, test_db, fake_admin):
    await seed_subscription(test_db, plan_id="pro")
    headers = auth_headers()
    await client.post(f"{API_PREFIX}/languages", json={"code": "fr", "name": "French"}, headers=headers)

    saved = await client.post(
        f"{API_PREFIX}/translations",
        json={
            "resource_type": "product",
            "resource_id": PRODUCT,
            "field": "title",
            "language_code": "fr",
            "translated_value": "Chemise",
        },
        headers=headers,
    )
    assert saved.status_code == status.HTTP_201_CREATED, saved.text
    assert saved.json()["status"] == "draft"

    not_yet = await client.post(
        f"{API_PREFIX}/translations/sync",
        json={"resource_type": "product", "resource_id": PRODUCT, "language_code": "fr"},
        headers=headers,
    )
    assert not_yet.json() == {"success": False, "message": "No published translations found"}

    published = await client.put(
        f"{API_PREFIX}/translations",
        json={
            "resource_type": "product",
            "resource_id": PRODUCT,
            "field": "title",
            "language_code": "fr",
            "translated_value": "Chemise bleue",
            "status": "published",
        },
        headers=headers,
    )
    assert published.json()["status"] == "published"

    fake_admin.responses["productUpdate"] = {"productUpdate": {"product": {"id": PRODUCT}, "userErrors": []}}
    synced = await client.post(
        f"{API_PREFIX}/translations/sync",
        json={"resource_type": "product", "resource_id": PRODUCT, "language_code": "fr"},
        headers=headers,
    )
    assert synced.json() == {"success": True, "message": "Product translation synced"}
    assert fake_admin.calls_to("productUpdate")[0]["input"]["title"] == "Chemise bleue"

    stats = (await client.get(f"{API_PREFIX}/translations/stats", headers=headers)).json()
    assert stats == {"total": 1, "by_status": {"published": 1}, "by_language": {"fr": 1}}

    listed = await client.get(
        f"{API_PREFIX}/translations", params={"status": "published"}, headers=headers
    )
    assert [t["translated_value"] for t in listed.json()["translations"]] == ["Chemise bleue"]

    removed = await client.delete(
        f"{API_PREFIX}/translations",
        params={"resource_type": "product", "resource_id": PRODUCT, "field": "title", "language_code": "fr"},
        headers=headers,
    )
    assert removed.json() == {"status": "deleted"}


@pytest.mark.asyncio
async def test_save_translation_for_unknown_language(client, test_db):
    await seed_subscription(test_db)

    response = await client.post(
        f"{API_PREFIX}/translations",
        json={
            "resource_type": "page",
            "resource_id": "gid://shopify/Page/1",
            "field": "body",
            "language_code": "it",
            "translated_value": "<p>Ciao</p>",
        },
        headers=auth_headers(),
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "Language it not found"


@pytest.mark.asyncio
async def test_editor_and_auto_translate(client, test_db, fake_admin):
    await seed_subscription(test_db, plan_id="pro")
    headers = auth_headers()
    await client.post(f"{API_PREFIX}/languages", json={"code": "en", "name": "English", "is_default": True}, headers=headers)
    await client.post(f"{API_PREFIX}/languages", json={"code": "fr", "name": "French"}, headers=headers)
    fake_admin.responses["getCollection"] = {
        "collection": {"id": "gid://shopify/Collection/4", "title": "Summer", "description": "Hot days", "handle": "summer"}
    }

    editor = await client.get(
        f"{API_PREFIX}/translations/editor",
        params={"resource_type": "collection", "resource_id": "gid://shopify/Collection/4"},
        headers=headers,
    )
    body = editor.json()
    assert body["resource"]["title"] == "Summer"
    assert body["selected_language"] == "en"
    assert body["translations"] == []

    auto = await client.post(
        f"{API_PREFIX}/translations/auto-translate",
        json={"resource_type": "collection", "resource_id": "gid://shopify/Collection/4", "language_code": "fr"},
        headers=headers,
    )
    assert auto.status_code == status.HTTP_200_OK, auto.text
    values = {t["field"]: t["translated_value"] for t in auto.json()["translations"]}
    assert values == {
        "title": "[Translated from en to fr]: Summer",
        "description": "[Translated from en to fr]: Hot days",
    }

    missing = await client.get(
        f"{API_PREFIX}/translations/editor",
        params={"resource_type": "page", "resource_id": "gid://shopify/Page/404"},
        headers=headers,
    )
    assert missing.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_dashboard_summary(client, test_db):
    await seed_subscription(test_db, plan_id="pro")
    headers = auth_headers()
    await client.post(f"{API_PREFIX}/languages", json={"code": "fr", "name": "French"}, headers=headers)

    body = (await client.get(f"{API_PREFIX}/dashboard", headers=headers)).json()

    assert body["subscription"]["plan_id"] == "pro"
    assert body["stats"]["completion_percentage"] == 0
    assert [lang["code"] for lang in body["languages"]] == ["fr"]
    assert body["usage"]["usage"]["languages_count"] == 1
