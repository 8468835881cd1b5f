from __future__ import annotations

import pytest
from fastapi import status

from conftest import API_PREFIX, SHOP, auth_headers, seed_language, seed_subscription
from src.core.config import settings
from src.services.usage import increment_usage


def translation_body(**overrides):
    body = {
        "resource_type": "product",
        "resource_id": "gid://shopify/Product/1",
        "field": "title",
        "language_code": "fr",
        "translated_value": "Chemise",
    }
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_language_creation_without_subscription_is_payment_required(client, test_db):
    response = await client.post(
        f"{API_PREFIX}/languages", json={"code": "fr", "name": "French"}, headers=auth_headers()
    )

    assert response.status_code == status.HTTP_402_PAYMENT_REQUIRED
    assert response.json()["message"] == "No active subscription"


@pytest.mark.asyncio
async def test_language_cap_is_enforced(client, test_db):
    await seed_subscription(test_db, plan_id="basic")
    headers = auth_headers()

    for code, name in (("en", "English"), ("fr", "French")):
        response = await client.post(
            f"{API_PREFIX}/languages", json={"code": code, "name": name}, headers=headers
        )
        assert response.status_code == status.HTTP_201_CREATED, response.text

    response = await client.post(
        f"{API_PREFIX}/languages", json={"code": "de", "name": "German"}, headers=headers
    )

    assert response.status_code == status.HTTP_402_PAYMENT_REQUIRED
    assert response.json()["message"] == "Language limit reached. Current: 2, Limit: 2"


@pytest.mark.asyncio
async def test_translation_cap_is_enforced(client, test_db):
    await seed_subscription(test_db, plan_id="basic")
    await seed_language(test_db, "fr")
    await increment_usage(test_db, SHOP, "translations", 100)

    response = await client.post(
        f"{API_PREFIX}/translations", json=translation_body(), headers=auth_headers()
    )

    assert response.status_code == status.HTTP_402_PAYMENT_REQUIRED
    assert response.json()["message"].startswith("Translation limit reached")


@pytest.mark.asyncio
async def test_auto_translate_is_plan_gated(client, test_db):
    await seed_subscription(test_db, plan_id="basic")
    await seed_language(test_db, "fr")

    response = await client.post(
        f"{API_PREFIX}/translations/auto-translate",
        json={"resource_type": "product", "resource_id": "gid://shopify/Product/1", "language_code": "fr"},
        headers=auth_headers(),
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["message"] == "Auto-translate is not available on your plan"


@pytest.mark.asyncio
async def test_current_limits(client, test_db):
    headers = auth_headers()
    unsubscribed = await client.get(f"{API_PREFIX}/limits/current", headers=headers)
    assert unsubscribed.json()["subscribed"] is False

    await seed_subscription(test_db, plan_id="pro")
    await seed_language(test_db, "fr")
    await increment_usage(test_db, SHOP, "translations", 10)

    body = (await client.get(f"{API_PREFIX}/limits/current", headers=headers)).json()

    assert body["subscribed"] is True
    assert body["allowed"] is True
    assert body["plan_id"] == "pro"
    assert body["languages"] == 1
    assert body["usage"]["translations_count"] == 10
    assert body["remaining"]["translations"] == 990
    assert body["remaining"]["languages"] == 4


@pytest.mark.asyncio
async def test_duplicate_idempotency_key_is_rejected(client, test_db):
    await seed_subscription(test_db, plan_id="pro")
    await seed_language(test_db, "fr")
    headers = {**auth_headers(), "Idempotency-Key": "dup-key"}

    first = await client.post(f"{API_PREFIX}/translations", json=translation_body(), headers=headers)
    second = await client.post(f"{API_PREFIX}/translations", json=translation_body(), headers=headers)

    assert first.status_code == status.HTTP_201_CREATED
    assert second.status_code == status.HTTP_409_CONFLICT
    assert second.json()["message"] == "Duplicate request (idempotency)"


@pytest.mark.asyncio
async def test_rate_limit_blocks_second_request_within_window(client, test_db, monkeypatch):
    monkeypatch.setattr(settings.limits, "rate_limit_rpm", 1)
    headers = auth_headers()

    first = await client.get(f"{API_PREFIX}/languages", headers=headers)
    second = await client.get(f"{API_PREFIX}/languages", headers=headers)

    assert first.status_code == status.HTTP_200_OK
    assert second.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    assert second.json()["message"] == "Rate limit exceeded"


@pytest.mark.asyncio
async def test_invalid_session_tokens_are_rejected(client, test_db):
    wrong_audience = await client.get(
        f"{API_PREFIX}/languages", headers=auth_headers(aud="another-app")
    )
    wrong_domain = await client.get(
        f"{API_PREFIX}/languages", headers=auth_headers(dest="https://evil.example.com")
    )
    not_bearer = await client.get(f"{API_PREFIX}/languages", headers={"Authorization": "Basic abc"})

    assert wrong_audience.status_code == status.HTTP_401_UNAUTHORIZED
    assert wrong_audience.json()["message"] == "Invalid session token"
    assert wrong_domain.json()["message"] == "Invalid shop domain"
    assert not_bearer.json()["message"] == "Missing bearer token"
