from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from conftest import SHOP, FakeAdmin, seed_language, seed_subscription
from src.core.exceptions import (
    FeatureNotAvailableException,
    LimitExceededException,
    NotFoundException,
    ValidationException,
)
from src.db.models.translation import Translation
from src.repositories.usage_repo import UsageRepo
from src.services import translation_service
from src.services.usage import increment_usage

PRODUCT = "gid://shopify/Product/1"


def translation_kwargs(**overrides):
    values = {
        "resource_type": "product",
        "resource_id": PRODUCT,
        "field": "title",
        "language_code": "fr",
        "translated_value": "Chemise",
    }
    values.update(overrides)
    return values


@pytest.mark.asyncio
async def test_save_requires_existing_language(test_db):
    await seed_subscription(test_db)

    with pytest.raises(ValidationException) as exc:
        await translation_service.save_translation(test_db, SHOP, **translation_kwargs())

    assert exc.value.message == "Language fr not found"


@pytest.mark.asyncio
async def test_save_without_subscription_is_denied(test_db):
    await seed_language(test_db, "fr")

    with pytest.raises(LimitExceededException) as exc:
        await translation_service.save_translation(test_db, SHOP, **translation_kwargs())

    assert exc.value.message == "No active subscription"


@pytest.mark.asyncio
async def test_save_upserts_and_meters(test_db):
    await seed_subscription(test_db)
    await seed_language(test_db, "fr")

    first = await translation_service.save_translation(test_db, SHOP, **translation_kwargs())
    second = await translation_service.save_translation(
        test_db, SHOP, **translation_kwargs(translated_value="Chemise bleue", status="published")
    )
    await translation_service.save_translation(
        test_db, SHOP, **translation_kwargs(field="description", translated_value="<p>Coton</p>")
    )

    assert first.id == second.id
    assert second.translated_value == "Chemise bleue"
    assert second.status == "published"
    usage = await UsageRepo(test_db).get(SHOP)
    assert usage.translations_count == 3
    assert usage.products_count == 1


@pytest.mark.asyncio
async def test_market_scoped_translation_is_separate(test_db):
    await seed_subscription(test_db)
    await seed_language(test_db, "fr")

    plain = await translation_service.save_translation(test_db, SHOP, **translation_kwargs())
    scoped = await translation_service.save_translation(
        test_db, SHOP, **translation_kwargs(market_id="gid://shopify/Market/7", translated_value="Chemise CA")
    )

    assert plain.id != scoped.id
    everything = await translation_service.get_translations(test_db, SHOP, "product", PRODUCT)
    market_only = await translation_service.get_translations(
        test_db, SHOP, "product", PRODUCT, "gid://shopify/Market/7"
    )
    assert len(everything) == 2
    assert [t.translated_value for t in market_only] == ["Chemise CA"]


@pytest.mark.asyncio
async def test_translation_cap_blocks_save(test_db):
    await seed_subscription(test_db, plan_id="basic")
    await seed_language(test_db, "fr")
    await increment_usage(test_db, SHOP, "translations", 100)

    with pytest.raises(LimitExceededException) as exc:
        await translation_service.save_translation(test_db, SHOP, **translation_kwargs())

    assert exc.value.message == translation_service.TRANSLATION_LIMIT_MESSAGE
    assert await translation_service.get_translation(
        test_db, SHOP, "product", PRODUCT, "title", "fr"
    ) is None


@pytest.mark.asyncio
async def test_product_cap_applies_to_new_products_only(test_db):
    await seed_subscription(test_db, plan_id="basic")
    await seed_language(test_db, "fr")
    await translation_service.save_translation(test_db, SHOP, **translation_kwargs())
    await increment_usage(test_db, SHOP, "products", 49)

    with pytest.raises(LimitExceededException) as exc:
        await translation_service.save_translation(
            test_db, SHOP, **translation_kwargs(resource_id="gid://shopify/Product/2")
        )
    assert exc.value.message == translation_service.PRODUCT_LIMIT_MESSAGE

    again = await translation_service.save_translation(
        test_db, SHOP, **translation_kwargs(field="description")
    )
    assert again.field == "description"

    page = await translation_service.save_translation(
        test_db, SHOP, **translation_kwargs(resource_type="page", resource_id="gid://shopify/Page/3")
    )
    assert page.resource_type == "page"


@pytest.mark.asyncio
async def test_invalid_status_and_resource_type(test_db):
    await seed_subscription(test_db)
    await seed_language(test_db, "fr")

    with pytest.raises(ValidationException):
        await translation_service.save_translation(test_db, SHOP, **translation_kwargs(status="live"))
    with pytest.raises(ValidationException):
        await translation_service.save_translation(
            test_db, SHOP, **translation_kwargs(resource_type="blog")
        )


@pytest.mark.asyncio
async def test_update_and_delete(test_db):
    await seed_subscription(test_db)
    await seed_language(test_db, "fr")
    await translation_service.save_translation(test_db, SHOP, **translation_kwargs())
    key = {k: v for k, v in translation_kwargs().items() if k != "translated_value"}

    updated = await translation_service.update_translation(
        test_db, SHOP, translated_value="Chemisier", status="review", **key
    )
    assert (updated.translated_value, updated.status) == ("Chemisier", "review")

    await translation_service.delete_translation(test_db, SHOP, **key)
    assert await translation_service.get_translation(test_db, SHOP, "product", PRODUCT, "title", "fr") is None

    with pytest.raises(NotFoundException):
        await translation_service.delete_translation(test_db, SHOP, **key)
    with pytest.raises(NotFoundException):
        await translation_service.update_translation(test_db, SHOP, translated_value="x", **key)


@pytest.mark.asyncio
async def test_bulk_save_and_stats(test_db):
    await seed_subscription(test_db, plan_id="pro")
    await seed_language(test_db, "fr")
    await seed_language(test_db, "de")

    saved = await translation_service.bulk_save_translations(
        test_db,
        SHOP,
        [
            translation_kwargs(),
            translation_kwargs(language_code="de", translated_value="Hemd", status="published"),
            translation_kwargs(field="description", status="published"),
        ],
    )
    assert len(saved) == 3

    stats = await translation_service.get_translation_stats(test_db, SHOP)
    assert stats == {
        "total": 3,
        "by_status": {"draft": 1, "published": 2},
        "by_language": {"fr": 2, "de": 1},
    }

    published = await translation_service.list_translations(test_db, SHOP, status="published")
    assert len(published) == 2
    german = await translation_service.list_translations(test_db, SHOP, language_code="de")
    assert [t.translated_value for t in german] == ["Hemd"]


@pytest.mark.asyncio
async def test_auto_translate_requires_feature(test_db):
    await seed_subscription(test_db, plan_id="basic")
    await seed_language(test_db, "fr")

    with pytest.raises(FeatureNotAvailableException):
        await translation_service.auto_translate_resource(
            test_db, FakeAdmin(), SHOP, resource_type="product", resource_id=PRODUCT, language_code="fr"
        )


@pytest.mark.asyncio
async def test_auto_translate_stores_drafts(test_db):
    await seed_subscription(test_db, plan_id="pro")
    await seed_language(test_db, "en", is_default=True)
    await seed_language(test_db, "fr")
    admin = FakeAdmin()
    admin.responses["getProduct"] = {
        "product": {
            "id": PRODUCT,
            "title": "Shirt",
            "description": "<p>Cotton</p>",
            "handle": "shirt",
            "metafields": {"edges": []},
        }
    }

    saved = await translation_service.auto_translate_resource(
        test_db, admin, SHOP, resource_type="product", resource_id=PRODUCT, language_code="fr"
    )

    assert sorted(t.field for t in saved) == ["description", "title"]
    title = next(t for t in saved if t.field == "title")
    assert title.translated_value == "[Translated from en to fr]: Shirt"
    assert title.status == "draft"
    assert title.auto_translated is True


@pytest.mark.asyncio
async def test_auto_translate_missing_resource(test_db):
    await seed_subscription(test_db, plan_id="enterprise")
    await seed_language(test_db, "fr")

    with pytest.raises(NotFoundException):
        await translation_service.auto_translate_resource(
            test_db, FakeAdmin(), SHOP, resource_type="page", resource_id="gid://shopify/Page/9", language_code="fr"
        )


@pytest.mark.asyncio
async def test_unscoped_key_is_unique_in_the_database(test_db):
    key = {
        "shop": SHOP,
        "resource_type": "product",
        "resource_id": PRODUCT,
        "field": "title",
        "language_code": "fr",
    }
    test_db.add(Translation(**key, market_id="gid://shopify/Market/1", translated_value="A"))
    test_db.add(Translation(**key, market_id="gid://shopify/Market/2", translated_value="B"))
    test_db.add(Translation(**key, translated_value="C"))
    await test_db.flush()

    test_db.add(Translation(**key, translated_value="D"))
    with pytest.raises(IntegrityError):
        await test_db.flush()
    await test_db.rollback()
