"""Translation store: metered saves, edits, listings and auto-translation."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import (
    FeatureNotAvailableException,
    LimitExceededException,
    NotFoundException,
    ValidationException,
)
from src.db.models.translation import STATUS_DRAFT, TRANSLATION_STATUSES, Translation
from src.repositories.language_repo import LanguageRepo
from src.repositories.translation_repo import TranslationRepo
from src.services import ai_translate
from src.services.entitlements import check_feature_access, check_usage_limits
from src.services.shopify_admin import ShopifyAdminClient
from src.services.shopify_content import RESOURCE_TYPES, fetch_resource
from src.services.usage import increment_usage

logger = logging.getLogger(__name__)

TRANSLATION_LIMIT_MESSAGE = "Translation limit reached for your plan. Upgrade to translate more."
PRODUCT_LIMIT_MESSAGE = "Product limit reached for your plan. Upgrade to translate more products."

# Fields the auto-translator fills in; handles and metafields stay manual.
AUTO_TRANSLATED_FIELDS = ("title", "description", "body")


def _validate_status(status: str) -> None:
    if status not in TRANSLATION_STATUSES:
        raise ValidationException(f"Invalid status: {status}")


def _validate_resource_type(resource_type: str) -> None:
    if resource_type not in RESOURCE_TYPES:
        raise ValidationException(f"Unsupported resource type: {resource_type}")


async def save_translation(
    session: AsyncSession,
    shop: str,
    *,
    resource_type: str,
    resource_id: str,
    field: str,
    language_code: str,
    translated_value: str,
    market_id: Optional[str] = None,
    status: str = STATUS_DRAFT,
    auto_translated: bool = False,
) -> Translation:
    """Create or overwrite one translation within the plan's caps.

    Every save counts one translation. The first translation of a product
    also counts against the product cap.
    """

    _validate_resource_type(resource_type)
    _validate_status(status)
    if await LanguageRepo(session).get(shop, language_code) is None:
        raise ValidationException(f"Language {language_code} not found")

    check = await check_usage_limits(session, shop, ("translations",), lock=True)
    if check.reason:
        raise LimitExceededException(check.reason)
    if not check.checks["translations"]:
        raise LimitExceededException(TRANSLATION_LIMIT_MESSAGE)

    repo = TranslationRepo(session)
    new_product = resource_type == "product" and not await repo.resource_has_translations(
        shop, resource_type, resource_id
    )
    if new_product and not check.checks["products"]:
        raise LimitExceededException(PRODUCT_LIMIT_MESSAGE)

    translation = await repo.get(
        shop, resource_type, resource_id, field, language_code, market_id
    )
    if translation is None:
        translation = Translation(
            shop=shop,
            resource_type=resource_type,
            resource_id=resource_id,
            field=field,
            language_code=language_code,
            market_id=market_id,
        )
    translation.translated_value = translated_value
    translation.status = status
    translation.auto_translated = auto_translated
    translation = await repo.add(translation)

    await increment_usage(session, shop, "translations")
    if new_product:
        await increment_usage(session, shop, "products")
    return translation


async def bulk_save_translations(
    session: AsyncSession, shop: str, items: Iterable[Dict[str, Any]]
) -> List[Translation]:
    """Save several translations in order; the first denial aborts the batch."""

    saved = []
    for item in items:
        saved.append(await save_translation(session, shop, **item))
    return saved


async def get_translations(
    session: AsyncSession,
    shop: str,
    resource_type: str,
    resource_id: str,
    market_id: Optional[str] = None,
) -> List[Translation]:
    return await TranslationRepo(session).list_for_resource(
        shop, resource_type, resource_id, market_id
    )


async def get_translation(
    session: AsyncSession,
    shop: str,
    resource_type: str,
    resource_id: str,
    field: str,
    language_code: str,
    market_id: Optional[str] = None,
) -> Optional[Translation]:
    return await TranslationRepo(session).get(
        shop, resource_type, resource_id, field, language_code, market_id
    )


async def update_translation(
    session: AsyncSession,
    shop: str,
    *,
    resource_type: str,
    resource_id: str,
    field: str,
    language_code: str,
    translated_value: str,
    status: str = STATUS_DRAFT,
    market_id: Optional[str] = None,
) -> Translation:
    _validate_status(status)
    repo = TranslationRepo(session)
    translation = await repo.get(
        shop, resource_type, resource_id, field, language_code, market_id
    )
    if translation is None:
        raise NotFoundException("Translation not found")

    translation.translated_value = translated_value
    translation.status = status
    return await repo.add(translation)


async def delete_translation(
    session: AsyncSession,
    shop: str,
    *,
    resource_type: str,
    resource_id: str,
    field: str,
    language_code: str,
    market_id: Optional[str] = None,
) -> None:
    repo = TranslationRepo(session)
    translation = await repo.get(
        shop, resource_type, resource_id, field, language_code, market_id
    )
    if translation is None:
        raise NotFoundException("Translation not found")
    await repo.remove(translation)


async def list_translations(
    session: AsyncSession,
    shop: str,
    *,
    resource_type: Optional[str] = None,
    language_code: Optional[str] = None,
    status: Optional[str] = None,
    limit: int = 50,
) -> List[Translation]:
    return await TranslationRepo(session).list_filtered(
        shop,
        resource_type=resource_type,
        language_code=language_code,
        status=status,
        limit=limit,
    )


async def get_translation_stats(session: AsyncSession, shop: str) -> Dict[str, Any]:
    repo = TranslationRepo(session)
    return {
        "total": await repo.count_for_shop(shop),
        "by_status": await repo.count_by(shop, "status"),
        "by_language": await repo.count_by(shop, "language_code"),
    }


async def auto_translate_resource(
    session: AsyncSession,
    admin: ShopifyAdminClient,
    shop: str,
    *,
    resource_type: str,
    resource_id: str,
    language_code: str,
    market_id: Optional[str] = None,
) -> List[Translation]:
    """Machine-translate a resource's text fields into ``language_code`` drafts."""

    if not await check_feature_access(session, shop, "auto_translate"):
        raise FeatureNotAvailableException("Auto-translate is not available on your plan")

    _validate_resource_type(resource_type)
    resource = await fetch_resource(admin, resource_type, resource_id)
    if resource is None:
        raise NotFoundException("Resource not found")

    source = await LanguageRepo(session).get_default(shop)
    source_language = source.code if source else "en"

    fields = [
        f for f in resource["fields"] if f["field"] in AUTO_TRANSLATED_FIELDS and f["value"]
    ]
    results = await ai_translate.translate_bulk(
        [f["value"] for f in fields],
        source_language,
        language_code,
        context=f"Shopify {resource_type}: {resource['title']}",
    )

    saved = []
    for item, result in zip(fields, results):
        saved.append(
            await save_translation(
                session,
                shop,
                resource_type=resource_type,
                resource_id=resource_id,
                field=item["field"],
                language_code=language_code,
                translated_value=result.translated_text,
                market_id=market_id,
                status=STATUS_DRAFT,
                auto_translated=True,
            )
        )
    logger.info(
        f"Auto-translated {len(saved)} fields of {resource_type} {resource_id} "
        f"into {language_code} for {shop}"
    )
    return saved
