"""Endpoints for editing, listing and syncing translations."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_admin_client, get_db_session, get_shop
from src.core.exceptions import NotFoundException
from src.schemas.language import LanguageRead
from src.schemas.translation import (
    AutoTranslateRequest,
    SyncRequest,
    TranslationBulkSave,
    TranslationRead,
    TranslationSave,
    TranslationUpdate,
)
from src.services import language_service, translation_service
from src.services.limits import ensure_idempotent
from src.services.shopify_admin import ShopifyAdminClient
from src.services.shopify_content import RESOURCE_TYPES, fetch_resource
from src.services.sync_service import sync_translation_to_shopify


router = APIRouter(prefix="/translations", tags=["translations"])


def _many(translations):
    return {"translations": [TranslationRead.model_validate(t) for t in translations]}


@router.get("")
async def list_translations(
    resource_type: Optional[str] = None,
    language_code: Optional[str] = None,
    status_filter: Optional[str] = Query(default=None, alias="status"),
    limit: int = Query(default=50, ge=1, le=250),
    shop: str = Depends(get_shop),
    db: AsyncSession = Depends(get_db_session),
):
    translations = await translation_service.list_translations(
        db,
        shop,
        resource_type=resource_type,
        language_code=language_code,
        status=status_filter,
        limit=limit,
    )
    return _many(translations)


@router.get("/stats")
async def translation_stats(
    shop: str = Depends(get_shop), db: AsyncSession = Depends(get_db_session)
):
    return await translation_service.get_translation_stats(db, shop)


@router.get("/resource")
async def resource_translations(
    resource_type: str,
    resource_id: str,
    market_id: Optional[str] = None,
    shop: str = Depends(get_shop),
    db: AsyncSession = Depends(get_db_session),
):
    translations = await translation_service.get_translations(
        db, shop, resource_type, resource_id, market_id
    )
    return _many(translations)


@router.get("/editor")
async def translation_editor(
    resource_type: str,
    resource_id: str,
    language: Optional[str] = None,
    shop: str = Depends(get_shop),
    admin: ShopifyAdminClient = Depends(get_admin_client),
    db: AsyncSession = Depends(get_db_session),
):
    """Everything the editor screen needs for one resource."""

    if resource_type not in RESOURCE_TYPES:
        raise NotFoundException("Resource not found")
    resource = await fetch_resource(admin, resource_type, resource_id)
    if resource is None:
        raise NotFoundException("Resource not found")

    translations = await translation_service.get_translations(
        db, shop, resource_type, resource_id
    )
    languages = await language_service.get_languages(db, shop)
    return {
        "resource": resource,
        "translations": [TranslationRead.model_validate(t) for t in translations],
        "languages": [LanguageRead.model_validate(lang) for lang in languages],
        "selected_language": language or (languages[0].code if languages else ""),
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def save_translation(
    body: TranslationSave,
    shop: str = Depends(get_shop),
    idempotency_key: str | None = Header(default=None, alias="Idempotency-Key"),
    db: AsyncSession = Depends(get_db_session),
):
    await ensure_idempotent(shop, idempotency_key)
    translation = await translation_service.save_translation(db, shop, **body.model_dump())
    return TranslationRead.model_validate(translation)


@router.post("/bulk", status_code=status.HTTP_201_CREATED)
async def bulk_save_translations(
    body: TranslationBulkSave,
    shop: str = Depends(get_shop),
    idempotency_key: str | None = Header(default=None, alias="Idempotency-Key"),
    db: AsyncSession = Depends(get_db_session),
):
    await ensure_idempotent(shop, idempotency_key)
    translations = await translation_service.bulk_save_translations(
        db, shop, [item.model_dump() for item in body.translations]
    )
    return _many(translations)


@router.put("")
async def update_translation(
    body: TranslationUpdate,
    shop: str = Depends(get_shop),
    db: AsyncSession = Depends(get_db_session),
):
    translation = await translation_service.update_translation(db, shop, **body.model_dump())
    return TranslationRead.model_validate(translation)


@router.delete("")
async def delete_translation(
    resource_type: str,
    resource_id: str,
    field: str,
    language_code: str,
    market_id: Optional[str] = None,
    shop: str = Depends(get_shop),
    db: AsyncSession = Depends(get_db_session),
):
    await translation_service.delete_translation(
        db,
        shop,
        resource_type=resource_type,
        resource_id=resource_id,
        field=field,
        language_code=language_code,
        market_id=market_id,
    )
    return {"status": "deleted"}


@router.post("/sync")
async def sync_translation(
    body: SyncRequest,
    shop: str = Depends(get_shop),
    admin: ShopifyAdminClient = Depends(get_admin_client),
    db: AsyncSession = Depends(get_db_session),
):
    return await sync_translation_to_shopify(
        db,
        admin,
        shop,
        body.resource_type,
        body.resource_id,
        body.language_code,
        body.market_id,
    )


@router.post("/auto-translate")
async def auto_translate(
    body: AutoTranslateRequest,
    shop: str = Depends(get_shop),
    admin: ShopifyAdminClient = Depends(get_admin_client),
    db: AsyncSession = Depends(get_db_session),
):
    translations = await translation_service.auto_translate_resource(
        db, admin, shop, **body.model_dump()
    )
    return _many(translations)
