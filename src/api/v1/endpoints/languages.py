"""Endpoints for the shop's target languages."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_db_session, get_shop
from src.core.exceptions import NotFoundException
from src.schemas.language import LanguageCreate, LanguageRead, LanguageUpdate
from src.services import language_service


router = APIRouter(prefix="/languages", tags=["languages"])


@router.get("")
async def list_languages(
    shop: str = Depends(get_shop), db: AsyncSession = Depends(get_db_session)
):
    languages = await language_service.get_languages(db, shop)
    return {"languages": [LanguageRead.model_validate(lang) for lang in languages]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_language(
    body: LanguageCreate,
    shop: str = Depends(get_shop),
    db: AsyncSession = Depends(get_db_session),
):
    language = await language_service.create_language(
        db, shop, body.code, body.name, body.is_default
    )
    return LanguageRead.model_validate(language)


@router.get("/default")
async def default_language(
    shop: str = Depends(get_shop), db: AsyncSession = Depends(get_db_session)
):
    language = await language_service.get_default_language(db, shop)
    if language is None:
        raise NotFoundException("No default language")
    return LanguageRead.model_validate(language)


@router.get("/{code}")
async def get_language(
    code: str, shop: str = Depends(get_shop), db: AsyncSession = Depends(get_db_session)
):
    language = await language_service.get_language(db, shop, code)
    if language is None:
        raise NotFoundException(f"Language {code} not found")
    return LanguageRead.model_validate(language)


@router.patch("/{code}")
async def update_language(
    code: str,
    body: LanguageUpdate,
    shop: str = Depends(get_shop),
    db: AsyncSession = Depends(get_db_session),
):
    language = await language_service.update_language(
        db, shop, code, name=body.name, is_default=body.is_default
    )
    return LanguageRead.model_validate(language)


@router.delete("/{code}")
async def delete_language(
    code: str, shop: str = Depends(get_shop), db: AsyncSession = Depends(get_db_session)
):
    removed = await language_service.delete_language(db, shop, code)
    return {"status": "deleted", "code": code, "translations_deleted": removed}
