"""Shop language management."""
from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import LimitExceededException, NotFoundException, ValidationException
from src.db.models.language import Language
from src.repositories.language_repo import LanguageRepo
from src.repositories.translation_repo import TranslationRepo
from src.repositories.usage_repo import UsageRepo
from src.services.entitlements import check_language_limit
from src.services.usage import increment_usage

logger = logging.getLogger(__name__)


async def create_language(
    session: AsyncSession, shop: str, code: str, name: str, is_default: bool = False
) -> Language:
    """Add a language within the plan's language cap.

    The usage row of the shop is locked first, so concurrent creates are
    counted one after another.
    """

    repo = LanguageRepo(session)
    await UsageRepo(session).get_or_create(shop, lock=True)
    check = await check_language_limit(session, shop, await repo.count_for_shop(shop))
    if check.reason:
        raise LimitExceededException(check.reason)
    if not check.allowed:
        raise LimitExceededException(
            f"Language limit reached. Current: {check.current}, Limit: {check.limit}"
        )

    if await repo.get(shop, code) is not None:
        raise ValidationException(f"Language {code} already exists")

    if is_default:
        await repo.clear_default(shop)
    language = await repo.create(shop, code, name, is_default)
    await increment_usage(session, shop, "languages")
    logger.info(f"Added language {code} for {shop}")
    return language


async def get_languages(session: AsyncSession, shop: str) -> List[Language]:
    return await LanguageRepo(session).list_for_shop(shop)


async def get_language(session: AsyncSession, shop: str, code: str) -> Optional[Language]:
    return await LanguageRepo(session).get(shop, code)


async def get_default_language(session: AsyncSession, shop: str) -> Optional[Language]:
    return await LanguageRepo(session).get_default(shop)


async def update_language(
    session: AsyncSession,
    shop: str,
    code: str,
    *,
    name: Optional[str] = None,
    is_default: Optional[bool] = None,
) -> Language:
    repo = LanguageRepo(session)
    language = await repo.get(shop, code)
    if language is None:
        raise NotFoundException(f"Language {code} not found")

    if name is not None:
        language.name = name
    if is_default:
        await UsageRepo(session).get_or_create(shop, lock=True)
        await repo.clear_default(shop)
        language.is_default = True
    elif is_default is False:
        language.is_default = False
    return await repo.save(language)


async def delete_language(session: AsyncSession, shop: str, code: str) -> int:
    """Delete a non-default language and its translations.

    Returns the number of translations removed with it.
    """

    repo = LanguageRepo(session)
    language = await repo.get(shop, code)
    if language is None:
        raise NotFoundException(f"Language {code} not found")
    if language.is_default:
        raise ValidationException("Cannot delete default language")

    removed = await TranslationRepo(session).delete_for_language(shop, code)
    await repo.delete(shop, code)
    logger.info(f"Deleted language {code} for {shop} with {removed} translations")
    return removed
