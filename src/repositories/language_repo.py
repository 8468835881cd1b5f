"""Repository utilities for shop languages."""
from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models.language import Language


class LanguageRepo:
    """Simple data-access helper for Language entities."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_for_shop(self, shop: str) -> List[Language]:
        result = await self.session.execute(
            select(Language)
            .where(Language.shop == shop)
            .order_by(Language.is_default.desc(), Language.name.asc())
        )
        return list(result.scalars().all())

    async def get(self, shop: str, code: str) -> Optional[Language]:
        result = await self.session.execute(
            select(Language).where(Language.shop == shop, Language.code == code)
        )
        return result.scalar_one_or_none()

    async def get_default(self, shop: str) -> Optional[Language]:
        result = await self.session.execute(
            select(Language).where(Language.shop == shop, Language.is_default.is_(True))
        )
        return result.scalars().first()

    async def count_for_shop(self, shop: str) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Language).where(Language.shop == shop)
        )
        value = result.scalar_one()
        return int(value or 0)

    async def create(self, shop: str, code: str, name: str, is_default: bool) -> Language:
        language = Language(shop=shop, code=code, name=name, is_default=is_default)
        self.session.add(language)
        await self.session.flush()
        return language

    async def clear_default(self, shop: str) -> None:
        await self.session.execute(
            update(Language)
            .where(Language.shop == shop, Language.is_default.is_(True))
            .values(is_default=False)
        )
        await self.session.flush()

    async def save(self, language: Language) -> Language:
        self.session.add(language)
        await self.session.flush()
        return language

    async def delete(self, shop: str, code: str) -> None:
        await self.session.execute(
            delete(Language).where(Language.shop == shop, Language.code == code)
        )
        await self.session.flush()
