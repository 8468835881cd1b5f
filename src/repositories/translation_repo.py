"""Repository utilities for translated content."""
from __future__ import annotations

from typing import Dict, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models.translation import STATUS_PUBLISHED, Translation


class TranslationRepo:
    """Data-access helpers for :class:`Translation`."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _market_clause(market_id: Optional[str]):
        # NULL never equals NULL in SQL, so an unscoped key is matched explicitly.
        if market_id is None:
            return Translation.market_id.is_(None)
        return Translation.market_id == market_id

    @classmethod
    def _key_clause(
        cls,
        shop: str,
        resource_type: str,
        resource_id: str,
        field: str,
        language_code: str,
        market_id: Optional[str],
    ):
        return (
            Translation.shop == shop,
            Translation.resource_type == resource_type,
            Translation.resource_id == resource_id,
            Translation.field == field,
            Translation.language_code == language_code,
            cls._market_clause(market_id),
        )

    async def get(
        self,
        shop: str,
        resource_type: str,
        resource_id: str,
        field: str,
        language_code: str,
        market_id: Optional[str] = None,
    ) -> Translation | None:
        result = await self.session.execute(
            select(Translation).where(
                *self._key_clause(
                    shop, resource_type, resource_id, field, language_code, market_id
                )
            )
        )
        return result.scalar_one_or_none()

    async def list_for_resource(
        self,
        shop: str,
        resource_type: str,
        resource_id: str,
        market_id: Optional[str] = None,
    ) -> List[Translation]:
        query = select(Translation).where(
            Translation.shop == shop,
            Translation.resource_type == resource_type,
            Translation.resource_id == resource_id,
        )
        if market_id:
            query = query.where(Translation.market_id == market_id)
        result = await self.session.execute(query.order_by(Translation.language_code.asc()))
        return list(result.scalars().all())

    async def list_published(
        self,
        shop: str,
        resource_type: str,
        resource_id: str,
        language_code: str,
        market_id: Optional[str] = None,
    ) -> List[Translation]:
        """Published rows of one language, scoped to exactly ``market_id``."""

        result = await self.session.execute(
            select(Translation).where(
                Translation.shop == shop,
                Translation.resource_type == resource_type,
                Translation.resource_id == resource_id,
                Translation.language_code == language_code,
                Translation.status == STATUS_PUBLISHED,
                self._market_clause(market_id),
            )
        )
        return list(result.scalars().all())

    async def list_filtered(
        self,
        shop: str,
        *,
        resource_type: Optional[str] = None,
        language_code: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 50,
    ) -> List[Translation]:
        query = select(Translation).where(Translation.shop == shop)
        if resource_type:
            query = query.where(Translation.resource_type == resource_type)
        if language_code:
            query = query.where(Translation.language_code == language_code)
        if status:
            query = query.where(Translation.status == status)
        result = await self.session.execute(
            query.order_by(Translation.updated_at.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def resource_has_translations(
        self, shop: str, resource_type: str, resource_id: str
    ) -> bool:
        result = await self.session.execute(
            select(Translation.id)
            .where(
                Translation.shop == shop,
                Translation.resource_type == resource_type,
                Translation.resource_id == resource_id,
            )
            .limit(1)
        )
        return result.first() is not None

    async def add(self, translation: Translation) -> Translation:
        self.session.add(translation)
        await self.session.flush()
        return translation

    async def remove(self, translation: Translation) -> None:
        await self.session.delete(translation)
        await self.session.flush()

    async def delete_for_language(self, shop: str, language_code: str) -> int:
        result = await self.session.execute(
            delete(Translation).where(
                Translation.shop == shop, Translation.language_code == language_code
            )
        )
        await self.session.flush()
        return int(result.rowcount or 0)

    async def count_for_shop(self, shop: str) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Translation).where(Translation.shop == shop)
        )
        return int(result.scalar_one() or 0)

    async def count_by(self, shop: str, column_name: str) -> Dict[str, int]:
        """Group the shop's translations by ``status`` or ``language_code``."""

        column = getattr(Translation, column_name)
        result = await self.session.execute(
            select(column, func.count())
            .where(Translation.shop == shop)
            .group_by(column)
        )
        return {key: int(count) for key, count in result.all()}
