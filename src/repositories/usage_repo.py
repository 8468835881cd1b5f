"""Repository helpers for usage tracking."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models.usage_counter import UsageCounter

# Counter kind -> column on ``usage_counters``. Column names are interpolated
# into SQL, so only these values may ever reach the queries below.
USAGE_COLUMNS = {
    "languages": "languages_count",
    "translations": "translations_count",
    "products": "products_count",
}


def current_period(now: Optional[datetime] = None) -> str:
    """Calendar-month key (``YYYY-MM``) in UTC."""

    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m")


class UsageRepo:
    """Provides per-period counters for metered resources."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, shop: str, period: Optional[str] = None) -> UsageCounter | None:
        result = await self.session.execute(
            select(UsageCounter)
            .where(
                UsageCounter.shop == shop,
                UsageCounter.period == (period or current_period()),
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_or_create(
        self, shop: str, period: Optional[str] = None, *, lock: bool = False
    ) -> UsageCounter:
        """Return the period row, creating it with zero counts if absent.

        With ``lock=True`` the row is read ``FOR UPDATE`` so concurrent
        check-then-increment sequences for one shop run one after another
        until the surrounding transaction ends.
        """

        period = period or current_period()
        await self.session.execute(
            text(
                """
                INSERT INTO usage_counters (shop, period, languages_count, translations_count, products_count)
                VALUES (:s, :p, 0, 0, 0)
                ON CONFLICT (shop, period) DO NOTHING
                """
            ),
            {"s": shop, "p": period},
        )
        query = (
            select(UsageCounter)
            .where(UsageCounter.shop == shop, UsageCounter.period == period)
            .execution_options(populate_existing=True)
        )
        if lock:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one()

    async def increment(self, shop: str, kind: str, amount: int = 1) -> None:
        """Add ``amount`` to one counter of the current period."""

        column = USAGE_COLUMNS.get(kind)
        if column is None:
            raise ValueError(f"Unknown usage kind: {kind}")

        initial = {name: 0 for name in USAGE_COLUMNS.values()}
        initial[column] = amount

        query = text(
            f"""
            INSERT INTO usage_counters (shop, period, languages_count, translations_count, products_count)
            VALUES (:s, :p, :languages_count, :translations_count, :products_count)
            ON CONFLICT (shop, period)
            DO UPDATE SET
              {column} = usage_counters.{column} + EXCLUDED.{column}
            """
        )
        await self.session.execute(
            query,
            {"s": shop, "p": current_period(), **initial},
        )
        await self.session.flush()
