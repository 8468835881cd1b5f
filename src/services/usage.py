"""Usage metering helpers."""
from __future__ import annotations

from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from src.repositories.subscription_repo import SubscriptionRepo
from src.repositories.usage_repo import UsageRepo, current_period
from src.services.plans import get_plan


async def increment_usage(
    session: AsyncSession, shop: str, kind: str, amount: int = 1
) -> None:
    """Count ``amount`` units of ``kind`` against the current period."""

    await UsageRepo(session).increment(shop, kind, amount)


async def get_usage_stats(session: AsyncSession, shop: str) -> Dict[str, Any]:
    """Current-period counters and the caps of the shop's plan, if any."""

    usage = await UsageRepo(session).get(shop)
    subscription = await SubscriptionRepo(session).get(shop)
    plan = get_plan(subscription.plan_id) if subscription else None

    return {
        "period": current_period(),
        "usage": usage.as_dict()
        if usage
        else {"languages_count": 0, "translations_count": 0, "products_count": 0},
        "limits": plan.to_dict()["caps"] if plan else None,
    }
