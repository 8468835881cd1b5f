"""Repository utilities for shop subscriptions."""
from __future__ import annotations

import datetime as dt
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models.subscription import Subscription


class SubscriptionRepo:
    """Data-access helpers for :class:`Subscription`."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, shop: str) -> Subscription | None:
        result = await self.session.execute(
            select(Subscription).where(Subscription.shop == shop)
        )
        return result.scalars().first()

    async def upsert(
        self,
        shop: str,
        plan_id: str,
        plan_name: str,
        status: str,
        shopify_subscription_id: Optional[str],
        trial_ends_at: Optional[dt.datetime] = None,
    ) -> Subscription:
        subscription = await self.session.get(Subscription, shop)
        if subscription is None:
            subscription = Subscription(
                shop=shop,
                plan_id=plan_id,
                plan_name=plan_name,
                status=status,
                shopify_subscription_id=shopify_subscription_id,
                trial_ends_at=trial_ends_at,
            )
            self.session.add(subscription)
        else:
            subscription.plan_id = plan_id
            subscription.plan_name = plan_name
            subscription.status = status
            subscription.shopify_subscription_id = shopify_subscription_id
            subscription.trial_ends_at = trial_ends_at
            subscription.cancelled_at = None
            subscription.pending_plan_id = None
            subscription.pending_subscription_id = None
            self.session.add(subscription)

        await self.session.flush()
        return subscription

    async def update(self, subscription: Subscription, **fields: Any) -> Subscription:
        for name, value in fields.items():
            setattr(subscription, name, value)
        self.session.add(subscription)
        await self.session.flush()
        return subscription
