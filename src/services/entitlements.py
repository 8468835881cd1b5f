"""Plan entitlement checks.

Every check reads the shop's :class:`Subscription` and resolves its caps from
the static plan catalog. Denials are returned as values; callers decide
whether to turn them into an HTTP error.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import LimitExceededException
from src.db.models.subscription import Subscription
from src.db.models.usage_counter import UsageCounter
from src.repositories.language_repo import LanguageRepo
from src.repositories.subscription_repo import SubscriptionRepo
from src.repositories.usage_repo import UsageRepo
from src.services.plans import PlanCaps, PlanDefinition, get_plan, remaining, within_cap

USAGE_KINDS = ("languages", "translations", "products")

NO_ACTIVE_SUBSCRIPTION = "No active subscription"


@dataclass
class UsageCheck:
    allowed: bool
    reason: Optional[str] = None
    subscription: Optional[Subscription] = None
    plan: Optional[PlanDefinition] = None
    usage: Optional[UsageCounter] = None
    counts: Dict[str, int] = field(default_factory=dict)
    checks: Dict[str, bool] = field(default_factory=dict)

    @property
    def limits(self) -> Optional[PlanCaps]:
        return self.plan.caps if self.plan else None

    def remaining(self) -> Dict[str, Optional[int]]:
        if self.plan is None or not self.counts:
            return {}
        return {
            kind: remaining(self.counts[f"{kind}_count"], self.plan.caps.cap_for(kind))
            for kind in USAGE_KINDS
        }

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"allowed": self.allowed}
        if self.reason:
            body["reason"] = self.reason
        if self.plan is not None:
            body["plan_id"] = self.plan.id
            body["limits"] = self.plan.to_dict()["caps"]
        if self.counts:
            body["usage"] = dict(self.counts)
            body["remaining"] = self.remaining()
        if self.checks:
            body["checks"] = dict(self.checks)
        return body


@dataclass
class LanguageLimitCheck:
    allowed: bool
    current: Optional[int] = None
    limit: Optional[int] = None
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in self.__dict__.items() if v is not None}


async def _entitled_plan(
    session: AsyncSession, shop: str
) -> Tuple[Optional[Subscription], Optional[PlanDefinition]]:
    """Return the subscription and its plan, or no plan when not entitled."""

    subscription = await SubscriptionRepo(session).get(shop)
    if subscription is None or not subscription.is_active:
        return subscription, None
    return subscription, get_plan(subscription.plan_id)


async def check_usage_limits(
    session: AsyncSession,
    shop: str,
    resources: Iterable[str] = USAGE_KINDS,
    *,
    lock: bool = False,
) -> UsageCheck:
    """Compare current usage against the plan caps.

    Translations and products come from the current-period counters;
    languages are the shop's live language rows.

    ``resources`` names the counters relevant to the attempted operation;
    all three are evaluated and reported, only those decide ``allowed``.
    With ``lock=True`` the usage row stays locked until the transaction ends.
    """

    resources = tuple(resources)
    unknown = set(resources) - set(USAGE_KINDS)
    if unknown:
        raise ValueError(f"Unknown usage kinds: {sorted(unknown)}")

    subscription, plan = await _entitled_plan(session, shop)
    if plan is None:
        return UsageCheck(
            allowed=False, reason=NO_ACTIVE_SUBSCRIPTION, subscription=subscription
        )

    usage = await UsageRepo(session).get_or_create(shop, lock=lock)
    counts = usage.as_dict()
    # Languages are capped by the rows that exist, as in check_language_limit.
    counts["languages_count"] = await LanguageRepo(session).count_for_shop(shop)
    checks = {
        kind: within_cap(counts[f"{kind}_count"], plan.caps.cap_for(kind))
        for kind in USAGE_KINDS
    }
    return UsageCheck(
        allowed=all(checks[kind] for kind in resources),
        subscription=subscription,
        plan=plan,
        usage=usage,
        counts=counts,
        checks=checks,
    )


async def check_language_limit(
    session: AsyncSession, shop: str, current_count: int
) -> LanguageLimitCheck:
    """Check a live language count against the plan's language cap."""

    _, plan = await _entitled_plan(session, shop)
    if plan is None:
        return LanguageLimitCheck(allowed=False, reason=NO_ACTIVE_SUBSCRIPTION)

    limit = plan.caps.max_languages
    return LanguageLimitCheck(
        allowed=within_cap(current_count, limit),
        current=current_count,
        limit=limit,
    )


async def check_feature_access(session: AsyncSession, shop: str, feature: str) -> bool:
    _, plan = await _entitled_plan(session, shop)
    if plan is None:
        return False
    return plan.caps.has_feature(feature)


async def require_active_subscription(session: AsyncSession, shop: str) -> Subscription:
    subscription, plan = await _entitled_plan(session, shop)
    if subscription is None or plan is None:
        raise LimitExceededException(NO_ACTIVE_SUBSCRIPTION)
    return subscription
