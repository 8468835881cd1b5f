"""Subscription plan catalog."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple

UNLIMITED = -1

INTERVAL_EVERY_30_DAYS = "EVERY_30_DAYS"
INTERVAL_ANNUAL = "ANNUAL"

FEATURES = ("auto_translate", "translation_memory", "priority_support")


@dataclass(frozen=True)
class PlanCaps:
    """Usage caps and feature flags of a plan. ``-1`` means unlimited."""

    max_languages: int
    max_translations: int
    max_products: int
    auto_translate: bool
    translation_memory: bool
    priority_support: bool

    def cap_for(self, kind: str) -> int:
        return getattr(self, f"max_{kind}")

    def has_feature(self, feature: str) -> bool:
        if feature not in FEATURES:
            return False
        return getattr(self, feature) is True


@dataclass(frozen=True)
class PlanDefinition:
    id: str
    name: str
    price: float
    billing_interval: str
    caps: PlanCaps
    trial_days: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "billing_interval": self.billing_interval,
            "trial_days": self.trial_days,
            "caps": asdict(self.caps),
        }


SUBSCRIPTION_PLANS: Tuple[PlanDefinition, ...] = (
    PlanDefinition(
        id="basic",
        name="Basic",
        price=9.99,
        billing_interval=INTERVAL_EVERY_30_DAYS,
        trial_days=14,
        caps=PlanCaps(
            max_languages=2,
            max_translations=100,
            max_products=50,
            auto_translate=False,
            translation_memory=False,
            priority_support=False,
        ),
    ),
    PlanDefinition(
        id="pro",
        name="Pro",
        price=29.99,
        billing_interval=INTERVAL_EVERY_30_DAYS,
        trial_days=14,
        caps=PlanCaps(
            max_languages=5,
            max_translations=1000,
            max_products=500,
            auto_translate=True,
            translation_memory=True,
            priority_support=False,
        ),
    ),
    PlanDefinition(
        id="enterprise",
        name="Enterprise",
        price=99.99,
        billing_interval=INTERVAL_EVERY_30_DAYS,
        caps=PlanCaps(
            max_languages=UNLIMITED,
            max_translations=UNLIMITED,
            max_products=UNLIMITED,
            auto_translate=True,
            translation_memory=True,
            priority_support=True,
        ),
    ),
)

_PLANS_BY_ID: Dict[str, PlanDefinition] = {plan.id: plan for plan in SUBSCRIPTION_PLANS}


def get_plan(plan_id: Optional[str]) -> Optional[PlanDefinition]:
    if not plan_id:
        return None
    return _PLANS_BY_ID.get(plan_id)


def within_cap(count: int, cap: int) -> bool:
    """``count < cap``, with ``-1`` meaning no cap at all."""

    return cap == UNLIMITED or count < cap


def remaining(count: int, cap: int) -> Optional[int]:
    """Quota left under ``cap``; ``None`` when unlimited."""

    if cap == UNLIMITED:
        return None
    return max(cap - count, 0)
