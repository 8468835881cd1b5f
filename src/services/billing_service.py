"""Shopify app subscription billing and the local subscription mirror."""
from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Dict, Optional, Tuple

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.core.exceptions import ExternalServiceException, ValidationException
from src.db.base import utcnow
from src.db.models.subscription import (
    STATUS_ACTIVE,
    STATUS_CANCELLED,
    STATUS_PENDING,
    Subscription,
)
from src.repositories.subscription_repo import SubscriptionRepo
from src.services.plans import INTERVAL_ANNUAL, PlanDefinition, get_plan
from src.services.shopify_admin import ShopifyAdminClient, join_error_messages

logger = logging.getLogger(__name__)

APP_SUBSCRIPTION_CREATE = """
mutation appSubscriptionCreate(
  $name: String!
  $lineItems: [AppSubscriptionLineItemInput!]!
  $returnUrl: URL!
  $trialDays: Int
  $test: Boolean
) {
  appSubscriptionCreate(
    name: $name
    lineItems: $lineItems
    returnUrl: $returnUrl
    trialDays: $trialDays
    test: $test
  ) {
    appSubscription { id name status currentPeriodEnd }
    confirmationUrl
    userErrors { field message }
  }
}
"""

APP_SUBSCRIPTION_QUERY = """
query appSubscription($id: ID!) {
  node(id: $id) {
    ... on AppSubscription { id status currentPeriodEnd }
  }
}
"""

APP_SUBSCRIPTION_CANCEL = """
mutation appSubscriptionCancel($id: ID!) {
  appSubscriptionCancel(id: $id) {
    appSubscription { id status }
    userErrors { field message }
  }
}
"""

# Shopify AppSubscriptionStatus -> local status.
REMOTE_STATUS_MAP = {
    "ACTIVE": STATUS_ACTIVE,
    "CANCELLED": STATUS_CANCELLED,
    "DECLINED": STATUS_CANCELLED,
    "EXPIRED": STATUS_CANCELLED,
    "PENDING": STATUS_PENDING,
    "ACCEPTED": STATUS_PENDING,
    "FROZEN": STATUS_PENDING,
}


class BillingError(ExternalServiceException):
    """Shopify rejected a billing call; the local record was left untouched."""


def local_status(remote_status: str) -> str:
    return REMOTE_STATUS_MAP.get(remote_status.upper(), STATUS_PENDING)


def _parse_timestamp(value: Optional[str]) -> Optional[dt.datetime]:
    if not value:
        return None
    parsed = isoparse(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    return parsed


def _as_utc(value: Optional[dt.datetime]) -> Optional[dt.datetime]:
    # SQLite hands back naive datetimes.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value


def period_length(plan: Optional[PlanDefinition]) -> relativedelta:
    if plan is not None and plan.billing_interval == INTERVAL_ANNUAL:
        return relativedelta(years=1)
    return relativedelta(days=30)


async def create_subscription(
    session: AsyncSession, admin: ShopifyAdminClient, shop: str, plan_id: str
) -> Tuple[Subscription, Optional[str]]:
    """Start a Shopify app subscription.

    A shop without an active subscription is recorded as ``pending`` on the
    new plan. An active shop keeps its current plan and charge; the new one
    is held as a pending change until Shopify reports it active.

    Returns the local record and the merchant confirmation URL.
    """

    plan = get_plan(plan_id)
    if plan is None:
        raise ValidationException("Invalid plan")

    variables = {
        "name": plan.name,
        "lineItems": [
            {
                "plan": {
                    "appRecurringPricingDetails": {
                        "price": {"amount": plan.price, "currencyCode": "USD"},
                        "interval": plan.billing_interval,
                    }
                }
            }
        ],
        "returnUrl": f"{settings.SHOPIFY_APP_URL}/app/subscription/success",
        "trialDays": plan.trial_days,
        "test": settings.SHOPIFY_BILLING_TEST,
    }
    data = await admin.graphql(APP_SUBSCRIPTION_CREATE, variables)
    payload = data.get("appSubscriptionCreate") or {}
    remote = payload.get("appSubscription")
    if not remote:
        message = join_error_messages(payload.get("userErrors")) or "Failed to create subscription"
        logger.warning(f"appSubscriptionCreate failed for {shop}: {message}")
        raise BillingError(message)

    repo = SubscriptionRepo(session)
    current = await repo.get(shop)
    if current is not None and current.is_active:
        subscription = await repo.update(
            current, pending_plan_id=plan.id, pending_subscription_id=remote["id"]
        )
        logger.info(f"Pending change to {plan.id} ({remote['id']}) for {shop}")
        return subscription, payload.get("confirmationUrl")

    trial_ends_at = utcnow() + relativedelta(days=plan.trial_days) if plan.trial_days else None
    subscription = await repo.upsert(
        shop,
        plan.id,
        plan.name,
        STATUS_PENDING,
        remote["id"],
        trial_ends_at=trial_ends_at,
    )
    logger.info(f"Created {plan.id} subscription {remote['id']} for {shop}")
    return subscription, payload.get("confirmationUrl")


async def get_subscription(session: AsyncSession, shop: str) -> Optional[Subscription]:
    return await SubscriptionRepo(session).get(shop)


async def _settle_pending_change(
    repo: SubscriptionRepo,
    subscription: Subscription,
    remote_status: str,
    period_start: Optional[dt.datetime] = None,
    period_end: Optional[dt.datetime] = None,
) -> Subscription:
    """Switch to the pending plan once active; drop it once declined."""

    status = local_status(remote_status)
    if status == STATUS_PENDING:
        return subscription

    plan = get_plan(subscription.pending_plan_id)
    if status == STATUS_CANCELLED or plan is None:
        logger.info(
            f"Dropping pending change {subscription.pending_subscription_id} "
            f"for {subscription.shop}"
        )
        return await repo.update(subscription, pending_plan_id=None, pending_subscription_id=None)

    start = period_start or utcnow()
    logger.info(f"Switching {subscription.shop} to {plan.id} ({subscription.pending_subscription_id})")
    return await repo.update(
        subscription,
        plan_id=plan.id,
        plan_name=plan.name,
        status=STATUS_ACTIVE,
        shopify_subscription_id=subscription.pending_subscription_id,
        pending_plan_id=None,
        pending_subscription_id=None,
        current_period_start=start,
        current_period_end=period_end or start + period_length(plan),
        trial_ends_at=None,
        cancelled_at=None,
    )


async def _remote_subscription(admin: ShopifyAdminClient, remote_id: str) -> Dict[str, Any]:
    data = await admin.graphql(APP_SUBSCRIPTION_QUERY, {"id": remote_id})
    return data.get("node") or {}


async def check_subscription_status(
    session: AsyncSession, admin: ShopifyAdminClient, shop: str
) -> Optional[Subscription]:
    """Mirror the remote status and period end onto the local record."""

    repo = SubscriptionRepo(session)
    subscription = await repo.get(shop)
    if subscription is None or not subscription.shopify_subscription_id:
        return None

    pending_id = subscription.pending_subscription_id
    if pending_id:
        remote = await _remote_subscription(admin, pending_id)
        if remote.get("status"):
            subscription = await _settle_pending_change(
                repo,
                subscription,
                remote["status"],
                period_end=_parse_timestamp(remote.get("currentPeriodEnd")),
            )
        if subscription.shopify_subscription_id == pending_id:
            return subscription

    remote = await _remote_subscription(admin, subscription.shopify_subscription_id)
    if not remote.get("status"):
        return subscription

    fields: Dict[str, Any] = {"status": local_status(remote["status"])}
    period_end = _parse_timestamp(remote.get("currentPeriodEnd"))
    if period_end is not None:
        fields["current_period_end"] = period_end
    return await repo.update(subscription, **fields)


async def cancel_subscription(
    session: AsyncSession, admin: ShopifyAdminClient, shop: str
) -> Optional[Subscription]:
    repo = SubscriptionRepo(session)
    subscription = await repo.get(shop)
    if subscription is None or not subscription.shopify_subscription_id:
        return None

    data = await admin.graphql(
        APP_SUBSCRIPTION_CANCEL, {"id": subscription.shopify_subscription_id}
    )
    payload = data.get("appSubscriptionCancel") or {}
    errors = payload.get("userErrors") or []
    if errors:
        raise BillingError(join_error_messages(errors))
    if not payload.get("appSubscription"):
        raise BillingError("Failed to cancel subscription")

    logger.info(f"Cancelled subscription {subscription.shopify_subscription_id} for {shop}")
    return await repo.update(
        subscription,
        status=STATUS_CANCELLED,
        cancelled_at=utcnow(),
        pending_plan_id=None,
        pending_subscription_id=None,
    )


async def apply_subscription_webhook(
    session: AsyncSession, shop: str, payload: Dict[str, Any]
) -> Optional[Subscription]:
    """Apply an ``app_subscriptions/update`` webhook to the local record."""

    body = payload.get("app_subscription") or payload
    repo = SubscriptionRepo(session)
    subscription = await repo.get(shop)
    if subscription is None:
        logger.warning(f"Subscription webhook for unknown shop {shop}")
        return None

    period_start = _parse_timestamp(body.get("current_period_start"))
    period_end = _parse_timestamp(body.get("current_period_end"))

    remote_id = body.get("admin_graphql_api_id")
    if remote_id and remote_id == subscription.pending_subscription_id:
        if not body.get("status"):
            return subscription
        return await _settle_pending_change(
            repo, subscription, body["status"], period_start, period_end
        )
    if (
        remote_id
        and subscription.shopify_subscription_id
        and remote_id != subscription.shopify_subscription_id
    ):
        logger.info(f"Ignoring webhook for superseded subscription {remote_id} of {shop}")
        return subscription

    fields: Dict[str, Any] = {}
    if body.get("status"):
        fields["status"] = local_status(body["status"])
    if period_start is not None:
        fields["current_period_start"] = period_start
    if period_end is not None:
        fields["current_period_end"] = period_end

    now = utcnow()
    current_end = _as_utc(subscription.current_period_end)
    if (
        fields.get("status") == STATUS_ACTIVE
        and period_end is None
        and (current_end is None or current_end <= now)
    ):
        start = period_start or now
        fields["current_period_start"] = start
        fields["current_period_end"] = start + period_length(get_plan(subscription.plan_id))

    if not fields:
        return subscription
    logger.info(f"Subscription for {shop} updated by webhook: {sorted(fields)}")
    return await repo.update(subscription, **fields)
