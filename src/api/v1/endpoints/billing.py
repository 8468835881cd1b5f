"""Endpoints for plans and the shop's Shopify app subscription."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_admin_client, get_db_session, get_shop
from src.core.exceptions import NotFoundException
from src.schemas.billing import SubscribeRequest, SubscriptionRead
from src.services import billing_service
from src.services.plans import SUBSCRIPTION_PLANS, get_plan
from src.services.shopify_admin import ShopifyAdminClient


router = APIRouter(prefix="/billing", tags=["billing"])


def _subscription_response(subscription):
    if subscription is None:
        return {"subscription": None, "plan": None}
    plan = get_plan(subscription.plan_id)
    return {
        "subscription": SubscriptionRead.model_validate(subscription),
        "plan": plan.to_dict() if plan else None,
    }


@router.get("/plans")
async def list_plans():
    return {"plans": [plan.to_dict() for plan in SUBSCRIPTION_PLANS]}


@router.get("/plans/{plan_id}")
async def get_plan_detail(plan_id: str):
    plan = get_plan(plan_id)
    if plan is None:
        raise NotFoundException("Plan not found")
    return plan.to_dict()


@router.post("/subscribe")
async def subscribe(
    body: SubscribeRequest,
    shop: str = Depends(get_shop),
    admin: ShopifyAdminClient = Depends(get_admin_client),
    db: AsyncSession = Depends(get_db_session),
):
    subscription, confirmation_url = await billing_service.create_subscription(
        db, admin, shop, body.plan_id
    )
    return {
        **_subscription_response(subscription),
        "confirmation_url": confirmation_url,
    }


@router.get("/subscription")
async def current_subscription(
    shop: str = Depends(get_shop), db: AsyncSession = Depends(get_db_session)
):
    subscription = await billing_service.get_subscription(db, shop)
    return _subscription_response(subscription)


@router.get("/success")
async def subscription_success(
    shop: str = Depends(get_shop),
    admin: ShopifyAdminClient = Depends(get_admin_client),
    db: AsyncSession = Depends(get_db_session),
):
    """Landing call after the merchant approves the charge in Shopify."""

    subscription = await billing_service.check_subscription_status(db, admin, shop)
    if subscription is None:
        raise NotFoundException("No subscription found")
    return _subscription_response(subscription)


@router.post("/cancel")
async def cancel(
    shop: str = Depends(get_shop),
    admin: ShopifyAdminClient = Depends(get_admin_client),
    db: AsyncSession = Depends(get_db_session),
):
    subscription = await billing_service.cancel_subscription(db, admin, shop)
    if subscription is None:
        raise NotFoundException("No subscription to cancel")
    return _subscription_response(subscription)
