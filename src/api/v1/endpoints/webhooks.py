"""Shopify webhook receivers."""
from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_db_session
from src.auth.webhooks import verify_webhook
from src.services.billing_service import apply_subscription_webhook


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/app_subscriptions/update")
async def app_subscriptions_update(
    webhook: Dict[str, Any] = Depends(verify_webhook),
    db: AsyncSession = Depends(get_db_session),
):
    logger.info(f"Received {webhook['topic']} webhook for {webhook['shop']}")
    subscription = await apply_subscription_webhook(db, webhook["shop"], webhook["payload"])
    return {"status": "ok", "applied": subscription is not None}


@router.post("/products/update")
async def products_update(webhook: Dict[str, Any] = Depends(verify_webhook)):
    product_id = webhook["payload"].get("admin_graphql_api_id") or webhook["payload"].get("id")
    logger.info(f"Received {webhook['topic']} webhook for {webhook['shop']}: product {product_id}")
    return {"status": "ok"}
