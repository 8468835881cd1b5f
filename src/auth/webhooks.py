"""Verification of Shopify webhook deliveries."""
from __future__ import annotations

import base64
import hashlib
import hmac
import json
from typing import Any, Dict

from fastapi import HTTPException, Request, status

from src.core.config import settings


def compute_hmac(body: bytes, secret: str) -> str:
    digest = hmac.new(secret.encode(), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode()


def verify_hmac(body: bytes, provided: str, secret: str) -> bool:
    if not provided:
        return False
    return hmac.compare_digest(compute_hmac(body, secret), provided)


async def verify_webhook(request: Request) -> Dict[str, Any]:
    """Authenticate a webhook and return its topic, shop and decoded payload."""

    body = await request.body()
    signature = request.headers.get("X-Shopify-Hmac-Sha256", "")
    if not verify_hmac(body, signature, settings.SHOPIFY_API_SECRET):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid webhook signature",
        )

    shop = request.headers.get("X-Shopify-Shop-Domain", "").strip().lower()
    if not shop:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Shop domain header missing",
        )

    try:
        payload = json.loads(body or b"{}")
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Malformed webhook payload",
        ) from exc

    return {
        "shop": shop,
        "topic": request.headers.get("X-Shopify-Topic", ""),
        "payload": payload,
    }
