"""Shopify session token authentication."""
from __future__ import annotations

from typing import Any, Dict
from urllib.parse import urlparse

import jwt
from fastapi import Header, HTTPException, status

from src.core.config import settings

SESSION_TOKEN_ALG = "HS256"


def shop_from_dest(dest: str) -> str:
    """Return the bare ``*.myshopify.com`` host from a token ``dest`` claim."""

    host = urlparse(dest).netloc if "://" in dest else dest
    return host.strip().lower()


def require_auth(authorization: str = Header(...)) -> Dict[str, Any]:
    """Validate an App Bridge session token and return the shop it belongs to."""

    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
        )

    token = authorization.split(" ", 1)[1].strip()
    try:
        payload = jwt.decode(
            token,
            settings.SHOPIFY_API_SECRET,
            algorithms=[SESSION_TOKEN_ALG],
            audience=settings.SHOPIFY_API_KEY,
            leeway=10,
        )
    except jwt.InvalidTokenError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid session token",
        ) from exc

    dest = payload.get("dest")
    if not dest:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Shop missing in session token",
        )

    shop = shop_from_dest(str(dest))
    if not shop.endswith(".myshopify.com"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid shop domain",
        )

    return {"shop": shop, "token": token, "claims": payload}
