"""Shopify Admin GraphQL client and session-token exchange."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional, Tuple

import httpx

from src.core.config import settings
from src.core.exceptions import ExternalServiceException

logger = logging.getLogger(__name__)

TOKEN_EXCHANGE_GRANT = "urn:ietf:params:oauth:grant-type:token-exchange"
ID_TOKEN_TYPE = "urn:ietf:params:oauth:token-type:id_token"
OFFLINE_TOKEN_TYPE = "urn:shopify:params:oauth:token-type:offline-access-token"


class ShopifyAdminError(ExternalServiceException):
    """The Admin API could not be reached or answered with top-level errors."""


def join_error_messages(errors: Optional[Iterable[Any]]) -> str:
    """Join GraphQL ``errors`` / ``userErrors`` messages with ``", "``."""

    messages = []
    for error in errors or ():
        if isinstance(error, dict):
            message = error.get("message")
        else:
            message = str(error)
        if message:
            messages.append(message)
    return ", ".join(messages)


class ShopifyAdminClient:
    """Thin async wrapper over ``/admin/api/<version>/graphql.json``."""

    def __init__(
        self,
        shop: str,
        access_token: str,
        *,
        api_version: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.shop = shop
        self.access_token = access_token
        self.api_version = api_version or settings.SHOPIFY_API_VERSION
        self.timeout = timeout or settings.SHOPIFY_HTTP_TIMEOUT
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"https://{self.shop}/admin/api/{self.api_version}/graphql.json"

    async def graphql(
        self, query: str, variables: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Run one GraphQL operation and return its ``data`` object."""

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self.endpoint,
                    json={"query": query, "variables": variables or {}},
                    headers={"X-Shopify-Access-Token": self.access_token},
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                f"Admin API call for {self.shop} returned {exc.response.status_code}"
            )
            raise ShopifyAdminError(
                f"Shopify Admin API returned {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning(f"Admin API call for {self.shop} failed: {exc}")
            raise ShopifyAdminError(f"Shopify Admin API request failed: {exc}") from exc

        body = response.json()
        errors = body.get("errors")
        if errors:
            raise ShopifyAdminError(
                join_error_messages(errors if isinstance(errors, list) else [errors])
                or "Shopify Admin API error"
            )
        return body.get("data") or {}


async def exchange_session_token(
    shop: str,
    session_token: str,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Tuple[str, Optional[str]]:
    """Trade a session token for an offline access token and its scope."""

    payload = {
        "client_id": settings.SHOPIFY_API_KEY,
        "client_secret": settings.SHOPIFY_API_SECRET,
        "grant_type": TOKEN_EXCHANGE_GRANT,
        "subject_token": session_token,
        "subject_token_type": ID_TOKEN_TYPE,
        "requested_token_type": OFFLINE_TOKEN_TYPE,
    }
    try:
        async with httpx.AsyncClient(
            timeout=settings.SHOPIFY_HTTP_TIMEOUT, transport=transport
        ) as client:
            response = await client.post(
                f"https://{shop}/admin/oauth/access_token", json=payload
            )
            response.raise_for_status()
    except httpx.HTTPError as exc:
        logger.warning(f"Token exchange for {shop} failed: {exc}")
        raise ShopifyAdminError("Could not obtain Shopify access token") from exc

    data = response.json()
    access_token = data.get("access_token")
    if not access_token:
        raise ShopifyAdminError("Could not obtain Shopify access token")
    logger.info(f"Obtained offline access token for {shop}")
    return access_token, data.get("scope")
