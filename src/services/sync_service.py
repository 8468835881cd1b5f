"""Push published translations back to Shopify resources."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import ExternalServiceException
from src.db.models.translation import Translation
from src.repositories.translation_repo import TranslationRepo
from src.services.shopify_admin import ShopifyAdminClient, join_error_messages

logger = logging.getLogger(__name__)

PRODUCT_UPDATE = """
mutation productUpdate($input: ProductInput!) {
  productUpdate(input: $input) {
    product { id title }
    userErrors { field message }
  }
}
"""

COLLECTION_UPDATE = """
mutation collectionUpdate($input: CollectionInput!) {
  collectionUpdate(input: $input) {
    collection { id title }
    userErrors { field message }
  }
}
"""

PAGE_UPDATE = """
mutation pageUpdate($id: ID!, $page: PageUpdateInput!) {
  pageUpdate(id: $id, page: $page) {
    page { id title }
    userErrors { field message }
  }
}
"""


@dataclass(frozen=True)
class ResourceMapping:
    label: str
    mutation: str
    operation: str
    # stored field -> Shopify input field
    fields: Tuple[Tuple[str, str], ...]


RESOURCE_MAPPINGS: Dict[str, ResourceMapping] = {
    "product": ResourceMapping(
        label="Product",
        mutation=PRODUCT_UPDATE,
        operation="productUpdate",
        fields=(("title", "title"), ("description", "descriptionHtml")),
    ),
    "collection": ResourceMapping(
        label="Collection",
        mutation=COLLECTION_UPDATE,
        operation="collectionUpdate",
        fields=(("title", "title"), ("description", "descriptionHtml")),
    ),
    "page": ResourceMapping(
        label="Page",
        mutation=PAGE_UPDATE,
        operation="pageUpdate",
        fields=(("title", "title"), ("body", "body")),
    ),
}


def _result(success: bool, message: str) -> Dict[str, Any]:
    return {"success": success, "message": message}


def build_update_input(
    mapping: ResourceMapping, translations: List[Translation]
) -> Dict[str, str]:
    by_field = {t.field: t.translated_value for t in translations}
    return {
        target: by_field[source]
        for source, target in mapping.fields
        if source in by_field
    }


def _variables(resource_type: str, resource_id: str, updates: Dict[str, str]) -> Dict[str, Any]:
    if resource_type == "page":
        return {"id": resource_id, "page": updates}
    return {"input": {"id": resource_id, **updates}}


async def sync_translation_to_shopify(
    session: AsyncSession,
    admin: ShopifyAdminClient,
    shop: str,
    resource_type: str,
    resource_id: str,
    language_code: str,
    market_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Write the published translations of one language onto the resource.

    Returns ``{"success", "message"}``; failures are reported, never raised.
    """

    translations = await TranslationRepo(session).list_published(
        shop, resource_type, resource_id, language_code, market_id
    )
    if not translations:
        return _result(False, "No published translations found")

    mapping = RESOURCE_MAPPINGS.get(resource_type)
    if mapping is None:
        return _result(False, "Unsupported resource type")

    updates = build_update_input(mapping, translations)
    if not updates:
        return _result(False, "No translatable fields found")

    try:
        data = await admin.graphql(
            mapping.mutation, _variables(resource_type, resource_id, updates)
        )
    except ExternalServiceException as exc:
        logger.warning(f"Sync of {resource_type} {resource_id} for {shop} failed: {exc.message}")
        return _result(False, exc.message)

    user_errors = (data.get(mapping.operation) or {}).get("userErrors") or []
    if user_errors:
        return _result(False, join_error_messages(user_errors))

    logger.info(f"Synced {language_code} {resource_type} {resource_id} for {shop}")
    return _result(True, f"{mapping.label} translation synced")
