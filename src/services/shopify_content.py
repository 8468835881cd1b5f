"""Read products, collections and pages from Shopify as translatable fields."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from src.services.shopify_admin import ShopifyAdminClient

RESOURCE_TYPES = ("product", "collection", "page")

PRODUCT_QUERY = """
query getProduct($id: ID!) {
  product(id: $id) {
    id
    title
    description
    handle
    metafields(first: 50) {
      edges { node { id key namespace value type } }
    }
  }
}
"""

PRODUCTS_QUERY = """
query getProducts($first: Int!) {
  products(first: $first) {
    edges { node { id title description handle } }
  }
}
"""

COLLECTION_QUERY = """
query getCollection($id: ID!) {
  collection(id: $id) { id title description handle }
}
"""

COLLECTIONS_QUERY = """
query getCollections($first: Int!) {
  collections(first: $first) {
    edges { node { id title description handle } }
  }
}
"""

PAGE_QUERY = """
query getPage($id: ID!) {
  page(id: $id) { id title body handle }
}
"""

PAGES_QUERY = """
query getPages($first: Int!) {
  pages(first: $first) {
    edges { node { id title body handle } }
  }
}
"""


def _field(name: str, value: Optional[str], kind: str) -> Dict[str, str]:
    return {"field": name, "value": value or "", "type": kind}


def _resource(node: Dict[str, Any], resource_type: str, body_field: str) -> Dict[str, Any]:
    return {
        "id": node["id"],
        "type": resource_type,
        "title": node.get("title") or "",
        "fields": [
            _field("title", node.get("title"), "text"),
            _field(body_field, node.get(body_field), "html"),
            _field("handle", node.get("handle"), "text"),
        ],
    }


def _nodes(connection: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [edge["node"] for edge in (connection or {}).get("edges", [])]


async def fetch_product(admin: ShopifyAdminClient, product_id: str) -> Optional[Dict[str, Any]]:
    data = await admin.graphql(PRODUCT_QUERY, {"id": product_id})
    product = data.get("product")
    if not product:
        return None

    resource = _resource(product, "product", "description")
    for metafield in _nodes(product.get("metafields")):
        kind = "text" if metafield.get("type") == "single_line_text_field" else "html"
        resource["fields"].append(
            _field(f"metafield.{metafield['namespace']}.{metafield['key']}", metafield.get("value"), kind)
        )
    return resource


async def fetch_products(admin: ShopifyAdminClient, limit: int = 50) -> List[Dict[str, Any]]:
    data = await admin.graphql(PRODUCTS_QUERY, {"first": limit})
    return [_resource(node, "product", "description") for node in _nodes(data.get("products"))]


async def fetch_collection(
    admin: ShopifyAdminClient, collection_id: str
) -> Optional[Dict[str, Any]]:
    data = await admin.graphql(COLLECTION_QUERY, {"id": collection_id})
    collection = data.get("collection")
    return _resource(collection, "collection", "description") if collection else None


async def fetch_collections(admin: ShopifyAdminClient, limit: int = 50) -> List[Dict[str, Any]]:
    data = await admin.graphql(COLLECTIONS_QUERY, {"first": limit})
    return [
        _resource(node, "collection", "description") for node in _nodes(data.get("collections"))
    ]


async def fetch_page(admin: ShopifyAdminClient, page_id: str) -> Optional[Dict[str, Any]]:
    data = await admin.graphql(PAGE_QUERY, {"id": page_id})
    page = data.get("page")
    return _resource(page, "page", "body") if page else None


async def fetch_pages(admin: ShopifyAdminClient, limit: int = 50) -> List[Dict[str, Any]]:
    data = await admin.graphql(PAGES_QUERY, {"first": limit})
    return [_resource(node, "page", "body") for node in _nodes(data.get("pages"))]


_FETCH_ONE = {
    "product": fetch_product,
    "collection": fetch_collection,
    "page": fetch_page,
}

_FETCH_MANY = {
    "product": fetch_products,
    "collection": fetch_collections,
    "page": fetch_pages,
}


async def fetch_resource(
    admin: ShopifyAdminClient, resource_type: str, resource_id: str
) -> Optional[Dict[str, Any]]:
    fetch = _FETCH_ONE.get(resource_type)
    if fetch is None:
        return None
    return await fetch(admin, resource_id)


async def fetch_resources(
    admin: ShopifyAdminClient, resource_type: str, limit: int = 50
) -> List[Dict[str, Any]]:
    fetch = _FETCH_MANY.get(resource_type)
    if fetch is None:
        return []
    return await fetch(admin, limit)
