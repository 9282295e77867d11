from __future__ import annotations

import logging
from typing import Any

import httpx

from qr_admin.core.errors import CatalogQueryError
from qr_admin.schemas.qrcode import ProductImage, ProductSnapshot

logger = logging.getLogger(__name__)

PRODUCT_QUERY = """
query supplementQRCode($id: ID!) {
  product(id: $id) {
    title
    images(first: 1) {
      nodes {
        altText
        url
      }
    }
  }
}
"""


def admin_graphql_endpoint(shop: str, api_version: str) -> str:
    return f"https://{shop}/admin/api/{api_version}/graphql.json"


def _parse_product(product: dict[str, Any] | None) -> ProductSnapshot:
    if not product:
        return ProductSnapshot(title=None, images=[])
    nodes = ((product.get("images") or {}).get("nodes")) or []
    images = [
        ProductImage(url=node["url"], alt_text=node.get("altText"))
        for node in nodes
        if node and node.get("url")
    ]
    return ProductSnapshot(title=product.get("title"), images=images)


class GraphQLCatalogClient:
    """Reads live product data from the shop's Admin GraphQL API.

    Every failure (transport, HTTP status, undecodable body, GraphQL
    ``errors``) surfaces as ``CatalogQueryError``; a missing product is a
    normal answer with no title.
    """

    def __init__(self, endpoint: str, access_token: str, http: httpx.AsyncClient):
        self.endpoint = endpoint
        self.access_token = access_token
        self.http = http

    async def _execute(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        try:
            resp = await self.http.post(
                self.endpoint,
                json={"query": query, "variables": variables},
                headers={
                    "X-Shopify-Access-Token": self.access_token,
                    "Accept": "application/json",
                },
            )
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.warning("Catalog query returned HTTP %s", exc.response.status_code)
            raise CatalogQueryError(f"Catalog returned HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.warning("Catalog query transport error: %s", exc)
            raise CatalogQueryError(f"Network error: {exc}") from exc
        except ValueError as exc:
            raise CatalogQueryError("Catalog returned a non-JSON body") from exc

        if not isinstance(body, dict):
            raise CatalogQueryError("Catalog returned an unexpected payload")
        if body.get("errors"):
            messages = [str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in body["errors"]]
            logger.warning("Catalog query errors: %s", messages)
            raise CatalogQueryError("; ".join(messages))
        return body.get("data") or {}

    async def query_product(self, product_id: str) -> ProductSnapshot:
        data = await self._execute(PRODUCT_QUERY, {"id": product_id})
        return _parse_product(data.get("product"))
