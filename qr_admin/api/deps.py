from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
from fastapi import Depends
from sqlalchemy.orm import Session

from qr_admin.core.auth import ShopSession, get_current_session
from qr_admin.core.config import settings
from qr_admin.db.session import get_db
from qr_admin.services.catalog import GraphQLCatalogClient, admin_graphql_endpoint
from qr_admin.services.enrichment import QRCodeEnricher
from qr_admin.services.qr_image import QRImageEncoder
from qr_admin.services.store import QRCodeStore


def get_store(db: Session = Depends(get_db)) -> QRCodeStore:
    return QRCodeStore(db)


async def get_catalog(
    session: ShopSession = Depends(get_current_session),
) -> AsyncIterator[GraphQLCatalogClient]:
    async with httpx.AsyncClient(timeout=settings.catalog_timeout_seconds) as http:
        yield GraphQLCatalogClient(
            endpoint=admin_graphql_endpoint(session.shop, settings.shopify_api_version),
            access_token=session.admin_access_token,
            http=http,
        )


def get_encoder() -> QRImageEncoder:
    return QRImageEncoder(box_size=settings.qr_box_size, border=settings.qr_border)


def get_enricher(
    store: QRCodeStore = Depends(get_store),
    catalog: GraphQLCatalogClient = Depends(get_catalog),
    encoder: QRImageEncoder = Depends(get_encoder),
) -> QRCodeEnricher:
    return QRCodeEnricher(
        store=store,
        catalog=catalog,
        encoder=encoder,
        app_url=settings.app_url,
        max_concurrency=settings.enrich_max_concurrency,
    )
