from __future__ import annotations

import asyncio
from typing import Protocol, Sequence
from urllib.parse import urljoin

from qr_admin.schemas.qrcode import EnrichedQRCode, ProductSnapshot, QRCodeRecord
from qr_admin.services.destination import destination_url


class RecordStore(Protocol):
    def find_by_id(self, qr_id: int) -> QRCodeRecord | None: ...

    def find_all_by_shop(self, shop: str) -> list[QRCodeRecord]: ...


class Catalog(Protocol):
    async def query_product(self, product_id: str) -> ProductSnapshot: ...


class ImageEncoder(Protocol):
    async def encode(self, url: str) -> str: ...


def scan_url(app_url: str, qr_id: int) -> str:
    # Resolved from the host root: any path on app_url is dropped.
    return urljoin(app_url, f"/qrcodes/{qr_id}/scan")


class QRCodeEnricher:
    """Joins stored QR codes with live product data, a destination URL and
    a rendered scan image.

    Store reads are blocking and run in a worker thread. Catalog and encoder
    failures are not caught here: a failed lookup aborts that enrichment
    instead of being reported as a deleted product.
    """

    def __init__(
        self,
        store: RecordStore,
        catalog: Catalog,
        encoder: ImageEncoder,
        app_url: str,
        max_concurrency: int | None = None,
    ):
        self.store = store
        self.catalog = catalog
        self.encoder = encoder
        self.app_url = app_url
        self.max_concurrency = max_concurrency if max_concurrency and max_concurrency > 0 else None

    def scan_url(self, qr_id: int) -> str:
        return scan_url(self.app_url, qr_id)

    async def enrich_one(self, record: QRCodeRecord) -> EnrichedQRCode:
        image_task = asyncio.ensure_future(self.encoder.encode(self.scan_url(record.id)))
        try:
            product = await self.catalog.query_product(record.product_id)
            url = destination_url(record)
        except BaseException:
            image_task.cancel()
            raise
        image = await image_task
        return EnrichedQRCode.from_record(record, product, url, image)

    async def enrich_many(self, records: Sequence[QRCodeRecord]) -> list[EnrichedQRCode]:
        if not records:
            return []
        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None

        async def run(record: QRCodeRecord) -> EnrichedQRCode:
            if semaphore is None:
                return await self.enrich_one(record)
            async with semaphore:
                return await self.enrich_one(record)

        tasks = [asyncio.ensure_future(run(r)) for r in records]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            # A failed record cancels the rest of the batch.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def fetch_and_enrich_by_id(self, qr_id: int, shop: str | None = None) -> EnrichedQRCode | None:
        record = await asyncio.to_thread(self.store.find_by_id, qr_id)
        if record is None:
            return None
        # A record owned by another shop is reported as absent.
        if shop is not None and record.shop != shop:
            return None
        return await self.enrich_one(record)

    async def fetch_and_enrich_by_owner(self, shop: str) -> list[EnrichedQRCode]:
        records = await asyncio.to_thread(self.store.find_all_by_shop, shop)
        if not records:
            return []
        return await self.enrich_many(records)
