from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

Destination = Literal["product", "cart"]


class QRCodeRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    shop: str
    title: str
    product_id: str
    product_handle: str = ""
    product_variant_id: str = ""
    destination: str
    scans: int = 0
    created_at: datetime | None = None


class ProductImage(BaseModel):
    url: str
    alt_text: str | None = None


class ProductSnapshot(BaseModel):
    title: str | None = None
    images: list[ProductImage] = []


class EnrichedQRCode(QRCodeRecord):
    product_deleted: bool
    product_title: str | None = None
    product_image: str | None = None
    product_alt: str | None = None
    destination_url: str
    image: str

    @classmethod
    def from_record(
        cls,
        record: QRCodeRecord,
        product: ProductSnapshot,
        destination_url: str,
        image: str,
    ) -> "EnrichedQRCode":
        deleted = not product.title
        first_image = product.images[0] if product.images and not deleted else None
        return cls(
            id=record.id,
            shop=record.shop,
            title=record.title,
            product_id=record.product_id,
            product_handle=record.product_handle,
            product_variant_id=record.product_variant_id,
            destination=record.destination,
            scans=record.scans,
            created_at=record.created_at,
            product_deleted=deleted,
            product_title=None if deleted else product.title,
            product_image=first_image.url if first_image else None,
            product_alt=first_image.alt_text if first_image else None,
            destination_url=destination_url,
            image=image,
        )


class QRCodeIn(BaseModel):
    title: str | None = None
    product_id: str | None = None
    product_handle: str | None = None
    product_variant_id: str | None = None
    destination: Destination | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if value == "":
            return None
        return value


class QRCodeListResponse(BaseModel):
    qr_codes: list[EnrichedQRCode]
