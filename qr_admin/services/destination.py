from __future__ import annotations

import re
from dataclasses import dataclass

from qr_admin.core.errors import invariant
from qr_admin.schemas.qrcode import QRCodeRecord

PRODUCT_VARIANT_GID = re.compile(r"gid://shopify/ProductVariant/([0-9]+)")
CART_QUANTITY = 1


@dataclass(frozen=True)
class VariantIdParse:
    ok: bool
    numeric_id: str | None = None


def parse_product_variant_id(value: str | None) -> VariantIdParse:
    match = PRODUCT_VARIANT_GID.search(value or "")
    if not match:
        return VariantIdParse(ok=False)
    return VariantIdParse(ok=True, numeric_id=match.group(1))


def destination_url(record: QRCodeRecord) -> str:
    """Public URL a scan of ``record`` should land on.

    Product destinations open the storefront product page. Anything else is a
    cart permalink with the linked variant pre-added at quantity 1.
    """
    if record.destination == "product":
        return f"https://{record.shop}/products/{record.product_handle}"

    parsed = parse_product_variant_id(record.product_variant_id)
    invariant(parsed.ok, f"Unrecognized product variant ID: {record.product_variant_id!r}")
    return f"https://{record.shop}/cart/{parsed.numeric_id}:{CART_QUANTITY}"
