from __future__ import annotations

from typing import Any, Mapping

REQUIRED_FIELDS = (
    ("title", ("title",), "Title is required"),
    ("product_id", ("product_id", "productId"), "Product is required"),
    ("destination", ("destination",), "Destination is required"),
)


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    return True


def validate_qr_code(candidate: Mapping[str, Any]) -> dict[str, str] | None:
    errors: dict[str, str] = {}
    for field, keys, message in REQUIRED_FIELDS:
        if not any(_present(candidate.get(key)) for key in keys):
            errors[field] = message
    return errors or None
