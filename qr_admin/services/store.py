from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from qr_admin.models.entities import QRCode
from qr_admin.schemas.qrcode import QRCodeRecord

WRITABLE_FIELDS = ("title", "product_id", "product_handle", "product_variant_id", "destination")


def _writable(fields: Mapping[str, Any]) -> dict[str, Any]:
    values = {}
    for name in WRITABLE_FIELDS:
        if name in fields:
            value = fields[name]
            values[name] = "" if value is None else value
    return values


class QRCodeStore:
    """SQLAlchemy-backed persistence for QR code records.

    Returns frozen ``QRCodeRecord`` snapshots so callers never hold ORM rows
    bound to the session.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, qr_id: int) -> QRCodeRecord | None:
        row = self.db.get(QRCode, qr_id)
        return QRCodeRecord.model_validate(row) if row is not None else None

    def find_all_by_shop(self, shop: str) -> list[QRCodeRecord]:
        rows = self.db.scalars(
            select(QRCode).where(QRCode.shop == shop).order_by(QRCode.id.desc())
        ).all()
        return [QRCodeRecord.model_validate(r) for r in rows]

    def insert(self, shop: str, fields: Mapping[str, Any]) -> QRCodeRecord:
        row = QRCode(shop=shop, scans=0, **_writable(fields))
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return QRCodeRecord.model_validate(row)

    def update(self, qr_id: int, fields: Mapping[str, Any]) -> QRCodeRecord | None:
        row = self.db.get(QRCode, qr_id)
        if row is None:
            return None
        for name, value in _writable(fields).items():
            setattr(row, name, value)
        self.db.commit()
        self.db.refresh(row)
        return QRCodeRecord.model_validate(row)

    def delete(self, qr_id: int) -> bool:
        result = self.db.execute(delete(QRCode).where(QRCode.id == qr_id))
        self.db.commit()
        return result.rowcount > 0

    def increment_scans(self, qr_id: int) -> QRCodeRecord | None:
        row = self.db.get(QRCode, qr_id)
        if row is None:
            return None
        # Incremented in SQL so concurrent scans are not lost.
        row.scans = QRCode.scans + 1
        self.db.commit()
        self.db.refresh(row)
        return QRCodeRecord.model_validate(row)
