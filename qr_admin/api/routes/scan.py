import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import RedirectResponse

from qr_admin.api.deps import get_store
from qr_admin.services.destination import destination_url
from qr_admin.services.store import QRCodeStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/qrcodes/{qr_id}/scan")
def scan_qr_code(qr_id: int, store: QRCodeStore = Depends(get_store)) -> RedirectResponse:
    record = store.find_by_id(qr_id)
    if record is None:
        raise HTTPException(status_code=404, detail="QR code not found")

    target = destination_url(record)
    store.increment_scans(qr_id)
    logger.info("QR code %s scanned, redirecting to %s", qr_id, target)
    return RedirectResponse(url=target, status_code=302)
