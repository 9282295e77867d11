from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import JSONResponse

from qr_admin.api.deps import get_enricher, get_store
from qr_admin.core.auth import ShopSession, get_current_session
from qr_admin.schemas.qrcode import EnrichedQRCode, QRCodeIn, QRCodeListResponse
from qr_admin.services.enrichment import QRCodeEnricher
from qr_admin.services.store import QRCodeStore
from qr_admin.services.validation import validate_qr_code

router = APIRouter()


def _validation_failure(payload: QRCodeIn) -> JSONResponse | None:
    errors = validate_qr_code(payload.model_dump())
    if errors:
        return JSONResponse(status_code=422, content={"errors": errors})
    return None


async def _owned_or_404(store: QRCodeStore, qr_id: int, shop: str) -> None:
    record = await asyncio.to_thread(store.find_by_id, qr_id)
    if record is None or record.shop != shop:
        raise HTTPException(status_code=404, detail="QR code not found")


@router.get("", response_model=QRCodeListResponse)
async def list_qr_codes(
    session: ShopSession = Depends(get_current_session),
    enricher: QRCodeEnricher = Depends(get_enricher),
) -> dict:
    return {"qr_codes": await enricher.fetch_and_enrich_by_owner(session.shop)}


@router.get("/new")
def new_qr_code() -> dict:
    return {"destination": "product", "title": ""}


@router.get("/{qr_id}", response_model=EnrichedQRCode)
async def get_qr_code(
    qr_id: int,
    session: ShopSession = Depends(get_current_session),
    enricher: QRCodeEnricher = Depends(get_enricher),
) -> EnrichedQRCode:
    qr_code = await enricher.fetch_and_enrich_by_id(qr_id, shop=session.shop)
    if qr_code is None:
        raise HTTPException(status_code=404, detail="QR code not found")
    return qr_code


@router.post("", status_code=201, response_model=EnrichedQRCode)
async def create_qr_code(
    payload: QRCodeIn,
    session: ShopSession = Depends(get_current_session),
    store: QRCodeStore = Depends(get_store),
    enricher: QRCodeEnricher = Depends(get_enricher),
):
    failure = _validation_failure(payload)
    if failure is not None:
        return failure

    record = await asyncio.to_thread(store.insert, session.shop, payload.model_dump())
    return await enricher.enrich_one(record)


@router.put("/{qr_id}", response_model=EnrichedQRCode)
async def update_qr_code(
    qr_id: int,
    payload: QRCodeIn,
    session: ShopSession = Depends(get_current_session),
    store: QRCodeStore = Depends(get_store),
    enricher: QRCodeEnricher = Depends(get_enricher),
):
    failure = _validation_failure(payload)
    if failure is not None:
        return failure

    await _owned_or_404(store, qr_id, session.shop)
    record = await asyncio.to_thread(store.update, qr_id, payload.model_dump())
    if record is None:
        raise HTTPException(status_code=404, detail="QR code not found")
    return await enricher.enrich_one(record)


@router.delete("/{qr_id}", status_code=204)
async def delete_qr_code(
    qr_id: int,
    session: ShopSession = Depends(get_current_session),
    store: QRCodeStore = Depends(get_store),
) -> Response:
    await _owned_or_404(store, qr_id, session.shop)
    await asyncio.to_thread(store.delete, qr_id)
    return Response(status_code=204)
