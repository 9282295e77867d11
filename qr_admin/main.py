from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from qr_admin.api.routes import qrcodes, scan
from qr_admin.core.config import settings
from qr_admin.core.errors import register_exception_handlers
from qr_admin.core.security import RequestContextMiddleware
from qr_admin.db.session import init_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_tables:
        init_db()
    yield


app = FastAPI(
    title="QR Code Admin API",
    version="0.1.0",
    description=(
        "Create QR codes that deep-link to a product page or a pre-filled cart, "
        "and track how often they are scanned."
    ),
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-API-Key", "X-Request-ID"],
)
app.add_middleware(RequestContextMiddleware)
register_exception_handlers(app)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


app.include_router(qrcodes.router, prefix="/api/v1/qrcodes", tags=["qrcodes"])
app.include_router(scan.router, tags=["scan"])
