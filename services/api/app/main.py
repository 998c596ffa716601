"""Burbuja order service entrypoint."""

from fastapi import FastAPI

from services.api.app.db.init_db import init_db
from services.api.app.logging_config import configure_logging
from services.api.app.routers.audit import router as audit_router
from services.api.app.routers.cart import router as cart_router
from services.api.app.routers.client import router as client_router
from services.api.app.routers.order import router as order_router
from services.api.app.routers.pricing import router as pricing_router

app = FastAPI(title="Burbuja Orders API")

app.include_router(client_router)
app.include_router(pricing_router)
app.include_router(cart_router)
app.include_router(order_router)
app.include_router(audit_router)


@app.on_event("startup")
def _startup() -> None:
    configure_logging()
    init_db()


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
