"""FastAPI dependency providers.

Routers take collaborators through these so tests can swap them with
`app.dependency_overrides`.
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from typing import TypeVar

from fastapi import HTTPException
from services.api.app.db.database import db_session
from services.api.app.services.catalog import CatalogLookup, MockCatalog
from services.api.app.services.delivery import DeliveryWindowCalculator
from services.api.app.services.directory_base import ClientDirectory
from services.api.app.services.directory_factory import get_client_directory
from services.api.app.services.finalizer import OrderFinalizer
from services.api.app.services.formatting import get_locale_format
from services.api.app.services.notifications import (
    NotificationComposer,
    get_notification_composer,
)
from services.api.app.services.order_codes import get_code_allocator
from services.api.app.services.pricing import PricingAdvisor
from services.api.app.services.qr_render import QrCodeRenderer
from services.api.app.services.render_base import QrRenderer, ShareSink
from services.api.app.services.store import outbox
from sqlalchemy.orm import Session

T = TypeVar("T")

_CATALOG = MockCatalog()


def _configured(factory: Callable[[], T]) -> T:
    try:
        return factory()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e


def get_db() -> Generator[Session, None, None]:
    db = db_session()
    try:
        yield db
    finally:
        db.close()


def get_directory() -> ClientDirectory:
    return _configured(get_client_directory)


def get_catalog() -> CatalogLookup:
    return _CATALOG


def get_advisor() -> PricingAdvisor:
    return PricingAdvisor(lookup=_CATALOG)


def get_calculator() -> DeliveryWindowCalculator:
    return DeliveryWindowCalculator()


def get_finalizer() -> OrderFinalizer:
    return _configured(
        lambda: OrderFinalizer(
            calculator=DeliveryWindowCalculator(),
            codes=get_code_allocator(),
            locale=get_locale_format(),
        )
    )


def get_composer() -> NotificationComposer:
    return _configured(get_notification_composer)


def get_renderer() -> QrRenderer:
    return QrCodeRenderer()


def get_share_sink() -> ShareSink:
    return outbox
