from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from packages.shared.schemas.order_v1 import ServiceTypeV1
from services.api.app.deps import get_advisor, get_catalog
from services.api.app.models.pricing import (
    CatalogEntryOut,
    PriceSuggestionsOut,
    ServiceTypeChangeRequest,
    ServiceTypeChangeResponse,
)
from services.api.app.services.catalog import CatalogLookup
from services.api.app.services.errors import ValidationError
from services.api.app.services.formatting import format_amount
from services.api.app.services.pricing import PricingAdvisor, price_from_amount

router = APIRouter()


@router.get("/v1/pricing/{tipo_servicio}", response_model=PriceSuggestionsOut)
def get_price_suggestions(
    tipo_servicio: ServiceTypeV1,
    nombre: str | None = None,
    advisor: PricingAdvisor = Depends(get_advisor),
) -> PriceSuggestionsOut:
    return PriceSuggestionsOut(
        tipo_servicio=tipo_servicio,
        default=format_amount(advisor.suggest_price(tipo_servicio)),
        suggestions=[format_amount(p) for p in advisor.suggestions(tipo_servicio, nombre)],
    )


@router.post("/v1/pricing/service-type-change", response_model=ServiceTypeChangeResponse)
def service_type_change(
    payload: ServiceTypeChangeRequest,
    advisor: PricingAdvisor = Depends(get_advisor),
) -> ServiceTypeChangeResponse:
    try:
        current = price_from_amount(payload.precio)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    updated = advisor.on_service_type_change(current, payload.tipo_servicio)
    return ServiceTypeChangeResponse(
        precio=format_amount(updated.amount_or_zero()),
        overwritten=updated is not current,
    )


@router.get("/v1/catalog", response_model=list[CatalogEntryOut])
def search_catalog(q: str, catalog: CatalogLookup = Depends(get_catalog)) -> list[CatalogEntryOut]:
    return [
        CatalogEntryOut(nombre=e.nombre, precio=format_amount(e.precio)) for e in catalog.search(q)
    ]
