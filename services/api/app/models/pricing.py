from __future__ import annotations

from decimal import Decimal

from packages.shared.schemas.order_v1 import ServiceTypeV1
from pydantic import BaseModel, ConfigDict, Field


class PriceSuggestionsOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tipo_servicio: ServiceTypeV1 = Field(..., alias="tipoServicio")
    default: str
    suggestions: list[str]


class ServiceTypeChangeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    precio: Decimal | None = None
    tipo_servicio: ServiceTypeV1 = Field(..., alias="tipoServicio")


class ServiceTypeChangeResponse(BaseModel):
    precio: str
    overwritten: bool


class CatalogEntryOut(BaseModel):
    nombre: str
    precio: str
