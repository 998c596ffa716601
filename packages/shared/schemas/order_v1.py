"""Shared order schema (v1).

The mobile app scans and renders these payloads. Field names follow the app's wire format
and must stay stable once shipped.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class ServiceTypeV1(str, Enum):
    LAVADO = "lavado"
    PLANCHADO = "planchado"
    OTROS = "otros"


class ChargeUnitV1(str, Enum):
    UNIDAD = "unidad"
    KILO = "kilo"


class OrderStatusV1(str, Enum):
    PENDIENTE = "Pendiente"


SERVICE_LABELS: dict[ServiceTypeV1, str] = {
    ServiceTypeV1.LAVADO: "Lavado",
    ServiceTypeV1.PLANCHADO: "Planchado",
    ServiceTypeV1.OTROS: "Otros",
}

UNIT_SUFFIXES: dict[ChargeUnitV1, str] = {
    ChargeUnitV1.UNIDAD: "und",
    ChargeUnitV1.KILO: "kg",
}


class QrPayloadV1(BaseModel):
    """Compact order summary encoded into the QR image.

    Carries an item count, not the items. It is meant for quick verification at the counter.
    """

    codigo: str = Field(..., pattern=r"^ORD-\d{6}$")
    cliente: str
    telefono: str
    fecha: str
    fechaEntrega: str
    articulos: int = Field(..., ge=0)
    total: str = Field(..., pattern=r"^\d+\.\d{2}$")
    estado: OrderStatusV1 = OrderStatusV1.PENDIENTE
