from __future__ import annotations

import os
import re
from urllib.parse import quote

from packages.shared.schemas.order_v1 import SERVICE_LABELS, UNIT_SUFFIXES
from services.api.app.services.cart import LineItem
from services.api.app.services.finalizer import Order
from services.api.app.services.formatting import (
    ES_ES,
    LocaleFormat,
    format_amount,
    format_number,
    get_locale_format,
)

DEFAULT_BUSINESS_NAME = "Lavandería Burbuja"


class NotificationComposer:
    """Renders a finalized order into the WhatsApp and share templates.

    The wording and emoji markers are matched by downstream tooling; change them only together
    with the consumers.
    """

    def __init__(
        self,
        *,
        locale: LocaleFormat = ES_ES,
        business_name: str = DEFAULT_BUSINESS_NAME,
    ) -> None:
        self._locale = locale
        self._business_name = business_name

    def _item_line(self, index: int, item: LineItem) -> str:
        label = SERVICE_LABELS.get(item.tipo_servicio, "Servicio")
        suffix = UNIT_SUFFIXES[item.unidad_cobro]
        return (
            f"{index}. {item.nombre}\n"
            f"   {label} - {format_number(item.cantidad)} {suffix} × "
            f"${format_number(item.precio.amount_or_zero())} = ${format_amount(item.subtotal())}"
        )

    def build_whatsapp_message(self, order: Order) -> str:
        cliente = order.cliente
        items_block = "\n\n".join(
            self._item_line(i, item) for i, item in enumerate(order.items, start=1)
        )
        created = self._locale.format_long_date(order.created_at)
        delivery = (
            f"{self._locale.format_long_date(order.delivery_at)} - "
            f"{self._locale.format_time(order.delivery_at)}"
        )

        return (
            "🧺 *ORDEN DE LAVANDERÍA* 🧺\n"
            "\n"
            f"¡Hola {cliente.nombre}! 👋\n"
            "\n"
            "Tu orden ha sido creada exitosamente:\n"
            "\n"
            f"📋 *Código:* {order.codigo}\n"
            f"📅 *Fecha:* {created}\n"
            f"🚚 *Entrega:* {delivery}\n"
            f"👤 *Cliente:* {cliente.nombre_completo}\n"
            f"📞 *Teléfono:* {cliente.telefono}\n"
            "\n"
            f"📦 *ARTÍCULOS ({len(order.items)}):*\n"
            f"{items_block}\n"
            "\n"
            f"💰 *TOTAL: ${format_amount(order.total)}*\n"
            f"📱 *Estado:* {order.estado.value}\n"
            "\n"
            "🔍 *Código QR disponible en la aplicación*\n"
            "\n"
            "¡Te notificaremos cuando esté lista! ✨\n"
            "\n"
            "---\n"
            f"🏪 *{self._business_name}*"
        )

    def build_share_message(self, order: Order) -> str:
        return (
            f"📱 Código QR de la orden {order.codigo} para {order.cliente.nombre_completo}. "
            f"Total: ${format_amount(order.total)}"
        )

    def whatsapp_url(self, order: Order, message: str | None = None) -> str:
        phone = re.sub(r"[^0-9]", "", order.cliente.telefono)
        text = self.build_whatsapp_message(order) if message is None else message
        return f"https://wa.me/{phone}?text={quote(text, safe='')}"


def get_notification_composer() -> NotificationComposer:
    business_name = os.getenv("BURBUJA_BUSINESS_NAME", DEFAULT_BUSINESS_NAME).strip()
    return NotificationComposer(
        locale=get_locale_format(),
        business_name=business_name or DEFAULT_BUSINESS_NAME,
    )
