from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

import structlog
from services.api.app.services.finalizer import Order
from services.api.app.services.notifications import NotificationComposer
from services.api.app.services.render_base import QrRenderer, ShareSink

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ShareOutcome:
    order_code: str
    delivered: bool
    with_image: bool
    text: str
    error: str | None = None


@dataclass(frozen=True, slots=True)
class SharedMessage:
    order_code: str
    text: str
    image_png: bytes | None
    shared_at: datetime


@dataclass
class OutboxShareSink:
    """Keeps shared messages in memory. Stands in for the device share sheet."""

    messages: list[SharedMessage] = field(default_factory=list)

    def share(self, *, order_code: str, text: str, image_png: bytes | None) -> None:
        self.messages.append(
            SharedMessage(
                order_code=order_code,
                text=text,
                image_png=image_png,
                shared_at=datetime.now(),
            )
        )


def share_order(
    order: Order,
    *,
    composer: NotificationComposer,
    renderer: QrRenderer,
    sink: ShareSink,
) -> ShareOutcome:
    """Share the WhatsApp message with the QR image attached when it can be rendered.

    Any render failure downgrades to text only. Any sink failure is reported, not raised.
    """

    text = composer.build_whatsapp_message(order)

    image: bytes | None = None
    try:
        image = renderer.render_png(order.qr_payload)
    except Exception as e:
        logger.warning("qr_render_failed", codigo=order.codigo, error=str(e))

    try:
        sink.share(order_code=order.codigo, text=text, image_png=image)
    except Exception as e:
        logger.warning("share_failed", codigo=order.codigo, error=str(e))
        return ShareOutcome(
            order_code=order.codigo,
            delivered=False,
            with_image=image is not None,
            text=text,
            error=str(e),
        )

    logger.info("order_shared", codigo=order.codigo, with_image=image is not None)
    return ShareOutcome(
        order_code=order.codigo,
        delivered=True,
        with_image=image is not None,
        text=text,
    )
