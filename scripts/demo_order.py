from __future__ import annotations

import argparse
from datetime import datetime
from decimal import Decimal

from packages.shared.schemas.order_v1 import ChargeUnitV1, ServiceTypeV1
from services.api.app.db.database import session_scope
from services.api.app.db.init_db import init_db
from services.api.app.db.orders import order_record
from services.api.app.logging_config import configure_logging
from services.api.app.services.cart import CartEngine, ItemDraft
from services.api.app.services.delivery import DeliveryWindowCalculator
from services.api.app.services.directory_factory import get_client_directory
from services.api.app.services.finalizer import OrderFinalizer
from services.api.app.services.formatting import format_amount, get_locale_format
from services.api.app.services.notifications import NotificationComposer
from services.api.app.services.pricing import ExplicitPrice


def main() -> int:
    parser = argparse.ArgumentParser(description="Build and finalize a sample laundry order")
    parser.add_argument("--client", default="Juan Pérez", help="Directory search text")
    parser.add_argument("--locale", default=None, help="es-ES or en-US")
    parser.add_argument(
        "--persist",
        action="store_true",
        help="Write the finalized order to DATABASE_URL",
    )
    args = parser.parse_args()

    configure_logging()

    matches = get_client_directory().search(args.client)
    if not matches:
        print(f"No client matches {args.client!r}")
        return 1
    cliente = matches[0]

    engine = CartEngine(cliente)
    engine.add_item(
        ItemDraft(
            nombre="Camisa",
            tipo_servicio=ServiceTypeV1.LAVADO,
            unidad_cobro=ChargeUnitV1.UNIDAD,
            cantidad=Decimal("2"),
            precio=ExplicitPrice(Decimal("5")),
        )
    )
    engine.add_item(
        ItemDraft(
            nombre="Edredón matrimonial",
            tipo_servicio=ServiceTypeV1.LAVADO,
            unidad_cobro=ChargeUnitV1.KILO,
            cantidad=Decimal("1.5"),
            precio=ExplicitPrice(Decimal("18")),
        )
    )

    now = datetime.now()
    calculator = DeliveryWindowCalculator()
    engine.set_delivery_date(calculator.suggested(now))

    locale = get_locale_format(args.locale)
    result = OrderFinalizer(calculator=calculator, locale=locale).finalize(engine.draft, now=now)
    if result.order is None:
        assert result.failure is not None
        print(f"Finalize rejected: {result.failure.reason.value} ({result.failure.message})")
        return 1

    order = result.order
    composer = NotificationComposer(locale=locale)

    print(f"Order {order.codigo} total={format_amount(order.total)}")
    print()
    print("QR payload:")
    print(order.qr_payload)
    print()
    print(composer.build_whatsapp_message(order))

    if args.persist:
        init_db()
        with session_scope() as db:
            db.add(order_record(order))
        print(f"Persisted order={order.codigo}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
