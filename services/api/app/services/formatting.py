"""Locale-parameterized formatting for order payloads and messages.

Weekday and month names come from fixed tables, never from the host locale, so templates
compare byte-for-byte.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

_CENTS = Decimal("0.01")


def format_amount(value: Decimal) -> str:
    """Two decimals, half-up, "." separator. Used by the QR payload and the templates."""

    return str(value.quantize(_CENTS, rounding=ROUND_HALF_UP))


def format_number(value: Decimal) -> str:
    """Shortest plain rendering: 2 -> "2", 1.50 -> "1.5"."""

    normalized = value.normalize()
    return format(normalized, "f")


@dataclass(frozen=True, slots=True)
class LocaleFormat:
    code: str
    weekdays: tuple[str, ...]
    months: tuple[str, ...]
    hour12: bool = False

    def _time(self, dt: datetime, *, seconds: bool) -> str:
        if not self.hour12:
            return dt.strftime("%H:%M:%S" if seconds else "%H:%M")
        hour = dt.hour % 12 or 12
        suffix = "AM" if dt.hour < 12 else "PM"
        tail = f":{dt.second:02d}" if seconds else ""
        return f"{hour}:{dt.minute:02d}{tail} {suffix}"

    def format_datetime(self, dt: datetime) -> str:
        """Numeric date and time, e.g. "19/10/2026, 14:00:00"."""

        if self.hour12:
            day_part = f"{dt.month}/{dt.day}/{dt.year}"
        else:
            day_part = f"{dt.day}/{dt.month}/{dt.year}"
        return f"{day_part}, {self._time(dt, seconds=True)}"

    def format_long_date(self, dt: datetime) -> str:
        """Weekday and month spelled out, e.g. "lunes, 19 de octubre de 2026"."""

        weekday = self.weekdays[dt.weekday()]
        month = self.months[dt.month - 1]
        if self.hour12:
            return f"{weekday}, {month} {dt.day}, {dt.year}"
        return f"{weekday}, {dt.day} de {month} de {dt.year}"

    def format_time(self, dt: datetime) -> str:
        return self._time(dt, seconds=False)


ES_ES = LocaleFormat(
    code="es-ES",
    weekdays=("lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo"),
    months=(
        "enero",
        "febrero",
        "marzo",
        "abril",
        "mayo",
        "junio",
        "julio",
        "agosto",
        "septiembre",
        "octubre",
        "noviembre",
        "diciembre",
    ),
)

EN_US = LocaleFormat(
    code="en-US",
    weekdays=("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"),
    months=(
        "January",
        "February",
        "March",
        "April",
        "May",
        "June",
        "July",
        "August",
        "September",
        "October",
        "November",
        "December",
    ),
    hour12=True,
)

LOCALES: dict[str, LocaleFormat] = {ES_ES.code: ES_ES, EN_US.code: EN_US}


def get_locale_format(code: str | None = None) -> LocaleFormat:
    code = (code or os.getenv("BURBUJA_LOCALE", ES_ES.code)).strip()
    try:
        return LOCALES[code]
    except KeyError as e:
        raise ValueError(
            f"Unknown BURBUJA_LOCALE={code!r}. Expected one of {sorted(LOCALES)}."
        ) from e
