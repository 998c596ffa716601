from __future__ import annotations

from datetime import date, datetime, time, timedelta
from enum import Enum

from services.api.app.services.errors import DeliveryWindowError

MINIMUM_LEAD = timedelta(hours=48)
SUGGESTED_LEAD = timedelta(hours=72)
DEFAULT_DELIVERY_TIME = time(14, 0)


class DeliveryShortcut(str, Enum):
    EXPRESS = "Express"
    RECOMENDADO = "Recomendado"


def as_local_naive(value: datetime) -> datetime:
    """Normalize to naive local time so it compares against `datetime.now()`."""

    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


class DeliveryWindowCalculator:
    """All inputs may be naive local or timezone-aware; outputs are naive local."""

    def __init__(
        self,
        *,
        minimum_lead: timedelta = MINIMUM_LEAD,
        suggested_lead: timedelta = SUGGESTED_LEAD,
        default_time: time = DEFAULT_DELIVERY_TIME,
    ) -> None:
        self.minimum_lead = minimum_lead
        self.suggested_lead = suggested_lead
        self.default_time = default_time

    def minimum(self, now: datetime) -> datetime:
        return as_local_naive(now) + self.minimum_lead

    def suggested(self, now: datetime) -> datetime:
        return as_local_naive(now) + self.suggested_lead

    def shortcut(self, name: DeliveryShortcut | str, now: datetime) -> datetime:
        choice = DeliveryShortcut(name)
        if choice is DeliveryShortcut.EXPRESS:
            return self.minimum(now)
        return self.suggested(now)

    def is_valid(self, candidate: datetime, now: datetime) -> bool:
        return as_local_naive(candidate) >= self.minimum(now)

    def validate(self, candidate: datetime, now: datetime) -> None:
        if not self.is_valid(candidate, now):
            hours = int(self.minimum_lead.total_seconds() // 3600)
            raise DeliveryWindowError(
                f"Delivery must be at least {hours}h from now "
                f"(earliest {self.minimum(now).isoformat(timespec='minutes')})"
            )

    def combine_date_and_time(self, previous: datetime | None, new_date: date) -> datetime:
        """A re-picked date keeps the previously chosen time of day."""

        time_of_day = as_local_naive(previous).time() if previous is not None else self.default_time
        return datetime.combine(new_date, time_of_day)

    def replace_time(self, previous: datetime | None, new_time: time, now: datetime) -> datetime:
        """A re-picked time keeps the previously chosen date.

        A time with a UTC offset is read on that date and converted to local time.
        """

        base = as_local_naive(previous) if previous is not None else self.suggested(now)
        return as_local_naive(datetime.combine(base.date(), new_time))
