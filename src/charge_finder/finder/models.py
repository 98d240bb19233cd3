from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo

from charge_finder.models.home_control import ElectricityPrice

SPAN_FORMAT = "%d.%m.%y, %H:%M"


@dataclass(frozen=True, slots=True)
class RangedPricePoint:
    price: ElectricityPrice
    valid_from: datetime
    valid_to: datetime

    @property
    def starts_at(self) -> datetime:
        return self.price.starts_at

    @property
    def total(self) -> float:
        return self.price.total


@dataclass(frozen=True, slots=True)
class PriceGroup:
    """Contiguous run of cheap price points, oldest first."""

    items: tuple[RangedPricePoint, ...] = ()

    @property
    def span(self) -> tuple[datetime, datetime] | None:
        if not self.items:
            return None
        start = min(item.valid_from for item in self.items)
        end = max(item.valid_to for item in self.items)
        return start, end

    @property
    def duration(self) -> timedelta | None:
        span = self.span
        if span is None:
            return None
        return span[1] - span[0]

    def append(self, item: RangedPricePoint) -> PriceGroup:
        return PriceGroup(items=(*self.items, item))

    def drop_first(self) -> PriceGroup:
        return PriceGroup(items=self.items[1:])

    def format_span(self, tz: tzinfo | None = None) -> str | None:
        span = self.span
        if span is None:
            return None
        start, end = span
        return f"{start.astimezone(tz):{SPAN_FORMAT}} - {end.astimezone(tz):{SPAN_FORMAT}}"
