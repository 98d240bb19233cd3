from __future__ import annotations

from collections.abc import Sequence
from datetime import timedelta

from charge_finder.finder.models import RangedPricePoint
from charge_finder.models.home_control import ElectricityPrice

# A slot ends this long before its successor starts.
INTERVAL_END_OFFSET = timedelta(seconds=1)


def build_ranged_series(prices: Sequence[ElectricityPrice]) -> list[RangedPricePoint]:
    """Bound every price by the start of its successor.

    The last price has no successor to bound it, so it is dropped.
    """
    return [
        RangedPricePoint(
            price=price,
            valid_from=price.starts_at,
            valid_to=successor.starts_at - INTERVAL_END_OFFSET,
        )
        for price, successor in zip(prices, prices[1:])
    ]
