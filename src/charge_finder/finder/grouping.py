from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from charge_finder.finder.models import PriceGroup, RangedPricePoint
from charge_finder.models.home_control import ChargeFinderSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PointEvaluation:
    index: int
    point: RangedPricePoint
    compare_average: float
    threshold: float
    below_threshold: bool
    below_maximum: bool

    @property
    def is_cheap(self) -> bool:
        return self.below_threshold and self.below_maximum


@dataclass(frozen=True, slots=True)
class _GroupingState:
    closed: tuple[PriceGroup, ...] = ()
    open: PriceGroup | None = None


def evaluate_point(
    series: Sequence[RangedPricePoint],
    index: int,
    settings: ChargeFinderSettings,
) -> PointEvaluation | None:
    """Compare a point against the average of the points following it.

    Returns None near the end of the series, where fewer than
    ``number_of_compare_ranges`` successors are left to compare against.
    """
    count = settings.number_of_compare_ranges
    compare_window = series[index + 1 : index + 1 + count]
    if len(compare_window) < count:
        return None

    point = series[index]
    average = sum(item.total for item in compare_window) / len(compare_window)
    threshold = average * settings.compare_range_percentage
    return PointEvaluation(
        index=index,
        point=point,
        compare_average=average,
        threshold=threshold,
        below_threshold=point.total < threshold,
        below_maximum=point.total <= settings.maximum_electricity_price,
    )


def _close(state: _GroupingState) -> _GroupingState:
    if state.open is None:
        return state
    return _GroupingState(closed=(*state.closed, state.open), open=None)


def _step(state: _GroupingState, point: RangedPricePoint, is_cheap: bool) -> _GroupingState:
    if not is_cheap:
        return _close(state)
    current = state.open if state.open is not None else PriceGroup()
    return _GroupingState(closed=state.closed, open=current.append(point))


def find_price_groups(
    series: Sequence[RangedPricePoint],
    settings: ChargeFinderSettings,
) -> list[PriceGroup]:
    """Fold consecutive cheap points of the series into groups."""
    state = _GroupingState()
    for index in range(len(series)):
        evaluation = evaluate_point(series, index, settings)
        if evaluation is None:
            continue
        logger.debug(
            "[%d] %s %.4f (threshold %.4f) cheap=%s",
            index,
            evaluation.point.starts_at.isoformat(),
            evaluation.point.total,
            evaluation.threshold,
            evaluation.is_cheap,
        )
        state = _step(state, evaluation.point, evaluation.is_cheap)
    return list(_close(state).closed)
