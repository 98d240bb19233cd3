from __future__ import annotations

from datetime import UTC, datetime, timedelta

from charge_finder.finder import build_ranged_series
from charge_finder.models.home_control import ElectricityPrice

START = datetime(2026, 1, 7, 0, 0, tzinfo=UTC)


def _prices(
    totals: list[float], *, step: timedelta = timedelta(hours=1)
) -> list[ElectricityPrice]:
    return [
        ElectricityPrice(starts_at=START + idx * step, total=total)
        for idx, total in enumerate(totals)
    ]


def test_drops_last_point() -> None:
    series = build_ranged_series(_prices([1.0, 2.0, 3.0, 4.0]))

    assert len(series) == 3
    assert [point.total for point in series] == [1.0, 2.0, 3.0]


def test_interval_ends_one_second_before_successor() -> None:
    series = build_ranged_series(_prices([1.0, 2.0, 3.0]))

    assert series[0].valid_from == START
    assert series[0].valid_to == START + timedelta(minutes=59, seconds=59)
    for current, following in zip(series, series[1:]):
        assert following.valid_from - current.valid_to == timedelta(seconds=1)


def test_slot_length_follows_gap_to_successor() -> None:
    prices = [
        ElectricityPrice(starts_at=START, total=1.0),
        ElectricityPrice(starts_at=START + timedelta(minutes=15), total=2.0),
        ElectricityPrice(starts_at=START + timedelta(hours=1), total=3.0),
    ]

    series = build_ranged_series(prices)

    assert series[0].valid_to - series[0].valid_from == timedelta(minutes=14, seconds=59)
    assert series[1].valid_to - series[1].valid_from == timedelta(minutes=44, seconds=59)


def test_short_input_yields_empty_series() -> None:
    assert build_ranged_series([]) == []
    assert build_ranged_series(_prices([1.0])) == []
