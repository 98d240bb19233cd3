from __future__ import annotations

from datetime import UTC, datetime, timedelta

from charge_finder.finder import PriceGroup, RangedPricePoint, clip_group, clip_price_groups
from charge_finder.models.home_control import ChargeFinderSettings, ElectricityPrice

START = datetime(2026, 1, 7, 0, 0, tzinfo=UTC)
HOUR = timedelta(hours=1)


def _settings(*, minimum: timedelta, maximum: timedelta) -> ChargeFinderSettings:
    return ChargeFinderSettings(
        number_of_compare_ranges=2,
        compare_range_percentage=1.0,
        maximum_electricity_price=100.0,
        minimum_force_charging_duration=minimum,
        maximum_force_charging_duration=maximum,
        search_window_duration=timedelta(hours=24),
    )


def _group(hours: int, *, offset: int = 0) -> PriceGroup:
    return PriceGroup(
        items=tuple(
            RangedPricePoint(
                price=ElectricityPrice(starts_at=START + idx * HOUR, total=float(idx)),
                valid_from=START + idx * HOUR,
                valid_to=START + (idx + 1) * HOUR - timedelta(seconds=1),
            )
            for idx in range(offset, offset + hours)
        )
    )


def test_group_span_and_duration() -> None:
    group = _group(3)

    assert group.span == (START, START + 3 * HOUR - timedelta(seconds=1))
    assert group.duration == 3 * HOUR - timedelta(seconds=1)


def test_empty_group_has_no_span() -> None:
    group = PriceGroup()

    assert group.span is None
    assert group.duration is None
    assert group.format_span() is None


def test_format_span_uses_timezone() -> None:
    assert _group(2).format_span(UTC) == "07.01.26, 00:00 - 07.01.26, 01:59"


def test_clip_removes_leading_items() -> None:
    group = _group(3)

    clipped = clip_group(group, HOUR)

    assert clipped.items == group.items[2:]
    assert clipped.duration == HOUR - timedelta(seconds=1)


def test_clip_keeps_group_that_fits() -> None:
    group = _group(2)

    assert clip_group(group, 2 * HOUR) == group


def test_clip_can_empty_group() -> None:
    clipped = clip_group(_group(3), timedelta(minutes=30))

    assert clipped.items == ()


def test_front_trimming_never_increases_duration() -> None:
    group = _group(5)
    durations = []
    steps = 0
    while group.items:
        durations.append(group.duration)
        group = group.drop_first()
        steps += 1

    assert steps == 5
    assert durations == sorted(durations, reverse=True)


def test_clip_price_groups_reduces_three_hours_to_one() -> None:
    settings = _settings(minimum=timedelta(minutes=30), maximum=HOUR)
    group = _group(3)

    result = clip_price_groups([group], settings)

    assert len(result) == 1
    assert result[0].items == group.items[2:]


def test_clip_price_groups_discards_short_groups() -> None:
    settings = _settings(minimum=2 * HOUR, maximum=4 * HOUR)

    result = clip_price_groups([_group(1), _group(3, offset=5)], settings)

    assert len(result) == 1
    assert result[0].items[0].starts_at == START + 5 * HOUR


def test_clip_price_groups_discards_emptied_groups() -> None:
    settings = _settings(minimum=timedelta(0), maximum=timedelta(minutes=30))

    assert clip_price_groups([_group(2)], settings) == []


def test_surviving_groups_respect_bounds() -> None:
    minimum = 90 * timedelta(minutes=1)
    maximum = 3 * HOUR
    settings = _settings(minimum=minimum, maximum=maximum)
    groups = [_group(1), _group(2, offset=2), _group(6, offset=5), _group(3, offset=12)]

    result = clip_price_groups(groups, settings)

    assert [len(group.items) for group in result] == [2, 3, 3]
    for group in result:
        assert group.duration is not None
        assert minimum <= group.duration <= maximum
