from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, tzinfo
from uuid import UUID

from charge_finder.errors import NoSettingsError, RangeCreationFailedError
from charge_finder.finder import (
    PriceGroup,
    build_ranged_series,
    clip_price_groups,
    find_price_groups,
)
from charge_finder.lib.home_control import HomeControlClientProtocol
from charge_finder.models.home_control import (
    ChargeFinderSettings,
    ForceChargingRange,
    Message,
    Stored,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE = timedelta(minutes=10)
MESSAGE_TYPE = "chargeFinderCreatedForceChargingRanges"
MESSAGE_TITLE = "Zwangsladung geplant"
TIME_FORMAT = "%H:%M"


@dataclass(slots=True)
class FindChargingRangesResult:
    window: tuple[datetime, datetime]
    price_count: int = 0
    groups: list[PriceGroup] = field(default_factory=list)
    clipped_groups: list[PriceGroup] = field(default_factory=list)
    created_ranges: list[Stored[ForceChargingRange]] = field(default_factory=list)
    message_id: UUID | None = None


class FindChargingRangesJob:
    """Plans force-charging ranges for upcoming cheap electricity price windows."""

    name = "find-charging-ranges"

    def __init__(
        self,
        *,
        client: HomeControlClientProtocol,
        max_age: timedelta = DEFAULT_MAX_AGE,
        dry_run: bool = False,
        display_tz: tzinfo | None = None,
    ) -> None:
        self.client = client
        self.max_age = max_age
        self.dry_run = dry_run
        self.display_tz = display_tz

    def run(self, now: datetime) -> FindChargingRangesResult:
        settings = self.client.get_charge_finder_settings()
        if settings is None:
            raise NoSettingsError()
        logger.info("Settings: %s", settings)

        window = self._detect_window(settings, now)
        result = FindChargingRangesResult(window=window)
        logger.info("Search window %s - %s", window[0].isoformat(), window[1].isoformat())

        stored_prices = self.client.query_electricity_prices(
            starts_from=window[0],
            starts_until=window[1],
        )
        result.price_count = len(stored_prices)
        logger.info("Electricity prices in window: %d", result.price_count)

        series = build_ranged_series([stored.value for stored in stored_prices])
        result.groups = find_price_groups(series, settings)
        logger.info("Price groups: %d", len(result.groups))
        self._log_groups("Price group", result.groups)

        result.clipped_groups = clip_price_groups(result.groups, settings)
        logger.info("Clipped price groups: %d", len(result.clipped_groups))
        self._log_groups("Clipped price group", result.clipped_groups)

        if not result.clipped_groups:
            logger.info("Return early: no clipped price groups")
            return result
        if self.dry_run:
            logger.info("Dry run: not creating %d range(s)", len(result.clipped_groups))
            return result

        result.created_ranges = self._create_ranges(result.clipped_groups)
        if result.created_ranges:
            result.message_id = self._send_message(result.created_ranges)
        return result

    def _detect_window(
        self, settings: ChargeFinderSettings, now: datetime
    ) -> tuple[datetime, datetime]:
        latest = self.client.latest_force_charging_range()
        start = now
        if latest is not None and latest.value.ends_at > now:
            start = latest.value.ends_at
        return start, start + settings.search_window_duration

    def _log_groups(self, label: str, groups: list[PriceGroup]) -> None:
        for group in groups:
            logger.info(
                "%s [%d] %s (%s)",
                label,
                len(group.items),
                group.format_span(self.display_tz),
                group.duration,
            )

    def _create_ranges(self, groups: list[PriceGroup]) -> list[Stored[ForceChargingRange]]:
        created: list[Stored[ForceChargingRange]] = []
        for group in groups:
            try:
                created.append(self._create_range(group))
            except RangeCreationFailedError as exc:
                logger.critical("Failed to create force charging range: %s", exc)
        return created

    def _create_range(self, group: PriceGroup) -> Stored[ForceChargingRange]:
        span = group.span
        if span is None:
            raise RangeCreationFailedError(f"Group without span: {group}")
        force_charging_range = ForceChargingRange(
            starts_at=span[0],
            ends_at=span[1],
            target_state_of_charge=1.0,
            state="planned",
            source="automatic",
        )
        logger.info("Create force charging range %s", force_charging_range)
        try:
            stored = self.client.create_force_charging_range(force_charging_range)
        except Exception as exc:
            raise RangeCreationFailedError(str(exc)) from exc
        logger.info("Created force charging range %s", stored.id)
        return stored

    def _send_message(self, ranges: list[Stored[ForceChargingRange]]) -> UUID:
        message = build_message(ranges, self.display_tz)
        logger.info("Create message %s", message)
        stored = self.client.create_message(message)
        logger.info("Created message %s", stored.id)
        self.client.send_push_notifications(stored.id)
        logger.info("Sent push notifications for message %s", stored.id)
        return stored.id


def build_message(
    ranges: list[Stored[ForceChargingRange]], tz: tzinfo | None = None
) -> Message:
    formatted = ", ".join(
        f"{stored.value.starts_at.astimezone(tz):{TIME_FORMAT}} – "
        f"{stored.value.ends_at.astimezone(tz):{TIME_FORMAT}}"
        for stored in ranges
    )
    return Message(
        type=MESSAGE_TYPE,
        title=MESSAGE_TITLE,
        body=f"Es wurden {len(ranges)} Zeiträume für die Zwangsladung geplant: {formatted}",
    )
