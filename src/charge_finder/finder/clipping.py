from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import timedelta

from charge_finder.finder.models import PriceGroup
from charge_finder.models.home_control import ChargeFinderSettings

logger = logging.getLogger(__name__)


def clip_group(group: PriceGroup, maximum_duration: timedelta) -> PriceGroup:
    """Drop leading items until the group fits into ``maximum_duration``.

    The latest items are always kept; the group may end up empty.
    """
    clipped = group
    while clipped.items and (clipped.duration or timedelta(0)) > maximum_duration:
        clipped = clipped.drop_first()
    return clipped


def clip_price_groups(
    groups: Iterable[PriceGroup],
    settings: ChargeFinderSettings,
) -> list[PriceGroup]:
    logger.info(
        "Clip groups to maximum duration %s", settings.maximum_force_charging_duration
    )
    result: list[PriceGroup] = []
    for group in groups:
        clipped = clip_group(group, settings.maximum_force_charging_duration)
        logger.info("Clip group %d to %d", len(group.items), len(clipped.items))

        duration = clipped.duration or timedelta(0)
        if not clipped.items or duration < settings.minimum_force_charging_duration:
            logger.warning(
                "Skip clipped group with %d items: duration %s below minimum %s",
                len(clipped.items),
                duration,
                settings.minimum_force_charging_duration,
            )
            continue
        result.append(clipped)
    return result
