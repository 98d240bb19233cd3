"""Price window segmentation: ranged series, cheap groups and clipping."""

from charge_finder.finder.clipping import clip_group, clip_price_groups
from charge_finder.finder.grouping import PointEvaluation, evaluate_point, find_price_groups
from charge_finder.finder.models import PriceGroup, RangedPricePoint
from charge_finder.finder.series import build_ranged_series

__all__ = [
    "PointEvaluation",
    "PriceGroup",
    "RangedPricePoint",
    "build_ranged_series",
    "clip_group",
    "clip_price_groups",
    "evaluate_point",
    "find_price_groups",
]
