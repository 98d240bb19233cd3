from charge_finder.models.home_control import (
    ChargeFinderSettings,
    ElectricityPrice,
    ForceChargingRange,
    Message,
    Page,
    PageMetadata,
    Stored,
)

__all__ = [
    "ChargeFinderSettings",
    "ElectricityPrice",
    "ForceChargingRange",
    "Message",
    "Page",
    "PageMetadata",
    "Stored",
]
