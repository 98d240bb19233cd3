from __future__ import annotations

from datetime import datetime, timedelta
from typing import Generic, Literal, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class HomeControlModel(BaseModel):
    """Base for payloads exchanged with the home control API (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChargeFinderSettings(HomeControlModel):
    number_of_compare_ranges: int = Field(ge=1)
    compare_range_percentage: float = Field(gt=0)
    maximum_electricity_price: float
    # Durations are transferred as seconds.
    minimum_force_charging_duration: timedelta = Field(
        alias="minimumForceChargingRangeTimeInterval"
    )
    maximum_force_charging_duration: timedelta = Field(
        alias="maximumForceChargingRangeTimeInterval"
    )
    search_window_duration: timedelta = Field(alias="rangeTimeInterval")

    @model_validator(mode="after")
    def _validate_durations(self) -> ChargeFinderSettings:
        if self.minimum_force_charging_duration > self.maximum_force_charging_duration:
            raise ValueError(
                "minimumForceChargingRangeTimeInterval must not exceed "
                "maximumForceChargingRangeTimeInterval"
            )
        if self.search_window_duration <= timedelta(0):
            raise ValueError("rangeTimeInterval must be positive")
        return self


class ElectricityPrice(HomeControlModel):
    starts_at: datetime
    total: float
    energy: float | None = None
    tax: float | None = None


class ForceChargingRange(HomeControlModel):
    starts_at: datetime
    ends_at: datetime
    target_state_of_charge: float = 1.0
    state: Literal["planned", "inProgress", "completed", "canceled"] = "planned"
    source: Literal["manual", "automatic"] = "automatic"


class Message(HomeControlModel):
    type: str
    title: str
    body: str


class Stored(HomeControlModel, Generic[T]):
    id: UUID
    value: T


class PageMetadata(HomeControlModel):
    page: int
    per: int
    total: int


class Page(HomeControlModel, Generic[T]):
    items: list[T]
    metadata: PageMetadata
