from __future__ import annotations

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator

from charge_finder.lib.home_control import HomeControlConfig


class WorkerConfig(BaseModel):
    poll_interval_seconds: float = Field(default=1.0, gt=0, le=3600)
    find_charging_ranges_max_age_minutes: float = Field(default=10.0, gt=0, le=1440)

    model_config = ConfigDict(extra="forbid")


class AppConfig(BaseModel):
    home_control: HomeControlConfig = Field(default_factory=HomeControlConfig)
    worker: WorkerConfig = Field(default_factory=WorkerConfig)
    # IANA zone used for log and notification times; system local time when unset.
    display_timezone: str | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("display_timezone")
    @classmethod
    def _validate_display_timezone(cls, value: str | None) -> str | None:
        if value is None:
            return value
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    def display_tz(self) -> ZoneInfo | None:
        if self.display_timezone is None:
            return None
        return ZoneInfo(self.display_timezone)
