from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Protocol
from uuid import UUID

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from charge_finder.errors import HomeControlTransportError
from charge_finder.models.home_control import (
    ChargeFinderSettings,
    ElectricityPrice,
    ForceChargingRange,
    Message,
    Page,
    Stored,
)

logger = logging.getLogger(__name__)

PRICES_PER_PAGE = 1000
CHARGE_FINDER_SETTING = "chargeFinderSetting"


class HomeControlConfig(BaseModel):
    base_url: str = "http://localhost:8080"
    token: str | None = None
    verify_tls: bool = True

    model_config = ConfigDict(extra="forbid")


class HomeControlClientProtocol(Protocol):
    def get_charge_finder_settings(self) -> ChargeFinderSettings | None: ...

    def latest_force_charging_range(self) -> Stored[ForceChargingRange] | None: ...

    def query_electricity_prices(
        self,
        *,
        starts_from: dt.datetime,
        starts_until: dt.datetime,
    ) -> list[Stored[ElectricityPrice]]: ...

    def create_force_charging_range(
        self, force_charging_range: ForceChargingRange
    ) -> Stored[ForceChargingRange]: ...

    def create_message(self, message: Message) -> Stored[Message]: ...

    def send_push_notifications(self, message_id: UUID) -> None: ...


class HomeControlClient:
    """Small synchronous client for the home control REST API."""

    def __init__(
        self,
        *,
        config: HomeControlConfig,
        timeout_seconds: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config
        self._timeout = timeout_seconds
        self._transport = transport

    def _build_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self._config.token:
            headers["Authorization"] = f"Bearer {self._config.token}"
        return headers

    def _format_datetime(self, value: dt.datetime) -> str:
        if value.tzinfo is None:
            value = value.replace(tzinfo=dt.timezone.utc)
        return value.isoformat()

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        allow_not_found: bool = False,
    ) -> Any:
        url = f"{self._config.base_url.rstrip('/')}/{path.lstrip('/')}"
        try:
            with httpx.Client(
                verify=self._config.verify_tls,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = client.request(method, url, headers=self._build_headers(), json=json)
                if allow_not_found and response.status_code == httpx.codes.NOT_FOUND:
                    return None
                response.raise_for_status()
                if not response.content:
                    return None
                return response.json()
        except httpx.HTTPError as exc:
            raise HomeControlTransportError(f"{method} {url} failed: {exc}") from exc
        except ValueError as exc:
            raise HomeControlTransportError(f"{method} {url} returned invalid JSON") from exc

    def get_charge_finder_settings(self) -> ChargeFinderSettings | None:
        payload = self._request("GET", f"settings/{CHARGE_FINDER_SETTING}", allow_not_found=True)
        if not payload:
            return None
        try:
            return ChargeFinderSettings.model_validate(payload)
        except ValidationError as exc:
            logger.error("Ignoring invalid charge finder settings: %s", exc)
            return None

    def latest_force_charging_range(self) -> Stored[ForceChargingRange] | None:
        payload = self._request("GET", "force-charging-ranges/latest", allow_not_found=True)
        if not payload:
            return None
        return Stored[ForceChargingRange].model_validate(payload)

    def query_electricity_prices(
        self,
        *,
        starts_from: dt.datetime,
        starts_until: dt.datetime,
    ) -> list[Stored[ElectricityPrice]]:
        """Return every price starting inside the bounds, ascending by start time."""
        items: list[Stored[ElectricityPrice]] = []
        page_index = 0
        while True:
            payload = self._request(
                "POST",
                "electricity-prices/query",
                json={
                    "pagination": {"page": page_index, "per": PRICES_PER_PAGE},
                    "filter": [
                        {
                            "startsAt": {
                                "value": self._format_datetime(starts_from),
                                "method": "greaterThanOrEqual",
                            }
                        },
                        {
                            "startsAt": {
                                "value": self._format_datetime(starts_until),
                                "method": "lessThanOrEqual",
                            }
                        },
                    ],
                    "sort": {"value": "startsAt", "direction": "ascending"},
                },
            )
            page = Page[Stored[ElectricityPrice]].model_validate(payload)
            items.extend(page.items)
            fetched = page.metadata.page * page.metadata.per + len(page.items)
            if (
                not page.items
                or len(page.items) < page.metadata.per
                or fetched >= page.metadata.total
            ):
                break
            page_index += 1
        logger.debug("Fetched %d electricity prices over %d page(s)", len(items), page_index + 1)
        return items

    def create_force_charging_range(
        self, force_charging_range: ForceChargingRange
    ) -> Stored[ForceChargingRange]:
        payload = self._request(
            "POST",
            "force-charging-ranges",
            json=force_charging_range.model_dump(mode="json", by_alias=True),
        )
        return Stored[ForceChargingRange].model_validate(payload)

    def create_message(self, message: Message) -> Stored[Message]:
        payload = self._request(
            "POST",
            "messages",
            json=message.model_dump(mode="json", by_alias=True),
        )
        return Stored[Message].model_validate(payload)

    def send_push_notifications(self, message_id: UUID) -> None:
        self._request("POST", f"messages/{message_id}/push-notifications")
