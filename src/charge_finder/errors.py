from __future__ import annotations


class ChargeFinderError(Exception):
    """Base class for failures that abort or skip part of a charge finder run."""


class NoSettingsError(ChargeFinderError):
    def __init__(self) -> None:
        super().__init__("Charge finder settings are not configured")


class RangeCreationFailedError(ChargeFinderError):
    pass


class HomeControlTransportError(ChargeFinderError):
    pass
