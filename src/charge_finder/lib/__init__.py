from charge_finder.lib.home_control import (
    HomeControlClient,
    HomeControlClientProtocol,
    HomeControlConfig,
)

__all__ = ["HomeControlClient", "HomeControlClientProtocol", "HomeControlConfig"]
