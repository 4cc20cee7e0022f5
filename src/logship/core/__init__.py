"""Shipping orchestration: the drain loop and its periodic scheduler."""

from .scheduler import ShipScheduler
from .shipper import LogShipper
from .types import SchedulerState, ShipperConfig, ShippingError, TickResult, TickStatus

__all__ = [
    "ShipScheduler",
    "LogShipper",
    "SchedulerState",
    "ShipperConfig",
    "ShippingError",
    "TickResult",
    "TickStatus",
]
