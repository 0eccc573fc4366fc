"""
Wire Modules Configuration

Modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from evently.service.listing.driving_adapter.http_controller import (
    booking_controller,
    event_controller,
)


WIRE_MODULES: list[ModuleType] = [
    event_controller,
    booking_controller,
]
