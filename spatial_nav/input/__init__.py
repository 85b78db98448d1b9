"""Input handling module."""

from spatial_nav.input.dispatcher import InputDispatcher
from spatial_nav.input.throttle import Throttle

__all__ = [
    "InputDispatcher",
    "Throttle",
]
