"""Core module: actions, events, configuration and the navigator."""

from spatial_nav.core.actions import (
    Action,
    DIRECTIONS,
    DEFAULT_KEY_MAP,
    ROOT_FOCUS_ID,
    normalize_key_map,
)
from spatial_nav.core.events import EventBus, Event, NavigationEvent
from spatial_nav.core.config import NavigationConfig, ThrottleConfig
from spatial_nav.core.navigator import SpatialNavigator

__all__ = [
    "Action",
    "DIRECTIONS",
    "DEFAULT_KEY_MAP",
    "ROOT_FOCUS_ID",
    "normalize_key_map",
    "EventBus",
    "Event",
    "NavigationEvent",
    "NavigationConfig",
    "ThrottleConfig",
    "SpatialNavigator",
]
