"""
Spatial Navigation

Directional (arrow-key / remote-control) focus management for UIs.

Quick Start:
    from spatial_nav import SpatialNavigator, NodeDescriptor, RectLayoutProvider

    navigator = SpatialNavigator(RectLayoutProvider())
    navigator.initialize()

    navigator.register(NodeDescriptor(node_id="menu"))
    navigator.register(NodeDescriptor(node_id="play", parent_id="menu", handle=play_rect))
    navigator.register(NodeDescriptor(node_id="quit", parent_id="menu", handle=quit_rect))

    navigator.set_focus("menu")
    for event in pygame.event.get():
        navigator.input.process_event(event)
"""

__version__ = "0.1.0"

from spatial_nav.core import (
    Action,
    DEFAULT_KEY_MAP,
    ROOT_FOCUS_ID,
    EventBus,
    Event,
    NavigationEvent,
    NavigationConfig,
    ThrottleConfig,
    SpatialNavigator,
)
from spatial_nav.ui import (
    Box,
    FocusCallbacks,
    FocusNode,
    KeyPressDetails,
    NodeDescriptor,
    NodeUpdate,
    LayoutProvider,
    RectLayoutProvider,
    FunctionLayoutProvider,
)

__all__ = [
    # Engine
    "SpatialNavigator",
    "NavigationConfig",
    "ThrottleConfig",

    # Actions
    "Action",
    "DEFAULT_KEY_MAP",
    "ROOT_FOCUS_ID",

    # Events
    "EventBus",
    "Event",
    "NavigationEvent",

    # Nodes
    "Box",
    "FocusCallbacks",
    "FocusNode",
    "KeyPressDetails",
    "NodeDescriptor",
    "NodeUpdate",

    # Layout
    "LayoutProvider",
    "RectLayoutProvider",
    "FunctionLayoutProvider",
]
