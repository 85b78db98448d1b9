"""
Focus tree and navigation algorithms.

Architecture:
    - FocusTree: Owns every FocusNode
    - LayoutCache: Measures boxes through a LayoutProvider, once per round
    - DirectionalResolver: Picks the next sibling for an arrow move
    - LeafResolver: Descends from a group to the node that takes focus
    - FocusController: Commits focus changes and fires callbacks
"""

from spatial_nav.ui.node import (
    Box,
    FocusCallbacks,
    FocusNode,
    KeyPressDetails,
    NodeDescriptor,
    NodeUpdate,
)
from spatial_nav.ui.tree import FocusTree
from spatial_nav.ui.layout import (
    LayoutProvider,
    RectLayoutProvider,
    FunctionLayoutProvider,
    LayoutCache,
)
from spatial_nav.ui.directional import DirectionalResolver
from spatial_nav.ui.leaf import LeafResolver
from spatial_nav.ui.focus import FocusController

__all__ = [
    "Box",
    "FocusCallbacks",
    "FocusNode",
    "KeyPressDetails",
    "NodeDescriptor",
    "NodeUpdate",
    "FocusTree",
    "LayoutProvider",
    "RectLayoutProvider",
    "FunctionLayoutProvider",
    "LayoutCache",
    "DirectionalResolver",
    "LeafResolver",
    "FocusController",
]
