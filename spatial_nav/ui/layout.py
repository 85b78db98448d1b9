"""
Layout measurement and caching.

The navigator never performs layout itself. A LayoutProvider measures the
host object behind a node; the LayoutCache makes sure each node is
measured at most once per navigation round.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Optional

from spatial_nav.ui.node import Box

if TYPE_CHECKING:
    from spatial_nav.ui.node import FocusNode
    from spatial_nav.ui.tree import FocusTree


class LayoutProvider(ABC):
    """Measures the on-screen bounding box of a node handle."""

    @abstractmethod
    def measure(self, handle: Any) -> Box:
        """
        Measure a handle.

        Args:
            handle: Opaque host object registered with the node

        Returns:
            Absolute bounding box
        """


class RectLayoutProvider(LayoutProvider):
    """
    Reads geometry straight off the handle.

    Works with pygame.Rect, Box, (left, top, width, height) tuples, or any
    object with a `rect` attribute holding one of those.
    """

    def measure(self, handle: Any) -> Box:
        rect = getattr(handle, "rect", handle)
        return Box.coerce(rect)


class FunctionLayoutProvider(LayoutProvider):
    """Adapts a plain `measure(handle)` callable."""

    def __init__(self, func: Callable[[Any], Any]):
        self._func = func

    def measure(self, handle: Any) -> Box:
        return Box.coerce(self._func(handle))


class LayoutCache:
    """
    Per-node cached boxes with an explicit validity flag.

    Nodes without a handle (or a cache without a provider) keep whatever
    box they were registered with.
    """

    def __init__(self, tree: 'FocusTree', provider: Optional[LayoutProvider] = None):
        self.tree = tree
        self.provider = provider

    def get(self, node: 'FocusNode') -> Box:
        """Cached box if valid, otherwise measure and cache it."""
        if not node.layout_valid:
            self._measure(node)
        return node.box

    def refresh(self, node: 'FocusNode') -> Box:
        """Measure a node regardless of its validity flag."""
        self._measure(node)
        return node.box

    def invalidate(self, node: 'FocusNode') -> None:
        node.layout_valid = False

    def invalidate_all(self) -> None:
        """Start a new round: every box is re-measured on next access."""
        for node in self.tree:
            node.layout_valid = False

    def recompute_all(self) -> None:
        """Invalidate and eagerly re-measure every node."""
        for node in self.tree:
            self._measure(node)

    def _measure(self, node: 'FocusNode') -> None:
        if self.provider is not None and node.handle is not None:
            node.box = Box.coerce(self.provider.measure(node.handle))
        node.layout_valid = True
