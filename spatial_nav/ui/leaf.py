"""
Leaf resolution - turns "focus this group" into a concrete node.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from spatial_nav.ui.layout import LayoutCache
    from spatial_nav.ui.node import FocusNode
    from spatial_nav.ui.tree import FocusTree


class LeafResolver:
    """
    Descends from a target node to the node that actually takes focus.

    At every level, checks (in this order):
    1. Last focused child, if the node saves it
    2. Preferred child
    3. Focusable child closest to the page origin (|left| + |top|)

    A node without focusable children is returned as-is, even if it is not
    focusable itself.
    """

    def __init__(
        self,
        tree: 'FocusTree',
        layouts: 'LayoutCache',
        trace: Optional[Callable[..., None]] = None,
    ):
        self.tree = tree
        self.layouts = layouts
        self._trace = trace or (lambda *args: None)

    def resolve(self, target_id: Optional[str], current_focus_id: Optional[str] = None) -> Optional[str]:
        """
        Resolve a target to a leaf id.

        Args:
            target_id: Node or group to focus
            current_focus_id: Returned unchanged when the target is unknown

        Returns:
            Id of the node to focus
        """
        node = self.tree.get(target_id)
        if node is None:
            self._trace("resolve", "unknown target", target_id)
            return current_focus_id

        visited = {node.node_id}

        while True:
            next_node = self._next_level(node)
            if next_node is None or next_node.node_id in visited:
                self._trace("resolve", "leaf", node.node_id)
                return node.node_id

            visited.add(next_node.node_id)
            node = next_node

    def _next_level(self, node: 'FocusNode') -> Optional['FocusNode']:
        children = self.tree.focusable_children(node.node_id)
        if not children:
            return None

        last_id = node.last_focused_child_id
        if last_id and node.save_last_focused_child and self.tree.is_participating(last_id):
            self._trace("resolve", "last focused child", last_id)
            return self.tree.get(last_id)

        preferred_id = node.preferred_child_id
        if preferred_id and self.tree.is_participating(preferred_id):
            self._trace("resolve", "preferred child", preferred_id)
            return self.tree.get(preferred_id)

        closest = closest_to_origin(children, self.layouts)
        self._trace("resolve", "closest child", closest.node_id)
        return closest


def closest_to_origin(children: list['FocusNode'], layouts: 'LayoutCache') -> 'FocusNode':
    """Child whose box is nearest the page origin; first registered wins ties."""
    def distance(child: 'FocusNode') -> float:
        box = layouts.get(child)
        return abs(box.left) + abs(box.top)

    return min(children, key=distance)
