"""
Focus controller - commits focus changes.

Resolves the target to a leaf, fires blur/focus callbacks, keeps the set of
ancestors that have a focused descendant, and records the last focused
child chain so groups can restore focus later.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Optional

if TYPE_CHECKING:
    from spatial_nav.ui.layout import LayoutCache
    from spatial_nav.ui.leaf import LeafResolver
    from spatial_nav.ui.node import FocusNode
    from spatial_nav.ui.tree import FocusTree


class FocusController:
    """
    Owns the current-focus pointer.

    Provides:
    - Idempotent focus changes (re-focusing the same leaf fires nothing)
    - has-focused-child tracking for ancestors
    - Last-focused-child bookkeeping along the focused branch

    focus() is a no-op until `enabled` is set.
    """

    def __init__(
        self,
        tree: 'FocusTree',
        layouts: 'LayoutCache',
        leaf_resolver: 'LeafResolver',
    ):
        self.tree = tree
        self.layouts = layouts
        self.leaf_resolver = leaf_resolver
        self.enabled = False

        self._focus_id: Optional[str] = None

        # Ancestors of the focused node, nearest first
        self._parents_with_focused_child: list[str] = []

        # Callbacks
        self.on_focus_changed: Optional[Callable[[Optional[str], Optional[str], dict[str, Any]], None]] = None

    @property
    def focus_id(self) -> Optional[str]:
        """Id of the currently focused node."""
        return self._focus_id

    @property
    def focused_node(self) -> Optional['FocusNode']:
        """The focused node, if it is still registered."""
        return self.tree.get(self._focus_id)

    @property
    def parents_with_focused_child(self) -> tuple[str, ...]:
        """Ancestors currently flagged as having a focused descendant."""
        return tuple(self._parents_with_focused_child)

    def focus(self, target_id: Optional[str], details: Optional[dict[str, Any]] = None) -> bool:
        """
        Focus a node or group.

        Args:
            target_id: Node to focus; groups resolve to one of their leaves
            details: Extra data bounced back to focus/blur callbacks

        Returns:
            True if focus changed
        """
        if not self.enabled:
            return False

        details = details if details is not None else {}
        old_focus_id = self._focus_id
        new_focus_id = self.leaf_resolver.resolve(target_id, old_focus_id)

        if new_focus_id == old_focus_id:
            return False

        old_node = self.tree.get(old_focus_id)
        if old_node is not None:
            old_node.callbacks.on_update_focus(False)
            self._blur(old_focus_id, details)

            # A blur callback moved focus itself
            if self._focus_id != old_focus_id:
                return True

        self._focus_id = new_focus_id

        new_node = self.tree.get(new_focus_id)
        if new_node is not None:
            new_node.callbacks.on_update_focus(True)
            self._focus(new_focus_id, details)

        # Nested focus() calls from the callbacks own the bookkeeping from here
        if self._focus_id != new_focus_id:
            return True

        self._update_parents_has_focused_child(new_focus_id, details)
        if self._focus_id != new_focus_id:
            return True

        self._update_parents_last_focused_child(new_focus_id)

        if self.on_focus_changed:
            self.on_focus_changed(old_focus_id, new_focus_id, details)

        return True

    def sync(self, details: Optional[dict[str, Any]] = None) -> None:
        """
        Re-announce the current focus after the focused id was re-registered.

        If the new node resolves to a different leaf (it now has focusable
        children), focus moves to that leaf.
        """
        node = self.focused_node
        if not self.enabled or node is None:
            return

        leaf_id = self.leaf_resolver.resolve(node.node_id, node.node_id)
        if leaf_id != node.node_id:
            self.focus(leaf_id, details)
            return

        node.callbacks.on_update_focus(True)
        self._update_parents_has_focused_child(node.node_id, details if details is not None else {})

    def forget(self, node_id: str) -> None:
        """Drop a removed node from the tracked ancestor set."""
        if node_id in self._parents_with_focused_child:
            self._parents_with_focused_child.remove(node_id)

    def reset(self) -> None:
        """Clear focus state without firing callbacks."""
        self._focus_id = None
        self._parents_with_focused_child = []

    def _update_parents_has_focused_child(self, focus_id: Optional[str], details: dict[str, Any]) -> None:
        parents = self.tree.ancestors(focus_id)
        previous = self._parents_with_focused_child

        removed = [parent_id for parent_id in previous if parent_id not in parents]
        added = [parent_id for parent_id in parents if parent_id not in previous]

        # Stored before the callbacks so a nested focus() diffs against it
        self._parents_with_focused_child = parents

        for parent_id in removed:
            parent = self.tree.get(parent_id)
            if parent is not None and parent.track_children:
                parent.callbacks.on_update_has_focused_child(False)
            if self._is_participating(parent_id):
                self._blur(parent_id, details)

        for parent_id in added:
            parent = self.tree.get(parent_id)
            if parent is not None and parent.track_children:
                parent.callbacks.on_update_has_focused_child(True)
            if self._is_participating(parent_id):
                self._focus(parent_id, details)

    def _update_parents_last_focused_child(self, focus_id: Optional[str]) -> None:
        node = self.tree.get(focus_id)
        seen = set()

        while node is not None and node.node_id not in seen:
            seen.add(node.node_id)
            parent = self.tree.get(node.parent_id)
            if parent is not None:
                parent.last_focused_child_id = node.node_id
            node = parent

    def _is_participating(self, node_id: str) -> bool:
        return self.tree.is_participating(node_id)

    # An earlier callback in the same round may have unregistered the node
    def _focus(self, node_id: str, details: dict[str, Any]) -> None:
        node = self.tree.get(node_id)
        if node is not None:
            node.callbacks.on_focus(self.layouts.get(node), details)

    def _blur(self, node_id: str, details: dict[str, Any]) -> None:
        node = self.tree.get(node_id)
        if node is not None:
            node.callbacks.on_blur(self.layouts.get(node), details)
