"""
FocusTree - authoritative store of focus nodes.

Nodes live in an id-keyed arena; a parent -> children index keeps child
lookup proportional to the number of children rather than the tree size.
Unknown ids are silent no-ops everywhere.
"""

from __future__ import annotations

from typing import Any, Iterator, Optional

from spatial_nav.ui.node import Box, FocusNode


class FocusTree:
    """
    Owns every FocusNode.

    Children are always returned in registration order. Registration order
    is free: a child may be added before its parent exists.
    """

    def __init__(self):
        self._nodes: dict[str, FocusNode] = {}

        # parent id -> child ids (dict used as an ordered set)
        self._children: dict[str, dict[str, None]] = {}

        # id -> registration sequence, kept when a node is overwritten
        self._sequence: dict[str, int] = {}
        self._next_sequence = 0

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[FocusNode]:
        return iter(list(self._nodes.values()))

    def get(self, node_id: Optional[str]) -> Optional[FocusNode]:
        """Get a node by id, or None."""
        if node_id is None:
            return None
        return self._nodes.get(node_id)

    def is_participating(self, node_id: Optional[str]) -> bool:
        """True if the node exists and is focusable."""
        node = self.get(node_id)
        return node is not None and node.focusable

    # Mutation

    def add(self, node: FocusNode) -> FocusNode:
        """Insert a node, or overwrite the node with the same id."""
        existing = self._nodes.get(node.node_id)
        if existing is not None:
            self._unlink(existing.node_id, existing.parent_id)
        else:
            self._sequence[node.node_id] = self._next_sequence
            self._next_sequence += 1

        self._nodes[node.node_id] = node
        self._link(node.node_id, node.parent_id)
        return node

    def update(self, node_id: str, changes: dict[str, Any]) -> Optional[FocusNode]:
        """
        Merge supplied fields into a node.

        Fields not present in `changes` are preserved. A parent_id that
        would make the node its own ancestor is ignored.

        Returns:
            The updated node, or None if the id is unknown
        """
        node = self._nodes.get(node_id)
        if node is None:
            return None

        for name, value in changes.items():
            if name == "parent_id" and value != node.parent_id:
                if self.creates_cycle(node_id, value):
                    continue
                self._unlink(node_id, node.parent_id)
                node.parent_id = value
                self._link(node_id, value)
            elif name == "box":
                node.box = Box.coerce(value)
            else:
                setattr(node, name, value)

        return node

    def remove(self, node_id: str) -> Optional[FocusNode]:
        """
        Remove a node.

        Its children are re-parented to its former parent so the tree stays
        connected, and every last_focused_child_id pointing at it is cleared.

        Returns:
            The removed node, or None if the id is unknown
        """
        node = self._nodes.pop(node_id, None)
        if node is None:
            return None

        self._unlink(node_id, node.parent_id)
        self._sequence.pop(node_id, None)

        for child_id in list(self._children.pop(node_id, {})):
            child = self._nodes.get(child_id)
            if child is None:
                continue
            child.parent_id = node.parent_id
            self._link(child_id, node.parent_id)

        for other in self._nodes.values():
            if other.last_focused_child_id == node_id:
                other.last_focused_child_id = None

        return node

    def clear(self) -> None:
        """Remove every node."""
        self._nodes.clear()
        self._children.clear()
        self._sequence.clear()

    # Queries

    def children(self, node_id: str) -> list[FocusNode]:
        """All nodes whose parent_id is node_id, in registration order."""
        child_ids = self._children.get(node_id)
        if not child_ids:
            return []
        return [self._nodes[child_id] for child_id in child_ids if child_id in self._nodes]

    def focusable_children(self, node_id: str) -> list[FocusNode]:
        """Children that may receive focus themselves."""
        return [child for child in self.children(node_id) if child.focusable]

    def has_children(self, node_id: str) -> bool:
        return bool(self._children.get(node_id))

    def creates_cycle(self, node_id: str, parent_id: str) -> bool:
        """True if making parent_id the parent of node_id would close a loop."""
        return parent_id == node_id or node_id in self.ancestors(parent_id)

    def ancestors(self, node_id: Optional[str]) -> list[str]:
        """
        Ids of the live ancestors of a node, nearest first.

        Stops at the first parent id that is not registered.
        """
        result: list[str] = []
        node = self.get(node_id)
        seen = {node_id}

        while node is not None:
            parent = self._nodes.get(node.parent_id)
            if parent is None or parent.node_id in seen:
                break
            result.append(parent.node_id)
            seen.add(parent.node_id)
            node = parent

        return result

    # Internal

    def _link(self, node_id: str, parent_id: str) -> None:
        siblings = self._children.setdefault(parent_id, {})
        last_id = next(reversed(siblings), None)
        siblings[node_id] = None

        # Keep siblings in registration order after re-parenting
        if last_id is not None and self._sequence.get(last_id, 0) > self._sequence.get(node_id, 0):
            ordered = sorted(siblings, key=lambda key: self._sequence.get(key, 0))
            self._children[parent_id] = dict.fromkeys(ordered)

    def _unlink(self, node_id: str, parent_id: str) -> None:
        siblings = self._children.get(parent_id)
        if siblings is None:
            return
        siblings.pop(node_id, None)
        if not siblings:
            del self._children[parent_id]
