"""
Directional navigation between sibling nodes.

Given a direction and the focused node, picks the best focusable sibling
that lies strictly past the node's facing edge. When none exists the
search climbs to the parent and retries with the same direction, until a
focus boundary or the top of the tree is reached.

Ranking:
    Each candidate gets two reference corners on the edge that faces the
    origin; the origin uses its own facing edge. Candidates overlapping the
    origin by at least 20% of its cross-axis extent are "adjacent slices"
    and rank by distance along the move axis first. Everything else is
    "diagonal" and ranks by cross-axis distance first, with a 5x penalty.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from spatial_nav.core.actions import Action, to_direction

if TYPE_CHECKING:
    from spatial_nav.ui.layout import LayoutCache
    from spatial_nav.ui.node import Box, FocusNode
    from spatial_nav.ui.tree import FocusTree

ADJACENT_SLICE_THRESHOLD = 0.2

# Adjacent slice is 5 times more important than diagonal
ADJACENT_SLICE_WEIGHT = 5
DIAGONAL_SLICE_WEIGHT = 1

# Distance along the main coordinate is 5 times more important
MAIN_COORDINATE_WEIGHT = 5


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def coordinate(self, vertical: bool) -> float:
        return self.y if vertical else self.x


@dataclass(frozen=True)
class Corners:
    """Reference corners: `a` is always top/left of `b`."""
    a: Point
    b: Point


def get_ref_corners(direction: Action, is_sibling: bool, box: 'Box') -> Corners:
    """
    Corners on the edge used for comparison.

    The origin uses the edge it moves out of; a sibling uses the edge that
    faces back towards the origin.
    """
    if direction == Action.UP:
        y = box.bottom if is_sibling else box.top
        return Corners(Point(box.left, y), Point(box.right, y))

    if direction == Action.DOWN:
        y = box.top if is_sibling else box.bottom
        return Corners(Point(box.left, y), Point(box.right, y))

    if direction == Action.LEFT:
        x = box.right if is_sibling else box.left
        return Corners(Point(x, box.top), Point(x, box.bottom))

    x = box.left if is_sibling else box.right
    return Corners(Point(x, box.top), Point(x, box.bottom))


def is_adjacent_slice(ref: Corners, sibling: Corners, vertical: bool) -> bool:
    """True if the sibling overlaps the ref edge enough on the cross axis."""
    cross = not vertical
    ref_a = ref.a.coordinate(cross)
    ref_b = ref.b.coordinate(cross)
    sibling_a = sibling.a.coordinate(cross)
    sibling_b = sibling.b.coordinate(cross)

    threshold = (ref_b - ref_a) * ADJACENT_SLICE_THRESHOLD
    intersection = max(0, min(ref_b, sibling_b) - max(ref_a, sibling_a))

    return intersection >= threshold


def primary_axis_distance(ref: Corners, sibling: Corners, vertical: bool) -> float:
    """Distance along the move axis."""
    return abs(sibling.a.coordinate(vertical) - ref.a.coordinate(vertical))


def secondary_axis_distance(ref: Corners, sibling: Corners, vertical: bool) -> float:
    """Smallest corner-to-corner distance along the cross axis."""
    cross = not vertical
    ref_a = ref.a.coordinate(cross)
    ref_b = ref.b.coordinate(cross)
    sibling_a = sibling.a.coordinate(cross)
    sibling_b = sibling.b.coordinate(cross)

    return min(
        abs(sibling_a - ref_a),
        abs(sibling_a - ref_b),
        abs(sibling_b - ref_a),
        abs(sibling_b - ref_b),
    )


def priority(direction: Action, origin: 'Box', candidate: 'Box') -> float:
    """Ranking score of a candidate; lower is better."""
    vertical = direction.is_vertical
    ref_corners = get_ref_corners(direction, False, origin)
    sibling_corners = get_ref_corners(direction, True, candidate)

    adjacent = is_adjacent_slice(ref_corners, sibling_corners, vertical)

    axis = primary_axis_distance(ref_corners, sibling_corners, vertical)
    cross = secondary_axis_distance(ref_corners, sibling_corners, vertical)
    primary, secondary = (axis, cross) if adjacent else (cross, axis)

    total_distance_points = primary * MAIN_COORDINATE_WEIGHT + secondary

    # + 1 keeps the adjacency weight effective at zero distance
    weight = ADJACENT_SLICE_WEIGHT if adjacent else DIAGONAL_SLICE_WEIGHT
    return (total_distance_points + 1) / weight


def is_in_direction(direction: Action, origin: 'Box', candidate: 'Box') -> bool:
    """Strict facing-edge check; touching edges count, overlap does not."""
    if direction == Action.LEFT:
        return origin.left >= candidate.right
    if direction == Action.RIGHT:
        return origin.right <= candidate.left
    if direction == Action.DOWN:
        return candidate.top >= origin.bottom
    if direction == Action.UP:
        return origin.top >= candidate.bottom
    return False


class DirectionalResolver:
    """
    Finds the next node to focus for an arrow move.

    Usage:
        next_id = resolver.resolve(Action.RIGHT, current_focus_id)
        if next_id:
            controller.focus(next_id)
    """

    def __init__(self, tree: 'FocusTree', layouts: 'LayoutCache'):
        self.tree = tree
        self.layouts = layouts

    def candidates(self, direction: Action, origin: 'FocusNode') -> list['FocusNode']:
        """Focusable siblings lying strictly past the origin's facing edge."""
        origin_box = self.layouts.get(origin)
        return [
            sibling for sibling in self.tree.children(origin.parent_id)
            if sibling.focusable
            and sibling.node_id != origin.node_id
            and is_in_direction(direction, origin_box, self.layouts.get(sibling))
        ]

    def rank(self, direction: Action, origin: 'FocusNode', candidates: list['FocusNode']) -> list['FocusNode']:
        """Sort candidates by priority, keeping registration order on ties."""
        origin_box = self.layouts.get(origin)
        return sorted(
            candidates,
            key=lambda sibling: priority(direction, origin_box, self.layouts.get(sibling)),
        )

    def find_sibling(self, direction: Action, origin: 'FocusNode') -> Optional['FocusNode']:
        """Best sibling in one round, without climbing."""
        ranked = self.rank(direction, origin, self.candidates(direction, origin))
        return ranked[0] if ranked else None

    def resolve(self, direction: Action | str, origin_id: Optional[str]) -> Optional[str]:
        """
        Id of the node to focus, climbing to ancestors when needed.

        Climbing records the node it leaves as the parent's last focused
        child, so returning to the parent later lands on the same branch.

        Returns:
            Node id to focus, or None for no move
        """
        direction = to_direction(direction)
        if direction is None:
            return None

        origin = self.tree.get(origin_id)
        visited = set()

        while origin is not None and not origin.is_focus_boundary:
            if origin.node_id in visited:
                return None
            visited.add(origin.node_id)

            sibling = self.find_sibling(direction, origin)
            if sibling is not None:
                return sibling.node_id

            parent = self.tree.get(origin.parent_id)
            if parent is None or parent.is_focus_boundary:
                return None

            parent.last_focused_child_id = origin.node_id
            origin = parent

        return None
