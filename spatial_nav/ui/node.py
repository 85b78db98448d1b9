"""
Focus node data model.

A FocusNode is one focusable or grouping region. The FocusTree owns every
node; parent links are plain ids, never object references, so the tree has
no reference cycles.

Per-node behaviour is supplied through a FocusCallbacks object. Every hook
has a no-op default, so the engine never checks for missing callbacks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from spatial_nav.core.actions import ROOT_FOCUS_ID

if TYPE_CHECKING:
    from spatial_nav.core.actions import Action
    from spatial_nav.core.navigator import SpatialNavigator


@dataclass
class Box:
    """On-screen bounding rectangle."""
    left: float = 0
    top: float = 0
    width: float = 0
    height: float = 0

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def copy(self) -> 'Box':
        """Create a copy of this box."""
        return Box(self.left, self.top, self.width, self.height)

    @classmethod
    def coerce(cls, value: Any) -> 'Box':
        """
        Build a Box from whatever a layout provider returned.

        Accepts a Box, a (left, top, width, height) sequence, a mapping with
        those keys, or any object exposing them as attributes (pygame.Rect).
        """
        if isinstance(value, Box):
            return value.copy()
        if isinstance(value, dict):
            return cls(value["left"], value["top"], value["width"], value["height"])
        if isinstance(value, (tuple, list)):
            left, top, width, height = value
            return cls(left, top, width, height)
        return cls(value.left, value.top, value.width, value.height)


@dataclass
class KeyPressDetails:
    """Held-key counters passed to enter/arrow callbacks."""
    pressed_keys: dict[str, int] = field(default_factory=dict)


class FocusCallbacks:
    """
    Capability interface between a node and the UI binding layer.

    Subclass and override the hooks you need. Defaults do nothing, except
    on_navigate which runs the built-in spatial navigation.
    """

    def on_focus(self, box: Box, details: dict[str, Any]) -> None:
        """Node (or one of its descendants) gained focus."""

    def on_blur(self, box: Box, details: dict[str, Any]) -> None:
        """Node (or one of its descendants) lost focus."""

    def on_update_focus(self, focused: bool) -> None:
        """Focused state of this exact node changed."""

    def on_update_has_focused_child(self, has_focused_child: bool) -> None:
        """Only called on nodes with track_children set."""

    def on_enter_press(self, details: KeyPressDetails) -> None:
        pass

    def on_enter_release(self) -> None:
        pass

    def on_arrow_press(self, direction: 'Action', details: KeyPressDetails) -> Optional[bool]:
        """
        Intercept an arrow key before default navigation.

        Returns:
            False to suppress default navigation for this event
        """
        return True

    def on_navigate(
        self,
        navigator: 'SpatialNavigator',
        focus_id: str,
        direction: 'Action',
        details: dict[str, Any],
    ) -> None:
        """Move focus from focus_id. Override to replace spatial navigation."""
        navigator.smart_navigate(direction, focus_id, details)


NO_CALLBACKS = FocusCallbacks()


@dataclass
class FocusNode:
    """
    One registered region.

    Attributes:
        node_id: Unique, stable id
        parent_id: Id of the parent node, or ROOT_FOCUS_ID
        handle: Opaque host object, only passed to the layout provider
        box: Last measured bounding box
        layout_valid: False until box is measured in the current round
    """
    node_id: str
    parent_id: str = ROOT_FOCUS_ID
    handle: Any = None
    callbacks: FocusCallbacks = NO_CALLBACKS
    focusable: bool = True
    is_focus_boundary: bool = False
    track_children: bool = False
    auto_restore_focus: bool = True
    save_last_focused_child: bool = True
    pointer_support: bool = True
    preferred_child_id: Optional[str] = None
    last_focused_child_id: Optional[str] = None
    box: Box = field(default_factory=Box)
    layout_valid: bool = False


class _NodeModel(BaseModel):
    model_config = ConfigDict(
        # Callbacks and handles are host objects
        arbitrary_types_allowed=True,
        extra='forbid',
    )


class NodeDescriptor(_NodeModel):
    """
    Registration payload.

    `box` seeds the cached layout for nodes whose handle the layout
    provider cannot measure (or that have no handle at all).
    """
    node_id: str
    parent_id: str = ROOT_FOCUS_ID
    handle: Any = None
    callbacks: FocusCallbacks = Field(default_factory=FocusCallbacks)
    focusable: bool = True
    is_focus_boundary: bool = False
    track_children: bool = False
    auto_restore_focus: bool = True
    save_last_focused_child: bool = True
    pointer_support: bool = True
    preferred_child_id: Optional[str] = None
    box: Optional[Box] = None

    def to_node(self) -> FocusNode:
        """Create a fresh FocusNode from this descriptor."""
        return FocusNode(
            node_id=self.node_id,
            parent_id=self.parent_id,
            handle=self.handle,
            callbacks=self.callbacks,
            focusable=self.focusable,
            is_focus_boundary=self.is_focus_boundary,
            track_children=self.track_children,
            auto_restore_focus=self.auto_restore_focus,
            save_last_focused_child=self.save_last_focused_child,
            pointer_support=self.pointer_support,
            preferred_child_id=self.preferred_child_id,
            box=self.box.copy() if self.box else Box(),
        )


class NodeUpdate(_NodeModel):
    """
    Partial update payload.

    Only fields that were explicitly set are applied. Passing
    preferred_child_id=None clears it; omitting it leaves it untouched.
    """
    parent_id: Optional[str] = None
    handle: Any = None
    callbacks: Optional[FocusCallbacks] = None
    focusable: Optional[bool] = None
    is_focus_boundary: Optional[bool] = None
    track_children: Optional[bool] = None
    auto_restore_focus: Optional[bool] = None
    save_last_focused_child: Optional[bool] = None
    pointer_support: Optional[bool] = None
    preferred_child_id: Optional[str] = None
    box: Optional[Box] = None

    def changes(self) -> dict[str, Any]:
        """Explicitly supplied fields, ready to merge into a node."""
        changes = {name: getattr(self, name) for name in self.model_fields_set}

        # None is only meaningful for the optional id reference
        return {
            name: value for name, value in changes.items()
            if value is not None or name == "preferred_child_id"
        }
