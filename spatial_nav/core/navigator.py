"""
SpatialNavigator - the navigation engine.

One navigator owns one focus tree. It is an ordinary object: construct one
per UI (or per test), there is no process-wide instance.

The navigator handles:
- Lifecycle (initialize/shutdown, pause/resume)
- Node registration from the UI binding layer
- Programmatic and key-driven focus changes
- Layout invalidation per navigation round
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Any, Callable, Iterator, Optional

from spatial_nav.core.actions import Action, to_direction
from spatial_nav.core.config import NavigationConfig, ThrottleConfig
from spatial_nav.core.events import EventBus, NavigationEvent
from spatial_nav.input.dispatcher import InputDispatcher
from spatial_nav.ui.directional import DirectionalResolver
from spatial_nav.ui.focus import FocusController
from spatial_nav.ui.layout import LayoutCache, LayoutProvider
from spatial_nav.ui.leaf import LeafResolver
from spatial_nav.ui.node import Box, FocusNode, NodeDescriptor, NodeUpdate
from spatial_nav.ui.tree import FocusTree


class SpatialNavigator:
    """
    Main spatial navigation engine.

    Usage:
        navigator = SpatialNavigator(RectLayoutProvider())
        navigator.initialize(NavigationConfig(throttle_ms=100))

        navigator.register(NodeDescriptor(node_id="menu"))
        navigator.register(NodeDescriptor(node_id="play", parent_id="menu", handle=rect))

        navigator.set_focus("menu")
        navigator.on_key_down(pygame.K_RIGHT)
    """

    def __init__(
        self,
        layout_provider: Optional[LayoutProvider] = None,
        event_bus: Optional[EventBus] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.event_bus = event_bus
        self.config = NavigationConfig()

        # Core parts
        self.tree = FocusTree()
        self.layouts = LayoutCache(self.tree, layout_provider)
        self.resolver = DirectionalResolver(self.tree, self.layouts)
        self.leaf_resolver = LeafResolver(self.tree, self.layouts, trace=self.trace)
        self.focus_controller = FocusController(self.tree, self.layouts, self.leaf_resolver)
        self.focus_controller.on_focus_changed = self._on_focus_changed
        self.input = InputDispatcher(self, clock=clock)

        # Trace round counter, bumped on every key-down
        self._log_index = 0

        # Nesting depth of layout_round(); boxes are invalidated at depth 0
        self._round_depth = 0

    # Lifecycle

    @property
    def enabled(self) -> bool:
        return self.focus_controller.enabled

    @property
    def paused(self) -> bool:
        return self.input.paused

    def initialize(self, config: Optional[NavigationConfig] = None, **options: Any) -> None:
        """
        Enable the navigator.

        Args:
            config: Full configuration, or None for defaults
            **options: NavigationConfig fields, used when config is None

        Raises:
            TypeError: If both config and options are given
            pydantic.ValidationError: If the configuration is invalid
        """
        if config is not None and options:
            raise TypeError(f"initialize() takes a config or keyword options, not both: {sorted(options)}")

        if self.enabled:
            return

        self.config = config if config is not None else NavigationConfig(**options)
        self.input.configure_throttle(self.config.throttle)
        self.focus_controller.enabled = True

        if self.config.visual_debug:
            self.logger.info("Visual debug enabled; layouts available via layout_snapshot()")

        self.trace("initialize", "config", self.config)

    def shutdown(self) -> None:
        """Disable the navigator and drop every node and setting."""
        if not self.enabled:
            return

        self.focus_controller.enabled = False
        self.focus_controller.reset()
        self.input.reset()
        self.tree.clear()
        self.config = NavigationConfig()

    def pause(self) -> None:
        """Ignore key input until resume(); set_focus() keeps working."""
        self.input.paused = True
        self.publish(NavigationEvent.PAUSED)

    def resume(self) -> None:
        self.input.paused = False
        self.publish(NavigationEvent.RESUMED)

    # Node lifecycle

    def register(self, descriptor: Optional[NodeDescriptor] = None, **fields: Any) -> FocusNode:
        """
        Register a node (UI binding "mount").

        Re-registering an id replaces the node. If the id is the current
        focus, the new node is told it is focused.
        """
        if descriptor is None:
            descriptor = NodeDescriptor(**fields)

        node = self.tree.add(descriptor.to_node())
        self.publish(NavigationEvent.NODE_REGISTERED, node_id=node.node_id)

        if node.node_id == self.get_current_focus_id():
            with self.layout_round():
                self.focus_controller.sync()

        return node

    def update(self, node_id: str, changes: Optional[NodeUpdate] = None, **fields: Any) -> Optional[FocusNode]:
        """
        Merge supplied fields into a registered node.

        Unknown ids are ignored.
        """
        if changes is None:
            changes = NodeUpdate(**fields)

        merged = changes.changes()
        parent_id = merged.get("parent_id")
        if parent_id is not None and node_id in self.tree and self.tree.creates_cycle(node_id, parent_id):
            self.trace("update", "parent would create a cycle", node_id, parent_id)
            del merged["parent_id"]

        node = self.tree.update(node_id, merged)
        if node is None:
            self.trace("update", "unknown node", node_id)
            return None

        if "handle" in changes.model_fields_set:
            self.layouts.invalidate(node)
        return node

    def unregister(self, node_id: str) -> None:
        """
        Remove a node (UI binding "unmount").

        If it held focus and its parent has auto_restore_focus, the parent
        is focused instead.
        """
        node = self.tree.remove(node_id)
        if node is None:
            self.trace("unregister", "unknown node", node_id)
            return

        self.focus_controller.forget(node_id)
        self.publish(NavigationEvent.NODE_UNREGISTERED, node_id=node_id)

        parent = self.tree.get(node.parent_id)
        if node_id == self.get_current_focus_id() and parent is not None and parent.auto_restore_focus:
            self.set_focus(parent.node_id)

    def get_node(self, node_id: str) -> Optional[FocusNode]:
        return self.tree.get(node_id)

    def nodes(self) -> Iterator[FocusNode]:
        return iter(self.tree)

    # Focus

    def get_current_focus_id(self) -> Optional[str]:
        """Id of the focused node, or None."""
        return self.focus_controller.focus_id

    def set_focus(self, node_id: Optional[str], details: Optional[dict[str, Any]] = None) -> bool:
        """
        Focus a node or group (groups resolve to a leaf).

        Unknown ids leave focus unchanged. No-op while disabled.

        Returns:
            True if focus changed
        """
        self.trace("set_focus", "target", node_id)
        with self.layout_round():
            return self.focus_controller.focus(node_id, details)

    def navigate(self, direction: Action | str, details: Optional[dict[str, Any]] = None) -> None:
        """
        Move focus from the current node through its navigate hook.

        This is what an arrow key does after the arrow-press intercept.
        """
        direction = to_direction(direction)
        node = self.focus_controller.focused_node
        if direction is None or node is None:
            return

        with self.layout_round():
            node.callbacks.on_navigate(self, node.node_id, direction, details if details is not None else {})

    def smart_navigate(
        self,
        direction: Action | str,
        from_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> bool:
        """
        Built-in spatial navigation from a node (default: current focus).

        Returns:
            True if focus changed
        """
        if from_id is None:
            from_id = self.get_current_focus_id()

        with self.layout_round():
            target_id = self.resolver.resolve(direction, from_id)
            if target_id is None:
                self.trace("smart_navigate", "no move", direction, from_id)
                return False

            return self.set_focus(target_id, details)

    def on_pointer_enter(self, node_id: str) -> bool:
        """
        Hover support: focus a focusable leaf the pointer entered.

        Returns:
            True if focus changed
        """
        node = self.tree.get(node_id)
        if node is None or not node.pointer_support:
            return False
        if not node.focusable or self.tree.has_children(node_id):
            return False
        return self.set_focus(node_id)

    # Input

    def on_key_down(self, key_code: int, event: Any = None) -> bool:
        return self.input.on_key_down(key_code, event)

    def on_key_up(self, key_code: int, event: Any = None) -> None:
        self.input.on_key_up(key_code, event)

    def set_key_map(self, key_map: dict[Action | str, Any]) -> None:
        """Merge key codes into the key map."""
        self.input.set_key_map(key_map)

    def get_key_map(self) -> dict[str, list[int]]:
        return self.input.key_map

    def set_throttle(self, config: Optional[ThrottleConfig] = None, **options: Any) -> None:
        """
        Reconfigure key-down throttling.

        Raises:
            pydantic.ValidationError: If the configuration is invalid
        """
        if config is None:
            config = ThrottleConfig(**options)
        self.config.throttle_ms = config.throttle_ms
        self.config.throttle_keypresses = config.throttle_keypresses
        self.input.configure_throttle(config)

    # Layout

    @contextmanager
    def layout_round(self, key_down: bool = False) -> Iterator[None]:
        """
        Scope one navigation round.

        Opening the outermost round invalidates every box, so geometry is
        re-measured on demand and at most once per node inside the round.
        Nested rounds (focus calls from callbacks) reuse the open one.

        Args:
            key_down: Round started by a key press; bumps the trace index
        """
        if key_down:
            self._log_index += 1
        if self._round_depth == 0:
            self.layouts.invalidate_all()

        self._round_depth += 1
        try:
            yield
        finally:
            self._round_depth -= 1

    def recompute_all_layouts(self) -> None:
        """Re-measure every node now."""
        self.layouts.recompute_all()

    def layout_snapshot(self) -> list[tuple[str, str, Box]]:
        """(node_id, parent_id, box) for every node, for debug overlays."""
        return [(node.node_id, node.parent_id, node.box.copy()) for node in self.tree]

    # Notifications

    def publish(self, event_type: Enum, **data: Any) -> None:
        if self.event_bus is not None:
            self.event_bus.publish(event_type, **data)

    def trace(self, function_name: str, message: str, *values: Any) -> None:
        """DEBUG trace line, only when debug_logging is on."""
        if not self.config.debug_logging:
            return
        suffix = " ".join(repr(value) for value in values)
        self.logger.debug(f"[{self._log_index}] {function_name}: {message} {suffix}".rstrip())

    def _on_focus_changed(self, old_focus_id: Optional[str], new_focus_id: Optional[str], details: dict[str, Any]) -> None:
        self.trace("set_focus", "focus changed", old_focus_id, new_focus_id)
        self.publish(
            NavigationEvent.FOCUS_CHANGED,
            old_focus_id=old_focus_id,
            new_focus_id=new_focus_id,
            details=details,
        )
