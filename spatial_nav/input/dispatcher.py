"""
Input dispatcher with action-based key decoding.

Decodes raw key codes into logical actions, tracks held keys, and drives
navigation: arrows move focus, enter activates the focused node.

Usage:
    # Host event loop
    for event in pygame.event.get():
        navigator.input.process_event(event)

    # Or any other input source
    navigator.on_key_down(key_code)
    navigator.on_key_up(key_code)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Callable, Optional

import pygame

from spatial_nav.core.actions import (
    DEFAULT_KEY_MAP,
    Action,
    action_name,
    normalize_key_map,
    to_direction,
)
from spatial_nav.core.config import ThrottleConfig
from spatial_nav.core.events import NavigationEvent
from spatial_nav.input.throttle import Throttle
from spatial_nav.ui.node import KeyPressDetails

if TYPE_CHECKING:
    from spatial_nav.core.navigator import SpatialNavigator


def _copy_key_map(key_map: Mapping[str, list[int]]) -> dict[str, list[int]]:
    return {action: list(codes) for action, codes in key_map.items()}


class InputDispatcher:
    """
    Turns key events into navigation.

    Key-downs are ignored while paused. Key-ups always clear held-key
    counters and the throttle window.
    """

    def __init__(
        self,
        navigator: 'SpatialNavigator',
        clock: Optional[Callable[[], float]] = None,
    ):
        self.navigator = navigator
        self._clock = clock

        # Action name -> key codes
        self._key_map = _copy_key_map(DEFAULT_KEY_MAP)
        self._reverse_key_map: dict[int, str] = {}
        self._rebuild_reverse_key_map()

        # Held-key counters by action name
        self.pressed_keys: dict[str, int] = {}
        self.paused = False

        self.throttle_keypresses = False
        self._throttle: Optional[Throttle] = None

    def _rebuild_reverse_key_map(self) -> None:
        """Build reverse lookup: key -> action (first mapped action wins)."""
        self._reverse_key_map.clear()
        for action, codes in self._key_map.items():
            for code in codes:
                self._reverse_key_map.setdefault(code, action)

    # Key map

    @property
    def key_map(self) -> dict[str, list[int]]:
        """Copy of the active key map."""
        return _copy_key_map(self._key_map)

    def set_key_map(self, key_map: Mapping[Action | str, Any]) -> None:
        """
        Merge entries into the key map.

        Supplied actions replace their previous codes; other actions keep
        theirs. Malformed entries are skipped.
        """
        self._key_map = {**self._key_map, **normalize_key_map(key_map)}
        self._rebuild_reverse_key_map()

    def reset_key_map(self) -> None:
        self._key_map = _copy_key_map(DEFAULT_KEY_MAP)
        self._rebuild_reverse_key_map()

    def get_action(self, key_code: int) -> Optional[str]:
        """Action name mapped to a key code, or None."""
        return self._reverse_key_map.get(key_code)

    # Throttling

    @property
    def throttle_ms(self) -> int:
        return int(self._throttle.interval_ms) if self._throttle else 0

    def configure_throttle(self, config: ThrottleConfig) -> None:
        """Replace the throttle; any open window is discarded."""
        self.cancel_throttle()
        self.throttle_keypresses = config.throttle_keypresses
        self._throttle = (
            Throttle(self._handle_key_down, config.throttle_ms, self._clock)
            if config.throttle_ms > 0 else None
        )

    def cancel_throttle(self) -> None:
        if self._throttle is not None:
            self._throttle.cancel()

    def reset(self) -> None:
        """Back to defaults: no throttle, default keys, nothing held."""
        self.configure_throttle(ThrottleConfig())
        self.reset_key_map()
        self.pressed_keys.clear()
        self.paused = False

    # Events

    def process_event(self, event: pygame.event.Event) -> None:
        """Process a pygame event; non-key events are ignored."""
        if event.type == pygame.KEYDOWN:
            self.on_key_down(event.key, event)

        elif event.type == pygame.KEYUP:
            self.on_key_up(event.key, event)

    def on_key_down(self, key_code: int, event: Any = None) -> bool:
        """
        Handle key press.

        Returns:
            True if the key was decoded and dispatched
        """
        if self.paused:
            return False

        if self._throttle is not None:
            handled = self._throttle(key_code, event)
            if handled is None:
                self.navigator.trace("key_down", "throttled", key_code)
                return False
            return handled

        return self._handle_key_down(key_code, event)

    def on_key_up(self, key_code: int, event: Any = None) -> None:
        """Handle key release."""
        action = self.get_action(key_code)
        if action is not None:
            self.pressed_keys.pop(action, None)

        if not self.throttle_keypresses:
            self.cancel_throttle()

        if self.paused:
            return

        if action == Action.ENTER.value and self.navigator.get_current_focus_id() is not None:
            self._enter_release()

    def _handle_key_down(self, key_code: int, event: Any) -> bool:
        with self.navigator.layout_round(key_down=True):
            return self._dispatch_key_down(key_code, event)

    def _dispatch_key_down(self, key_code: int, event: Any) -> bool:
        navigator = self.navigator

        action = self.get_action(key_code)
        if action is None:
            navigator.trace("key_down", "unmapped key", key_code)
            return False

        self.pressed_keys[action] = self.pressed_keys.get(action, 0) + 1
        key_details = KeyPressDetails(pressed_keys=dict(self.pressed_keys))

        if action == Action.ENTER.value and navigator.get_current_focus_id() is not None:
            self._enter_press(key_details)
            return True

        direction = to_direction(action)
        if direction is None:
            return True

        node = navigator.focus_controller.focused_node
        if node is None:
            navigator.trace("key_down", "no focused node", action_name(direction))
            return True

        if node.callbacks.on_arrow_press(direction, key_details) is False:
            navigator.trace("key_down", "default navigation prevented")
            navigator.publish(
                NavigationEvent.NAVIGATION_PREVENTED,
                node_id=node.node_id,
                direction=direction,
            )
            return True

        navigator.navigate(direction, {"event": event})
        return True

    def _enter_press(self, key_details: KeyPressDetails) -> None:
        node = self.navigator.focus_controller.focused_node

        # Focused node may have been unregistered (e.g. UI fading out)
        if node is None:
            self.navigator.trace("enter_press", "no node")
            return

        if not node.focusable:
            self.navigator.trace("enter_press", "node not focusable")
            return

        node.callbacks.on_enter_press(key_details)

    def _enter_release(self) -> None:
        node = self.navigator.focus_controller.focused_node

        if node is None:
            self.navigator.trace("enter_release", "no node")
            return

        if not node.focusable:
            self.navigator.trace("enter_release", "node not focusable")
            return

        node.callbacks.on_enter_release()
