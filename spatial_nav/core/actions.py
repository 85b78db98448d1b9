"""
Logical input actions for spatial navigation.

Raw key codes are decoded into logical actions through a key map.
Navigation logic only deals with actions, never with raw keys. This enables:
- Remote-control and keyboard layouts side by side
- Runtime rebinding without touching navigation code

Usage:
    key_map = {**DEFAULT_KEY_MAP, **normalize_key_map({"left": [pygame.K_a]})}
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

import pygame

logger = logging.getLogger(__name__)


class Action(str, Enum):
    """
    Logical actions understood by the navigator.

    Values double as the key-map names, so plain strings such as "left"
    can be used anywhere an Action is accepted.
    """

    LEFT = "left"
    UP = "up"
    RIGHT = "right"
    DOWN = "down"
    ENTER = "enter"

    @property
    def is_direction(self) -> bool:
        """True for the four arrow actions."""
        return self in DIRECTIONS

    @property
    def is_vertical(self) -> bool:
        """True for up/down."""
        return self in (Action.UP, Action.DOWN)


DIRECTIONS = frozenset({Action.LEFT, Action.UP, Action.RIGHT, Action.DOWN})

# Parent id used by nodes registered at the top of the tree
ROOT_FOCUS_ID = "SN:ROOT"

# Default key map (can be merged with set_key_map)
DEFAULT_KEY_MAP: dict[str, list[int]] = {
    Action.LEFT.value: [pygame.K_LEFT],
    Action.UP.value: [pygame.K_UP],
    Action.RIGHT.value: [pygame.K_RIGHT],
    Action.DOWN.value: [pygame.K_DOWN],
    Action.ENTER.value: [pygame.K_RETURN],
}


def action_name(action: Action | str) -> str:
    """Key-map name of an action (enum members and strings alike)."""
    if isinstance(action, Action):
        return action.value
    return str(action)


def to_direction(value: Action | str | None) -> Action | None:
    """Coerce a value into a direction Action, or None if it is not one."""
    if value is None:
        return None
    try:
        action = Action(value)
    except ValueError:
        return None
    return action if action.is_direction else None


def _normalize_codes(codes: Any) -> list[int]:
    if isinstance(codes, bool):
        return []
    if isinstance(codes, int):
        return [codes]
    if isinstance(codes, (str, bytes)) or not isinstance(codes, Iterable):
        return []
    return [code for code in codes if isinstance(code, int) and not isinstance(code, bool)]


def normalize_key_map(key_map: Mapping[Action | str, Any]) -> dict[str, list[int]]:
    """
    Normalize a user-supplied key map.

    Accepts a single key code or a list of key codes per action.
    Entries that normalize to nothing are skipped; the rest still apply.

    Args:
        key_map: Mapping of action -> key code(s)

    Returns:
        Mapping of action name -> list of key codes
    """
    normalized: dict[str, list[int]] = {}

    for action, codes in key_map.items():
        name = action_name(action)
        normalized_codes = _normalize_codes(codes)

        if not normalized_codes:
            logger.warning(f"Skipping malformed key map entry {name!r}: {codes!r}")
            continue

        normalized[name] = normalized_codes

    return normalized
