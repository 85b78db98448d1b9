"""
Navigator configuration models.

Configuration is validated with Pydantic so a bad throttle value is
rejected at the call site instead of surfacing mid-navigation.

Usage:
    navigator.initialize(NavigationConfig(debug_logging=True, throttle_ms=150))
    navigator.set_throttle(ThrottleConfig(throttle_ms=0))
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _ConfigModel(BaseModel):
    model_config = ConfigDict(
        validate_assignment=True,
        extra='forbid',
    )


class ThrottleConfig(_ConfigModel):
    """
    Key-down throttling.

    Attributes:
        throttle_ms: Minimum interval between dispatched key-downs (0 = off)
        throttle_keypresses: If True, key-up does not reset the window, so
            separate keypresses are throttled as well as held-key repeats
    """
    throttle_ms: int = Field(default=0, ge=0)
    throttle_keypresses: bool = False


class NavigationConfig(ThrottleConfig):
    """
    Options accepted by SpatialNavigator.initialize().

    Attributes:
        debug_logging: Emit DEBUG trace messages for every navigation round
        visual_debug: Keep layout snapshots available for an external overlay
    """
    debug_logging: bool = False
    visual_debug: bool = False

    @property
    def throttle(self) -> ThrottleConfig:
        """Throttle part of this configuration."""
        return ThrottleConfig(
            throttle_ms=self.throttle_ms,
            throttle_keypresses=self.throttle_keypresses,
        )
