import logging

import pygame

from spatial_nav.core.actions import Action
from spatial_nav.core.events import EventBus, NavigationEvent
from spatial_nav.core.navigator import SpatialNavigator
from spatial_nav.ui.layout import RectLayoutProvider


def test_arrow_moves_focus(navigator, abc_layout):
    navigator.set_focus("A")

    assert navigator.on_key_down(pygame.K_RIGHT) is True
    assert navigator.get_current_focus_id() == "B"

    navigator.on_key_up(pygame.K_RIGHT)
    navigator.on_key_down(pygame.K_LEFT)
    assert navigator.get_current_focus_id() == "A"


def test_process_pygame_events(navigator, abc_layout):
    navigator.set_focus("A")

    navigator.input.process_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_DOWN))
    navigator.input.process_event(pygame.event.Event(pygame.KEYUP, key=pygame.K_DOWN))

    assert navigator.get_current_focus_id() == "C"
    assert navigator.input.pressed_keys == {}


def test_arrow_intercept_false_prevents_navigation(navigator, add_node, calls):
    add_node("A", (0, 0, 10, 10), arrow_result=False)
    add_node("B", (20, 0, 10, 10))
    navigator.set_focus("A")

    navigator.on_key_down(pygame.K_RIGHT)

    assert ("A", "arrow", "right") in calls
    assert navigator.get_current_focus_id() == "A"


def test_arrow_intercept_none_allows_navigation(navigator, add_node):
    add_node("A", (0, 0, 10, 10), arrow_result=None)
    add_node("B", (20, 0, 10, 10))
    navigator.set_focus("A")

    navigator.on_key_down(pygame.K_RIGHT)

    assert navigator.get_current_focus_id() == "B"


def test_enter_press_and_release(navigator, abc_layout, calls):
    navigator.set_focus("A")
    calls.clear()

    navigator.on_key_down(pygame.K_RETURN)
    navigator.on_key_up(pygame.K_RETURN)

    assert calls == [
        ("A", "enter_press", {"enter": 1}),
        ("A", "enter_release"),
    ]


def test_enter_suppressed_for_unfocusable_focus(navigator, abc_layout, calls):
    navigator.set_focus("A")
    navigator.update("A", focusable=False)
    calls.clear()

    navigator.on_key_down(pygame.K_RETURN)
    navigator.on_key_up(pygame.K_RETURN)

    assert calls == []


def test_enter_after_focused_node_removed(navigator, abc_layout, calls):
    navigator.set_focus("A")
    navigator.update("page", auto_restore_focus=False)
    navigator.unregister("A")
    calls.clear()

    navigator.on_key_down(pygame.K_RETURN)

    assert calls == []


def test_held_key_counter(navigator, abc_layout, calls):
    navigator.set_focus("A")
    calls.clear()

    navigator.on_key_down(pygame.K_RETURN)
    navigator.on_key_down(pygame.K_RETURN)

    assert navigator.input.pressed_keys == {"enter": 2}
    assert calls[-1] == ("A", "enter_press", {"enter": 2})

    navigator.on_key_up(pygame.K_RETURN)
    assert navigator.input.pressed_keys == {}


def test_unmapped_key_ignored(navigator, abc_layout, calls):
    navigator.set_focus("A")
    calls.clear()

    assert navigator.on_key_down(pygame.K_q) is False
    assert navigator.input.pressed_keys == {}
    assert calls == []


def test_paused_ignores_keys_but_not_set_focus(navigator, abc_layout):
    navigator.set_focus("A")
    navigator.pause()

    assert navigator.on_key_down(pygame.K_RIGHT) is False
    assert navigator.get_current_focus_id() == "A"

    navigator.set_focus("C")
    assert navigator.get_current_focus_id() == "C"

    navigator.resume()
    navigator.on_key_down(pygame.K_UP)
    assert navigator.get_current_focus_id() == "A"


def test_arrow_without_focus_is_noop(navigator, abc_layout):
    assert navigator.on_key_down(pygame.K_RIGHT) is True
    assert navigator.get_current_focus_id() is None


def test_set_key_map_merges(navigator, abc_layout):
    navigator.set_key_map({"right": [pygame.K_d, pygame.K_l], Action.LEFT: pygame.K_a})
    navigator.set_focus("A")

    key_map = navigator.get_key_map()
    assert key_map["right"] == [pygame.K_d, pygame.K_l]
    assert key_map["left"] == [pygame.K_a]
    # Untouched entries survive the merge
    assert key_map["down"] == [pygame.K_DOWN]

    navigator.on_key_down(pygame.K_d)
    assert navigator.get_current_focus_id() == "B"

    # The replaced code no longer maps
    assert navigator.on_key_down(pygame.K_RIGHT) is False


def test_malformed_key_map_entry_skipped(navigator, caplog):
    with caplog.at_level(logging.WARNING):
        navigator.set_key_map({"up": [], "down": "s", "enter": [pygame.K_SPACE]})

    key_map = navigator.get_key_map()
    assert key_map["up"] == [pygame.K_UP]
    assert key_map["down"] == [pygame.K_DOWN]
    assert key_map["enter"] == [pygame.K_SPACE]
    assert "malformed" in caplog.text


def test_layouts_remeasured_each_key_down(clock):
    navigator = SpatialNavigator(RectLayoutProvider(), clock=clock)
    navigator.initialize()

    a = pygame.Rect(0, 0, 10, 10)
    b = pygame.Rect(20, 0, 10, 10)
    navigator.register(node_id="A", handle=a)
    navigator.register(node_id="B", handle=b)
    navigator.set_focus("A")

    navigator.on_key_down(pygame.K_RIGHT)
    navigator.on_key_down(pygame.K_LEFT)
    assert navigator.get_current_focus_id() == "A"

    # Nothing to the left of A yet
    navigator.on_key_down(pygame.K_LEFT)
    assert navigator.get_current_focus_id() == "A"

    # B moves to the left of A between key presses
    b.x = -40
    navigator.on_key_down(pygame.K_LEFT)
    assert navigator.get_current_focus_id() == "B"


def test_navigate_override_hook(navigator, add_node):
    seen = []
    a = add_node("A", (0, 0, 10, 10))
    add_node("B", (20, 0, 10, 10))
    add_node("far", (500, 500, 10, 10))

    def custom(nav, focus_id, direction, details):
        seen.append((focus_id, direction))
        nav.set_focus("far")

    a.callbacks.on_navigate = custom
    navigator.set_focus("A")

    navigator.on_key_down(pygame.K_RIGHT)

    assert seen == [("A", Action.RIGHT)]
    assert navigator.get_current_focus_id() == "far"


def test_prevented_navigation_published(clock):
    bus = EventBus()
    received = []
    bus.subscribe(NavigationEvent.NAVIGATION_PREVENTED, received.append)

    navigator = SpatialNavigator(RectLayoutProvider(), event_bus=bus, clock=clock)
    navigator.initialize()
    node = navigator.register(node_id="A", handle=pygame.Rect(0, 0, 10, 10))
    node.callbacks.on_arrow_press = lambda direction, details: False
    navigator.set_focus("A")

    navigator.on_key_down(pygame.K_UP)

    assert len(received) == 1
    assert received[0]["node_id"] == "A"
    assert received[0]["direction"] == Action.UP
