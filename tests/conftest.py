import os
import sys

import pygame
import pytest

# Ensure spatial_nav can be imported
sys.path.append(os.getcwd())

from spatial_nav.core.navigator import SpatialNavigator
from spatial_nav.ui.layout import LayoutCache, RectLayoutProvider
from spatial_nav.ui.leaf import LeafResolver
from spatial_nav.ui.directional import DirectionalResolver
from spatial_nav.ui.node import FocusCallbacks, FocusNode
from spatial_nav.ui.tree import FocusTree


class RecordingCallbacks(FocusCallbacks):
    """Appends (node_id, hook, *args) to a shared log."""

    def __init__(self, log, node_id, arrow_result=True):
        self.log = log
        self.node_id = node_id
        self.arrow_result = arrow_result

    def on_focus(self, box, details):
        self.log.append((self.node_id, "focus"))

    def on_blur(self, box, details):
        self.log.append((self.node_id, "blur"))

    def on_update_focus(self, focused):
        self.log.append((self.node_id, "focused", focused))

    def on_update_has_focused_child(self, has_focused_child):
        self.log.append((self.node_id, "has_focused_child", has_focused_child))

    def on_enter_press(self, details):
        self.log.append((self.node_id, "enter_press", dict(details.pressed_keys)))

    def on_enter_release(self):
        self.log.append((self.node_id, "enter_release"))

    def on_arrow_press(self, direction, details):
        self.log.append((self.node_id, "arrow", direction.value))
        return self.arrow_result


class FakeClock:
    """Millisecond clock driven by the test."""

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


@pytest.fixture
def calls():
    """Shared callback log."""
    return []


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def navigator(clock):
    """Initialized navigator measuring pygame.Rect handles."""
    nav = SpatialNavigator(RectLayoutProvider(), clock=clock)
    nav.initialize()
    yield nav
    nav.shutdown()


@pytest.fixture
def add_node(navigator, calls):
    """
    Register a node with a recording callback object.

    Usage:
        add_node("a", (0, 0, 10, 10), parent_id="page")
    """
    def _add(node_id, box=(0, 0, 0, 0), parent_id="SN:ROOT", arrow_result=True, **fields):
        return navigator.register(
            node_id=node_id,
            parent_id=parent_id,
            handle=pygame.Rect(*box),
            callbacks=RecordingCallbacks(calls, node_id, arrow_result),
            **fields,
        )
    return _add


@pytest.fixture
def abc_layout(add_node):
    """
    Siblings under one parent:

        A(0,0,10,10)   B(20,0,10,10)
        C(0,20,10,10)
    """
    add_node("page", (0, 0, 100, 100))
    add_node("A", (0, 0, 10, 10), parent_id="page")
    add_node("B", (20, 0, 10, 10), parent_id="page")
    add_node("C", (0, 20, 10, 10), parent_id="page")


@pytest.fixture
def tree():
    """Fresh FocusTree for each test."""
    return FocusTree()


@pytest.fixture
def layouts(tree):
    """Layout cache over `tree`; nodes carry their box directly."""
    return LayoutCache(tree)


@pytest.fixture
def leaf_resolver(tree, layouts):
    return LeafResolver(tree, layouts)


@pytest.fixture
def resolver(tree, layouts):
    return DirectionalResolver(tree, layouts)


@pytest.fixture
def make_node(tree):
    """Add a FocusNode with a static box to `tree`."""
    from spatial_nav.ui.node import Box

    def _make(node_id, box=(0, 0, 0, 0), parent_id="SN:ROOT", **fields):
        return tree.add(FocusNode(node_id=node_id, parent_id=parent_id, box=Box(*box), **fields))
    return _make


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from spatial_nav.core.events import EventBus
    return EventBus()
