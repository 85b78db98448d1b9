from spatial_nav.ui.leaf import closest_to_origin


def test_childless_node_returned_unchanged(make_node, leaf_resolver):
    make_node("leaf")

    assert leaf_resolver.resolve("leaf") == "leaf"


def test_childless_unfocusable_node_still_returned(make_node, leaf_resolver):
    # Regression: resolution does not skip unfocusable leaves
    make_node("group", focusable=False)
    make_node("hidden_child", parent_id="group", focusable=False)

    assert leaf_resolver.resolve("group") == "group"


def test_unknown_target_returns_current_focus(make_node, leaf_resolver):
    make_node("a")

    assert leaf_resolver.resolve("missing", "a") == "a"
    assert leaf_resolver.resolve("missing") is None


def test_last_focused_child_wins(make_node, leaf_resolver):
    make_node("group", last_focused_child_id="second", preferred_child_id="first")
    make_node("first", (0, 0, 10, 10), parent_id="group")
    make_node("second", (20, 0, 10, 10), parent_id="group")

    assert leaf_resolver.resolve("group") == "second"


def test_last_focused_ignored_without_save_flag(make_node, leaf_resolver):
    make_node(
        "group",
        last_focused_child_id="second",
        preferred_child_id="third",
        save_last_focused_child=False,
    )
    make_node("first", (0, 0, 10, 10), parent_id="group")
    make_node("second", (20, 0, 10, 10), parent_id="group")
    make_node("third", (40, 0, 10, 10), parent_id="group")

    assert leaf_resolver.resolve("group") == "third"


def test_preferred_child(make_node, leaf_resolver):
    make_node("group", preferred_child_id="second")
    make_node("first", (0, 0, 10, 10), parent_id="group")
    make_node("second", (20, 0, 10, 10), parent_id="group")

    assert leaf_resolver.resolve("group") == "second"


def test_stale_references_fall_back_to_coordinates(make_node, leaf_resolver, tree):
    make_node("group", last_focused_child_id="gone", preferred_child_id="gone")
    make_node("far", (50, 50, 10, 10), parent_id="group")
    make_node("near", (5, 0, 10, 10), parent_id="group")
    make_node("gone", (0, 0, 10, 10), parent_id="group")

    tree.remove("gone")

    assert tree.get("group").last_focused_child_id is None
    assert leaf_resolver.resolve("group") == "near"


def test_unfocusable_preferred_child_ignored(make_node, leaf_resolver):
    make_node("group", preferred_child_id="disabled")
    make_node("disabled", (0, 0, 10, 10), parent_id="group", focusable=False)
    make_node("enabled", (30, 30, 10, 10), parent_id="group")

    assert leaf_resolver.resolve("group") == "enabled"


def test_descends_nested_groups(make_node, leaf_resolver):
    make_node("screen")
    make_node("sidebar", (0, 0, 100, 500), parent_id="screen")
    make_node("content", (100, 0, 500, 500), parent_id="screen", preferred_child_id="row2")
    make_node("row1", (100, 0, 500, 100), parent_id="content")
    make_node("row2", (100, 100, 500, 100), parent_id="content")
    make_node("tile", (110, 110, 50, 50), parent_id="row2")

    assert leaf_resolver.resolve("screen") == "sidebar"
    assert leaf_resolver.resolve("content") == "tile"


def test_closest_to_origin_uses_absolute_coordinates(make_node, layouts):
    a = make_node("a", (-3, 0, 10, 10))
    b = make_node("b", (2, 0, 10, 10))
    c = make_node("c", (0, 2, 10, 10))

    assert closest_to_origin([a, b, c], layouts) is b


def test_terminates_on_cyclic_last_focused_pointers(make_node, leaf_resolver):
    make_node("g", last_focused_child_id="x")
    make_node("g_child", parent_id="g")
    make_node("x", last_focused_child_id="g")
    make_node("x_child", parent_id="x")

    assert leaf_resolver.resolve("g") == "x"
