import math

import pytest

import shapes

CENTER = (300.0, 300.0)


@pytest.mark.parametrize("shape_id", sorted(shapes.SHAPES))
def test_every_shape_is_non_empty_and_centered(shape_id):
    path = shapes.generate_path(shape_id, *CENTER)
    assert len(path) > 0
    cx, cy = shapes.centroid(path)
    assert math.hypot(cx - CENTER[0], cy - CENTER[1]) < 60


@pytest.mark.parametrize("shape_id", sorted(shapes.SHAPES))
def test_paths_are_deterministic(shape_id):
    assert shapes.generate_path(shape_id, *CENTER) == shapes.generate_path(shape_id, *CENTER)


def test_fifteen_shapes_registered():
    assert len(shapes.SHAPES) == 15
    assert "desert-star" in shapes.SHAPES
    assert "marfa-lights" in shapes.SHAPES


def test_path_follows_center():
    a = shapes.generate_path("saguaro", 100, 100)
    b = shapes.generate_path("saguaro", 150, 80)
    for (ax, ay), (bx, by) in zip(a, b):
        assert bx - ax == pytest.approx(50)
        assert by - ay == pytest.approx(-20)


def test_desert_star_alternates_radii():
    path = shapes.generate_path("desert-star", 0, 0)
    assert len(path) == 10
    radii = [math.hypot(x, y) for x, y in path]
    assert radii[0::2] == pytest.approx([130] * 5)
    assert radii[1::2] == pytest.approx([50] * 5)


def test_unknown_shape_is_empty():
    assert shapes.generate_path("jackalope", 0, 0) == []
    assert shapes.recipe_for("jackalope") == ()


def test_register_shape():
    recipe = (shapes.Line(4, -3, 0, 2, 0), shapes.Star(3, 10, 5))
    shapes.register_shape("test-fence", recipe)
    try:
        path = shapes.generate_path("test-fence", 10, 10)
        assert len(path) == 4 + 6
        assert path[0] == (7, 10)
    finally:
        del shapes.SHAPES["test-fence"]


def test_register_shape_rejects_unknown_segments():
    with pytest.raises(TypeError):
        shapes.register_shape("bad", [(1, 2, 3)])
    assert "bad" not in shapes.SHAPES
