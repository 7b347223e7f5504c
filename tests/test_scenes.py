import random

import numpy as np
import pygame
import pytest

import paint
import scenes

MAGENTA = (255, 0, 255)


def magenta_canvas(size=(300, 240)):
    surface = pygame.Surface(size)
    surface.fill(MAGENTA)
    return surface


@pytest.mark.parametrize("scene_id", sorted(scenes.SCENES))
def test_scene_overwrites_every_pixel(scene_id):
    surface = magenta_canvas()
    assert scenes.render_scene(scene_id, surface, random.Random(0))
    pixels = pygame.surfarray.array3d(surface)
    assert not np.all(pixels == MAGENTA, axis=-1).any()


@pytest.mark.parametrize("scene_id", [scenes.NONE, "alien-landing"])
def test_none_and_unknown_are_noops(scene_id):
    surface = magenta_canvas()
    assert scenes.render_scene(scene_id, surface) is False
    assert scenes.scene_ops(scene_id, 300, 240) == []
    assert np.all(pygame.surfarray.array3d(surface) == MAGENTA)


def test_scene_ops_are_plain_data():
    for scene_id in scenes.SCENES:
        for op in scenes.scene_ops(scene_id, 600, 600):
            assert op["op"] in paint.PAINTERS


def test_starfield_is_resampled_every_paint():
    rng = random.Random(7)
    first = magenta_canvas()
    second = magenta_canvas()
    scenes.render_scene("starry-night", first, rng)
    scenes.render_scene("starry-night", second, rng)
    assert not np.array_equal(pygame.surfarray.array3d(first), pygame.surfarray.array3d(second))


def test_starfield_follows_the_random_source():
    first = magenta_canvas()
    second = magenta_canvas()
    scenes.render_scene("starry-night", first, random.Random(7))
    scenes.render_scene("starry-night", second, random.Random(7))
    assert np.array_equal(pygame.surfarray.array3d(first), pygame.surfarray.array3d(second))


def test_prada_marfa_has_labels():
    labels = [op["text"] for op in scenes.scene_ops("prada-marfa", 600, 600) if op["op"] == "text"]
    assert labels == ["PRADA", "MARFA"]


def test_tumbleweeds_are_radial_bursts():
    ops = scenes.scene_ops("tumbleweed-desert", 600, 600)
    spokes = [op for op in ops if op["op"] == "line"]
    assert len(spokes) == 7 * 12
    assert all(len(op["points"]) == 2 for op in spokes)


def test_scene_ops_are_deterministic():
    for scene_id in scenes.SCENES:
        assert scenes.scene_ops(scene_id, 600, 600) == scenes.scene_ops(scene_id, 600, 600)
