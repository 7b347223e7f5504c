import random

import pygame
import pytest

import draw
from config import SimulationConfig
from particles import ParticleSystem, PointerState
import shapes


def test_connection_alpha():
    assert draw.connection_alpha(0, 100) == pytest.approx(0.7)
    assert draw.connection_alpha(50, 100) == pytest.approx(0.35)
    assert draw.connection_alpha(100, 100) == 0
    assert draw.connection_alpha(150, 100) == 0
    assert draw.connection_alpha(10, 0) == 0


def test_trail_alpha_decays_linearly():
    assert draw.trail_alpha(0, 10) == pytest.approx(0.6)
    assert draw.trail_alpha(5, 10) == pytest.approx(0.3)
    assert draw.trail_alpha(9, 10) == pytest.approx(0.06)


def test_find_connections():
    positions = [(0, 0), (30, 40), (200, 0), (0, 49.9)]
    pairs = draw.find_connections(positions, 50)
    assert sorted((i, j) for i, j, _ in pairs) == [(0, 3), (1, 3)]
    distances = {(i, j): d for i, j, d in pairs}
    assert distances[(0, 3)] == pytest.approx(49.9)


def test_find_connections_excludes_exact_distance():
    assert draw.find_connections([(0, 0), (30, 40)], 50) == []
    assert draw.find_connections([(0, 0), (30, 40)], 50.001)[0][:2] == (0, 1)


def test_find_connections_degenerate():
    assert draw.find_connections([], 100) == []
    assert draw.find_connections([(0, 0)], 100) == []
    assert draw.find_connections([(0, 0), (1, 1)], 0) == []


@pytest.mark.parametrize(
    "glow, tiers",
    [(0, 0), (0.5, 1), (1, 1), (1.5, 2), (2, 2), (2.5, 3), (3, 3)],
)
def test_glow_tier_count(glow, tiers):
    assert len(draw.glow_tiers(glow)) == tiers


def test_glow_tiers_grow_and_fade():
    tiers = draw.glow_tiers(3.0)
    assert [blur for blur, _, _ in tiers] == [120, 180, 240]
    pads = [pad for _, pad, _ in tiers]
    alphas = [alpha for _, _, alpha in tiers]
    assert pads == sorted(pads)
    assert alphas == sorted(alphas, reverse=True)


@pytest.mark.parametrize("gradient", ["solid", "radial", "linear"])
def test_background_ops_without_scene(gradient):
    config = SimulationConfig(gradient_type=gradient)
    ops = draw.background_ops(config, 200, 100)
    assert len(ops) == 1
    assert ops[0]["rect"] == [0, 0, 200, 100]


def test_background_ops_with_scene():
    config = SimulationConfig(scene_type="judd-building")
    ops = draw.background_ops(config, 200, 200)
    assert len(ops) > 1


def test_solid_background_fills_canvas():
    surface = pygame.Surface((40, 30))
    draw.draw_background(surface, SimulationConfig(gradient_type="solid", background_color="#102030"))
    assert surface.get_at((0, 0))[:3] == (16, 32, 48)
    assert surface.get_at((39, 29))[:3] == (16, 32, 48)


def test_radial_gradient_runs_center_to_edge():
    surface = pygame.Surface((100, 100))
    config = SimulationConfig(gradient_type="radial", background_color="#000000", background_color2="#ffffff")
    draw.draw_background(surface, config)
    assert surface.get_at((50, 50))[0] < 10
    assert surface.get_at((0, 50))[0] > 245
    assert surface.get_at((0, 0))[0] == 255


def test_render_frame_draws_particles():
    width = height = 300
    path = tuple(shapes.generate_path("desert-star", width / 2, height / 2))
    system = ParticleSystem(path, 10, 20, random.Random(5))
    settled = system.positions()
    system.step(0.3, PointerState())
    config = SimulationConfig(
        shape_type="desert-star",
        particle_count=10,
        gradient_type="solid",
        background_color="#000000",
        particle_color="#ff0000",
        glow_intensity=2.5,
        connection_distance=150,
    )
    surface = pygame.Surface((width, height))
    draw.render_frame(surface, config, system.particles, settled, random.Random(5))
    for particle in system.particles:
        x, y = particle.position
        assert surface.get_rect().collidepoint(x, y)
        r, g, b, _ = surface.get_at((int(x), int(y)))
        assert r > 200 and g < 50 and b < 50


def test_render_frame_with_no_particles_draws_nothing():
    surface = pygame.Surface((50, 50))
    surface.fill((255, 0, 255))
    config = SimulationConfig(gradient_type="solid", background_color="#0000ff", scene_type="starry-night")
    draw.render_frame(surface, config, [], [])
    assert surface.get_at((25, 25))[:3] == (255, 0, 255)
    assert surface.get_at((0, 0))[:3] == (255, 0, 255)


def test_glow_layers_are_reused_between_frames():
    surface = pygame.Surface((200, 200))
    draw._glow_layer.cache_clear()
    draw.draw_glow(surface, "#ffa500", (100, 100), 2.5, 3.0)
    first = draw._glow_layer.cache_info()
    draw.draw_glow(surface, "#ffa500", (120, 90), 2.5, 3.0)
    second = draw._glow_layer.cache_info()
    assert first.misses == 3
    assert second.misses == 3
    assert second.hits == first.hits + 3


def test_encode_png():
    surface = pygame.Surface((16, 8))
    surface.fill((255, 0, 0))
    data = draw.encode_png(surface)
    assert data[:8] == b"\x89PNG\r\n\x1a\n"
    assert draw.frame_array(surface).shape == (8, 16, 3)
