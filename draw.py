import random
from functools import lru_cache

import imageio.v2 as imageio  # v2 API is more stable
import numpy as np
import pygame
from numba import jit

import paint
import scenes
from config import CONNECTION_ALPHA, CONNECTION_WIDTH, GLOW_TIERS, TRAIL_ALPHA, TRAIL_WIDTH


@jit(nopython=True)
def _connection_kernel(positions, max_distance, pairs, distances):
    """Collect every unordered pair closer than max_distance. Returns the pair count."""
    n = positions.shape[0]
    count = 0
    for i in range(n):
        for j in range(i + 1, n):
            dx = positions[i, 0] - positions[j, 0]
            dy = positions[i, 1] - positions[j, 1]
            distance = np.sqrt(dx * dx + dy * dy)
            if distance < max_distance:
                pairs[count, 0] = i
                pairs[count, 1] = j
                distances[count] = distance
                count += 1
    return count


def find_connections(positions, max_distance):
    """List ``(i, j, distance)`` for all pairs with ``distance < max_distance``."""
    n = len(positions)
    if max_distance <= 0 or n < 2:
        return []
    points = np.asarray(positions, dtype=np.float64).reshape(n, 2)
    size = n * (n - 1) // 2
    pairs = np.zeros((size, 2), dtype=np.int64)
    distances = np.zeros(size, dtype=np.float64)
    count = _connection_kernel(points, float(max_distance), pairs, distances)
    return [(int(pairs[k, 0]), int(pairs[k, 1]), float(distances[k])) for k in range(count)]


def connection_alpha(distance, max_distance):
    if max_distance <= 0 or distance >= max_distance:
        return 0.0
    return (1 - distance / max_distance) * CONNECTION_ALPHA


def trail_alpha(index, length):
    return (1 - index / length) * TRAIL_ALPHA


def glow_tiers(glow_intensity):
    """``(blur, radius_pad, alpha)`` for every tier the intensity exceeds."""
    return [
        (blur * glow_intensity, pad, alpha)
        for threshold, blur, pad, alpha in GLOW_TIERS
        if glow_intensity > threshold
    ]


def background_ops(config, width, height):
    """Display list for the frame background, shared with the HTML exporter."""
    if config.scene_type in scenes.SCENES:
        return scenes.scene_ops(config.scene_type, width, height)
    full = (0, 0, width, height)
    stops = [(0, config.background_color), (1, config.background_color2)]
    if config.gradient_type == "radial":
        return [paint.radial_gradient((width / 2, height / 2), width / 2, stops, full)]
    if config.gradient_type == "linear":
        return [paint.linear_gradient((0, 0), (width, height), stops, full)]
    return [paint.fill_rect(config.background_color, full)]


def draw_background(surface, config, rng=random):
    if scenes.render_scene(config.scene_type, surface, rng):
        return
    width, height = surface.get_size()
    paint.paint_ops(surface, background_ops(config, width, height), rng)


def draw_connections(surface, color, positions, max_distance):
    for i, j, distance in find_connections(positions, max_distance):
        alpha = connection_alpha(distance, max_distance)
        paint.blend_line(surface, color, alpha, positions[i], positions[j], CONNECTION_WIDTH)


def draw_trail(surface, color, trail):
    length = len(trail)
    if length < 2:
        return
    for i in range(length - 1):
        paint.blend_line(surface, color, trail_alpha(i, length), trail[i], trail[i + 1], TRAIL_WIDTH)


def _halo(rgb, radius, blur):
    """A soft disc: ``radius`` wide, feathered over roughly ``blur`` pixels."""
    pad = int(blur) + 2
    size = 2 * (int(radius) + pad)
    halo = pygame.Surface((size, size), pygame.SRCALPHA)
    pygame.draw.circle(halo, (*rgb, 255), (size / 2, size / 2), radius)
    shrink = max(1.0, blur / 4)
    small = (max(1, int(size / shrink)), max(1, int(size / shrink)))
    return pygame.transform.smoothscale(pygame.transform.smoothscale(halo, small), (size, size))


@lru_cache(maxsize=64)
def _glow_layer(rgb, radius, blur, alpha):
    layer = _halo(rgb, radius, blur).copy()
    layer.set_alpha(alpha)
    return layer


def draw_glow(surface, color, center, glow_intensity, particle_size):
    rgb = paint.rgb(color)
    for blur, pad, alpha in glow_tiers(glow_intensity):
        radius = particle_size + pad
        halo = _glow_layer(rgb, round(radius, 1), round(blur, 1), int(round(255 * alpha)))
        surface.blit(halo, (int(center[0] - halo.get_width() / 2), int(center[1] - halo.get_height() / 2)))
        paint.blend_circle(surface, color, alpha, center, radius)


def draw_body(surface, color, center, particle_size):
    pygame.draw.circle(surface, paint.rgb(color), (center[0], center[1]), max(1.0, particle_size))


def render_frame(surface, config, particles, settled, rng=random):
    """Composite one frame: background, connections, then trail, glow and body per particle.

    ``settled`` are the positions before this frame's tick; connections are
    drawn from them. Without particles nothing is drawn at all.
    """
    if not particles:
        return surface
    draw_background(surface, config, rng)
    if config.connection_distance > 0:
        draw_connections(surface, config.particle_color, settled, config.connection_distance)
    for particle in particles:
        center = (particle.position.x, particle.position.y)
        draw_trail(surface, config.particle_color, particle.trail)
        draw_glow(surface, config.particle_color, center, config.glow_intensity, config.particle_size)
        draw_body(surface, config.particle_color, center, config.particle_size)
    return surface


def frame_array(surface):
    frame_data = pygame.surfarray.array3d(surface)
    return np.transpose(frame_data, (1, 0, 2))


def encode_png(surface):
    return imageio.imwrite("<bytes>", frame_array(surface), format="png")
