"""
Display lists for canvas backgrounds.

A display list is a list of plain dicts (``{"op": "fill_rect", ...}``) so the
same list can be painted here with pygame and serialized into the exported
HTML runtime unchanged.  Coordinates are canvas pixels, colors are ``#rrggbb``
strings, angles are radians measured clockwise on screen (y grows downward).
"""

import math
import random
from functools import lru_cache

import numpy as np
import pygame


# Operation constructors


def fill_rect(color, rect):
    return {"op": "fill_rect", "color": color, "rect": list(rect)}


def stroke_rect(color, rect, width=1):
    return {"op": "stroke_rect", "color": color, "rect": list(rect), "width": width}


def linear_gradient(start, end, stops, rect):
    return {
        "op": "linear_gradient",
        "start": list(start),
        "end": list(end),
        "stops": [[offset, color] for offset, color in stops],
        "rect": list(rect),
    }


def radial_gradient(center, radius, stops, rect):
    return {
        "op": "radial_gradient",
        "center": list(center),
        "radius": radius,
        "stops": [[offset, color] for offset, color in stops],
        "rect": list(rect),
    }


def polygon(color, points):
    return {"op": "polygon", "color": color, "points": [list(p) for p in points]}


def line(color, points, width=1):
    return {"op": "line", "color": color, "points": [list(p) for p in points], "width": width}


def arc(color, center, radius, start, end, width=1):
    return {
        "op": "arc",
        "color": color,
        "center": list(center),
        "radius": radius,
        "start": start,
        "end": end,
        "width": width,
    }


def text(label, color, pos, size, bold=False):
    return {"op": "text", "text": label, "color": color, "pos": list(pos), "size": size, "bold": bold}


def starfield(count, color, size=(0.5, 2.0), alpha=(0.2, 0.8)):
    """Stars placed from the random source each time the list is painted.

    ``size`` and ``alpha`` are ``(base, spread)``: value = random() * spread + base.
    """
    return {"op": "starfield", "count": count, "color": color, "size": list(size), "alpha": list(alpha)}


# Colors


@lru_cache(maxsize=256)
def rgb(color):
    c = pygame.Color(color)
    return (c.r, c.g, c.b)


def _stroke_width(width):
    return max(1, int(round(width)))


def _to_rect(values):
    return pygame.Rect(*(int(round(v)) for v in values))


# Translucent primitives go through a small SRCALPHA layer covering their
# bounding box so they blend over the opaque canvas.


def _blend(surface, bounds, draw_fn):
    rect = pygame.Rect(bounds).clip(surface.get_rect())
    if rect.width <= 0 or rect.height <= 0:
        return
    layer = pygame.Surface(rect.size, pygame.SRCALPHA)
    draw_fn(layer, (rect.x, rect.y))
    surface.blit(layer, rect.topleft)


def _bounds(points, pad):
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    left = math.floor(min(xs) - pad)
    top = math.floor(min(ys) - pad)
    return (left, top, math.ceil(max(xs) + pad) - left + 1, math.ceil(max(ys) + pad) - top + 1)


def blend_line(surface, color, alpha, p0, p1, width=1):
    stroke = _stroke_width(width)
    rgba = (*rgb(color), int(round(255 * max(0.0, min(1.0, alpha)))))
    if rgba[3] == 0:
        return

    def draw(layer, origin):
        ox, oy = origin
        pygame.draw.line(layer, rgba, (p0[0] - ox, p0[1] - oy), (p1[0] - ox, p1[1] - oy), stroke)

    _blend(surface, _bounds((p0, p1), stroke), draw)


def blend_circle(surface, color, alpha, center, radius):
    rgba = (*rgb(color), int(round(255 * max(0.0, min(1.0, alpha)))))
    if rgba[3] == 0:
        return
    radius = max(1.0, radius)

    def draw(layer, origin):
        pygame.draw.circle(layer, rgba, (center[0] - origin[0], center[1] - origin[1]), radius)

    _blend(surface, _bounds((center,), radius + 1), draw)


# Gradients


def _shade(t, stops):
    offsets = np.array([offset for offset, _ in stops], dtype=np.float64)
    colors = np.array([rgb(color) for _, color in stops], dtype=np.float64)
    t = np.clip(t, 0.0, 1.0)
    channels = [np.interp(t, offsets, colors[:, k]) for k in range(3)]
    return np.round(np.stack(channels, axis=-1)).astype(np.uint8)


def _pixel_grid(rect):
    xs = np.arange(rect.x, rect.right, dtype=np.float64) + 0.5
    ys = np.arange(rect.y, rect.bottom, dtype=np.float64) + 0.5
    # surfarray layout is [x, y]
    return np.meshgrid(xs, ys, indexing="ij")


def _fill_shade(surface, rect, t, stops):
    surface.blit(pygame.surfarray.make_surface(_shade(t, stops)), rect.topleft)


def _paint_linear_gradient(surface, op, rng):
    rect = _to_rect(op["rect"]).clip(surface.get_rect())
    if rect.width <= 0 or rect.height <= 0:
        return
    gx, gy = _pixel_grid(rect)
    (x0, y0), (x1, y1) = op["start"], op["end"]
    dx, dy = x1 - x0, y1 - y0
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        t = np.zeros_like(gx)
    else:
        t = ((gx - x0) * dx + (gy - y0) * dy) / length_sq
    _fill_shade(surface, rect, t, op["stops"])


def _paint_radial_gradient(surface, op, rng):
    rect = _to_rect(op["rect"]).clip(surface.get_rect())
    if rect.width <= 0 or rect.height <= 0:
        return
    gx, gy = _pixel_grid(rect)
    cx, cy = op["center"]
    radius = op["radius"]
    distance = np.sqrt((gx - cx) ** 2 + (gy - cy) ** 2)
    t = distance / radius if radius > 0 else np.ones_like(gx)
    _fill_shade(surface, rect, t, op["stops"])


# Opaque primitives


def _paint_fill_rect(surface, op, rng):
    surface.fill(rgb(op["color"]), _to_rect(op["rect"]))


def _paint_stroke_rect(surface, op, rng):
    pygame.draw.rect(surface, rgb(op["color"]), _to_rect(op["rect"]), _stroke_width(op["width"]))


def _paint_polygon(surface, op, rng):
    pygame.draw.polygon(surface, rgb(op["color"]), [tuple(p) for p in op["points"]])


def _paint_line(surface, op, rng):
    pygame.draw.lines(surface, rgb(op["color"]), False, [tuple(p) for p in op["points"]], _stroke_width(op["width"]))


def _paint_arc(surface, op, rng):
    cx, cy = op["center"]
    radius = op["radius"]
    start, end = op["start"], op["end"]
    steps = max(2, int(abs(end - start) * radius / 2) + 1)
    points = [
        (cx + math.cos(start + (end - start) * k / steps) * radius,
         cy + math.sin(start + (end - start) * k / steps) * radius)
        for k in range(steps + 1)
    ]
    pygame.draw.lines(surface, rgb(op["color"]), False, points, _stroke_width(op["width"]))


@lru_cache(maxsize=16)
def _load_font(size, bold):
    font = pygame.font.Font(None, int(size))
    font.set_bold(bold)
    return font


def _font(size, bold):
    if not pygame.font.get_init():
        # fonts loaded before a pygame.quit() are dead
        _load_font.cache_clear()
        pygame.font.init()
    return _load_font(size, bold)


def _paint_text(surface, op, rng):
    font = _font(op["size"], op["bold"])
    label = font.render(op["text"], True, rgb(op["color"]))
    x, y = op["pos"]
    # centered horizontally, y is the baseline
    surface.blit(label, (int(x - label.get_width() / 2), int(y - font.get_ascent())))


def _paint_starfield(surface, op, rng):
    width, height = surface.get_size()
    size_base, size_spread = op["size"]
    alpha_base, alpha_spread = op["alpha"]
    for _ in range(op["count"]):
        x = rng.random() * width
        y = rng.random() * height
        size = rng.random() * size_spread + size_base
        alpha = rng.random() * alpha_spread + alpha_base
        blend_circle(surface, op["color"], alpha, (x, y), size)


PAINTERS = {
    "fill_rect": _paint_fill_rect,
    "stroke_rect": _paint_stroke_rect,
    "linear_gradient": _paint_linear_gradient,
    "radial_gradient": _paint_radial_gradient,
    "polygon": _paint_polygon,
    "line": _paint_line,
    "arc": _paint_arc,
    "text": _paint_text,
    "starfield": _paint_starfield,
}


def paint_ops(surface, ops, rng=random):
    """Paint a display list onto ``surface`` in order."""
    for op in ops:
        PAINTERS[op["op"]](surface, op, rng)
