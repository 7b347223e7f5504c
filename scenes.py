"""
Full-canvas desert backdrops.

Each scene is a function ``(width, height) -> display list`` (see ``paint``).
A scene's list always starts by covering the whole canvas with opaque pixels,
so nothing from the previous frame shows through.
"""

import logging
import math
import random

import paint

NONE = "none"

SKY_BLUE = "#87ceeb"
SANDY_BROWN = "#f4a460"
CHOCOLATE = "#d2691e"


def _ridge(width, base_y, terms, samples=10):
    """Sample a skyline: y = base_y - sum(a * sin(f * i)) at ``samples + 1`` columns."""
    return [
        ((i / samples) * width, base_y - sum(a * math.sin(f * i) for a, f in terms))
        for i in range(samples + 1)
    ]


def _cactus(x, y, height):
    fill, edge = "#2d5016", "#1a3d0f"
    rects = [(x - 3, y - height, 6, height)]
    if height > 20:
        rects += [(x - 10, y - height * 0.6, 7, 3), (x - 10, y - height * 0.6, 3, height * 0.4)]
    if height > 25:
        rects += [(x + 3, y - height * 0.7, 7, 3), (x + 7, y - height * 0.7, 3, height * 0.5)]
    return [paint.fill_rect(fill, r) for r in rects] + [paint.stroke_rect(edge, r, 1) for r in rects]


def _tumbleweed(x, y, size):
    color = "#8b7355"
    ops = []
    for i in range(12):
        angle = (i / 12) * math.pi * 2
        tip = (x + math.cos(angle) * size, y + math.sin(angle) * size)
        ops.append(paint.line(color, [(x, y), tip], 1.5))
    for i in range(6):
        angle = (i / 6) * math.pi * 2
        ops.append(paint.arc(color, (x, y), size * 0.6, angle, angle + math.pi / 3, 1.5))
    return ops


def sunset_sky(width, height):
    stops = [(0, "#ff6b35"), (0.3, "#ff8c42"), (0.6, "#ffa552"), (0.85, CHOCOLATE), (1, "#8b4513")]
    return [paint.linear_gradient((0, 0), (0, height), stops, (0, 0, width, height))]


def starry_night(width, height):
    return [
        paint.radial_gradient(
            (width / 2, height / 2), width * 0.7, [(0, "#0a0624"), (1, "#000000")], (0, 0, width, height)
        ),
        paint.starfield(100, "#ffffff"),
    ]


def desert_landscape(width, height):
    far = _ridge(width, height * 0.5, ((50, 0.8), (30, 1.5)))
    near = _ridge(width, height * 0.55, ((40, 1.2),))
    return [
        # the near ridge can dip below the sky band, the floor color shows there
        paint.fill_rect(CHOCOLATE, (0, 0, width, height)),
        paint.linear_gradient((0, 0), (0, height * 0.6), [(0, SKY_BLUE), (1, SANDY_BROWN)], (0, 0, width, height * 0.6)),
        paint.polygon("#8b7355", [(0, height * 0.6)] + far + [(width, height * 0.6)]),
        paint.polygon("#6b5845", [(0, height * 0.65)] + near + [(width, height * 0.65)]),
        paint.fill_rect(CHOCOLATE, (0, height * 0.65, width, height * 0.35)),
    ]


def prada_marfa(width, height):
    building_w, building_h = 200, 90
    bx = width / 2 - building_w / 2
    by = height - building_h
    black = "#000000"
    return [
        paint.linear_gradient((0, 0), (0, height), [(0, SKY_BLUE), (1, SANDY_BROWN)], (0, 0, width, height)),
        paint.fill_rect("#d2b48c", (0, height * 0.75, width, height * 0.25)),
        paint.fill_rect("#ffffff", (bx, by, building_w, building_h)),
        paint.fill_rect(black, (bx - 10, by - 8, building_w + 20, 8)),  # roof overhang
        paint.fill_rect(black, (bx + building_w / 2 - 18, by + 25, 36, 65)),  # door
        paint.fill_rect(black, (bx + 25, by + 18, 32, 32)),
        paint.fill_rect(black, (bx + building_w - 57, by + 18, 32, 32)),
        paint.text("PRADA", black, (width / 2, by + 12), 22, bold=True),
        paint.text("MARFA", black, (width / 2, height - 8), 11, bold=True),
    ]


def judd_building(width, height):
    ops = [
        paint.linear_gradient((0, 0), (0, height), [(0, "#708090"), (1, "#8b7355")], (0, 0, width, height)),
        paint.fill_rect("#cd853f", (0, height * 0.7, width, height * 0.3)),
    ]
    for x, y, w, h in ((100, 350, 100, 80), (230, 370, 90, 60), (350, 360, 95, 70)):
        ops += [
            paint.fill_rect("#a9a9a9", (x, y, w, h)),
            paint.fill_rect("#696969", (x + 5, y + 5, w, h)),  # shadow
            paint.fill_rect("#c0c0c0", (x, y, w - 5, h - 5)),  # highlight
        ]
    return ops


def tumbleweed_desert(width, height):
    ground = height * 0.75
    ops = [
        paint.linear_gradient(
            (0, 0), (0, height), [(0, SKY_BLUE), (0.5, SANDY_BROWN), (1, CHOCOLATE)], (0, 0, width, height)
        )
    ]
    for x, h in ((100, 35), (180, 28), (420, 40), (520, 32), (50, 25)):
        ops += _cactus(x, ground, h)
    for x, y, size in (
        (150, 0.6, 25),
        (400, 0.7, 30),
        (500, 0.5, 20),
        (250, 0.65, 22),
        (550, 0.55, 18),
        (80, 0.68, 27),
        (320, 0.58, 24),
    ):
        ops += _tumbleweed(x, height * y, size)
    return ops


SCENES = {
    "sunset-sky": sunset_sky,
    "starry-night": starry_night,
    "desert-landscape": desert_landscape,
    "prada-marfa": prada_marfa,
    "judd-building": judd_building,
    "tumbleweed-desert": tumbleweed_desert,
}


def scene_ops(scene_id, width, height):
    """Display list for ``scene_id``; empty for ``none`` or an unknown id."""
    build = SCENES.get(scene_id)
    if build is None:
        return []
    return build(width, height)


def render_scene(scene_id, surface, rng=random):
    """Paint ``scene_id`` over the whole of ``surface``.

    Returns False (and leaves ``surface`` untouched) for ``none`` or an
    unknown id, so the caller falls back to its own fill.
    """
    if scene_id not in SCENES:
        if scene_id != NONE:
            logging.debug(f"Unknown scene {scene_id!r}, falling back to the plain background.")
        return False
    width, height = surface.get_size()
    paint.paint_ops(surface, scene_ops(scene_id, width, height), rng)
    return True
