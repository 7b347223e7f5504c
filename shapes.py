"""
Figure paths for the particle sculptor.

Every shape is a *recipe*: a tuple of segment instructions that
``generate_path`` expands into an ordered list of ``(x, y)`` points around a
center.  The recipe is the only description of a shape; the live simulation
and the HTML exporter both expand the same recipe.

Segments
  Line     count points stepping (dx, dy) from an offset
  Ellipse  count points on an ellipse arc, angle = start + i / divisor * sweep
  Wave     a horizontal run whose y is a sum of sines of the index
  Polar    a radial curve r = base + slope * i + sum(a * sin(f * angle|index))
  Ray      points along a fixed angle, r = base + step * i - |i - fold| * fold_slope
  Star     alternating outer/inner radius vertices
"""

import math
from typing import NamedTuple, Tuple

TAU = math.pi * 2


class Line(NamedTuple):
    count: int
    x0: float
    y0: float
    dx: float
    dy: float


class Ellipse(NamedTuple):
    count: int
    x0: float
    y0: float
    rx: float
    ry: float
    sweep: float = TAU
    divisor: int = 0  # 0 means "same as count"
    start: float = 0.0


class Wave(NamedTuple):
    count: int
    x0: float
    y0: float
    dx: float
    terms: Tuple[Tuple[float, float], ...] = ()


class Polar(NamedTuple):
    count: int
    base: float
    x0: float = 0.0
    y0: float = 0.0
    slope: float = 0.0
    terms: Tuple[Tuple[float, float, str], ...] = ()
    sweep: float = TAU


class Ray(NamedTuple):
    count: int
    angle: float
    base: float
    step: float
    fold: float = 0.0
    fold_slope: float = 0.0


class Star(NamedTuple):
    spikes: int
    outer: float
    inner: float
    rotation: float = -math.pi / 2


def _line(seg, cx, cy):
    for i in range(seg.count):
        yield (cx + seg.x0 + i * seg.dx, cy + seg.y0 + i * seg.dy)


def _ellipse(seg, cx, cy):
    divisor = seg.divisor or seg.count
    for i in range(seg.count):
        angle = seg.start + (i / divisor) * seg.sweep
        yield (
            cx + seg.x0 + math.cos(angle) * seg.rx,
            cy + seg.y0 + math.sin(angle) * seg.ry,
        )


def _wave(seg, cx, cy):
    for i in range(seg.count):
        offset = sum(amplitude * math.sin(frequency * i) for amplitude, frequency in seg.terms)
        yield (cx + seg.x0 + i * seg.dx, cy + seg.y0 + offset)


def _polar(seg, cx, cy):
    for i in range(seg.count):
        angle = (i / seg.count) * seg.sweep
        r = seg.base + seg.slope * i
        for amplitude, frequency, on in seg.terms:
            r += amplitude * math.sin(frequency * (angle if on == "angle" else i))
        yield (cx + seg.x0 + math.cos(angle) * r, cy + seg.y0 + math.sin(angle) * r)


def _ray(seg, cx, cy):
    for i in range(seg.count):
        r = seg.base + i * seg.step - abs(i - seg.fold) * seg.fold_slope
        yield (cx + math.cos(seg.angle) * r, cy + math.sin(seg.angle) * r)


def _star(seg, cx, cy):
    vertices = seg.spikes * 2
    for i in range(vertices):
        radius = seg.outer if i % 2 == 0 else seg.inner
        angle = (i / vertices) * TAU + seg.rotation
        yield (cx + math.cos(angle) * radius, cy + math.sin(angle) * radius)


_EXPANDERS = {
    Line: _line,
    Ellipse: _ellipse,
    Wave: _wave,
    Polar: _polar,
    Ray: _ray,
    Star: _star,
}


# Recipes


def _saguaro():
    return (
        Line(81, 0, -140, 0, 3),  # trunk
        Line(31, 0, -20, -2.5, 1.5),  # low left arm
        Line(41, -75, 25, 0, -2),
        Line(36, 0, -60, 2.3, 1.2),  # high right arm
        Line(51, 80, -18, 0, -2.5),
        Line(21, 0, 10, 1.8, 0.8),  # small right arm
        Line(26, 36, 26, 0, -2),
    )


def _coyote():
    return (
        Ellipse(40, -20, 30, 100, 50, sweep=math.pi * 0.6),  # body
        Line(31, -120, 80, 1.5, -4),  # neck, head up
        Line(16, -75, -40, 2, -1.5),  # snout
        Line(11, -90, -20, 1, -2.5),  # ears
        Line(16, -100, -45, 1.5, 2),  # back of head
        Line(26, -50, 50, 0, 1.8),  # front legs
        Line(21, -30, 50, 0, 2),
        Line(26, 40, 60, 0, 1.5),  # back legs
        Line(21, 60, 60, 0, 1.8),
        Ellipse(36, 80, 80, 50, -60, sweep=math.pi * 0.5, divisor=35),  # tail
    )


def _roadrunner():
    return (
        Ellipse(30, 0, 0, 60, 35),  # body
        Wave(41, 60, 10, 2, ((15, 0.2),)),  # tail feathers
        Line(16, -50, -20, 1, -1.5),  # neck
        Ellipse(20, -45, -40, 18, 15),  # head
        Line(21, -63, -42, -2, 0),  # beak
        Line(11, -35, -48, 1, -2),  # crest
        Line(31, -20, 35, 0, 2),  # legs
        Line(31, 10, 35, 0, 2),
    )


def _prickly_pear():
    pads = ((0, -40, 40, 55), (-35, 0, 45, 60), (35, 5, 42, 58), (0, 50, 38, 50))
    return tuple(Ellipse(30, x, y, w, h) for x, y, w, h in pads)


def _desert_flower():
    return (
        Ellipse(20, 0, 0, 20, 20),
        Polar(100, 50, terms=((60, 5, "angle"),)),
    )


def _tumbleweed():
    return (Polar(120, 70, terms=((35, 0.7, "index"), (20, 1.3, "index"))),)


def _mesa():
    width, height = 220, 90
    left = -width / 2
    right = width / 2
    return (
        Line(16, left, height, 3, -2),  # bottom slope
        Line(31, left + 45, height - 30, 0, -5),  # left cliff
        Line(41, left + 45, -height, 4, 0),  # flat top
        Line(31, right - 15, -height, 0, 5),  # right cliff
        Line(16, right - 15, height - 80, 3, 3),
    )


def _sand_dune():
    return (Wave(150, -180, -10, 2.4, ((50, math.pi * 3 / 150), (20, math.pi * 7 / 150))),)


def _desert_sun():
    rays = tuple(
        Ray(16, (ray / 12) * TAU, 45, (80 if ray % 2 == 0 else 60) / 15)
        for ray in range(12)
    )
    return (Ellipse(30, 0, 0, 40, 40),) + rays


def _crescent_moon():
    return (
        Ellipse(100, 25, 0, 95, 95, sweep=math.pi * 1.6),
        Ellipse(100, -5, 0, 75, 75, sweep=math.pi * 1.6),
    )


def _yucca():
    return tuple(Ray(26, (leaf / 12) * TAU, 30, 5, fold=12, fold_slope=2) for leaf in range(12))


def _agave():
    return (Polar(150, 25, slope=0.65, sweep=math.pi * 6),)


def _rock_formation():
    rocks = ((-40, -50, 45), (50, -40, 55), (0, 20, 60), (-60, 30, 35), (70, 35, 40))
    return tuple(Polar(25, r, x0=x, y0=y, terms=((8, 0.7, "index"),)) for x, y, r in rocks)


def _desert_star():
    return (Star(5, 130, 50),)


def _marfa_lights():
    orbs = ((-80, -30, 30), (-30, 20, 25), (30, -10, 35), (80, 25, 28), (0, -50, 20))
    return tuple(Ellipse(25, x, y, r, r) for x, y, r in orbs)


SHAPES = {}


def register_shape(shape_id, recipe):
    """Register ``recipe`` under ``shape_id``; later registrations win."""
    for segment in recipe:
        if type(segment) not in _EXPANDERS:
            raise TypeError(f"unsupported segment {segment!r} in shape {shape_id!r}")
    SHAPES[shape_id] = tuple(recipe)


for _shape_id, _build in (
    ("saguaro", _saguaro),
    ("prickly-pear", _prickly_pear),
    ("desert-flower", _desert_flower),
    ("tumbleweed", _tumbleweed),
    ("mesa", _mesa),
    ("sand-dune", _sand_dune),
    ("desert-sun", _desert_sun),
    ("crescent-moon", _crescent_moon),
    ("roadrunner", _roadrunner),
    ("coyote", _coyote),
    ("yucca", _yucca),
    ("agave", _agave),
    ("rock-formation", _rock_formation),
    ("desert-star", _desert_star),
    ("marfa-lights", _marfa_lights),
):
    register_shape(_shape_id, _build())


def recipe_for(shape_id):
    return SHAPES.get(shape_id, ())


def generate_path(shape_id, center_x, center_y):
    """Expand the recipe for ``shape_id`` around ``(center_x, center_y)``.

    Unknown identifiers produce an empty path.
    """
    points = []
    for segment in recipe_for(shape_id):
        points.extend(_EXPANDERS[type(segment)](segment, center_x, center_y))
    return points


def centroid(points):
    n = len(points)
    return (sum(p[0] for p in points) / n, sum(p[1] for p in points) / n)
