# Configuration file for marfa_particles.py

import math
import numbers
import re
from dataclasses import asdict, dataclass, fields, replace

import scenes
import shapes

# Display settings
WIDTH = 600
HEIGHT = None  # If None, same as WIDTH (square canvas)
FPS = 60

# Recording settings
RECORD = False
OUTPUT_FILE = "marfa.mp4"
FRAME_LIMIT = 0  # 0 runs until the window is closed
OUTPUT_DIR = "output"

# Physics settings
SPRING = 0.02
DAMPING = 0.92
REPULSION_RADIUS = 450
REPULSION_POWER = 120
JITTER = 1.0  # jitter per axis is (random() - 0.5) * push * JITTER

# Render settings
CONNECTION_ALPHA = 0.7
CONNECTION_WIDTH = 1.5
TRAIL_ALPHA = 0.6
TRAIL_WIDTH = 2.5
# (glow threshold, blur per unit of glow, radius pad, alpha)
GLOW_TIERS = (
    (0, 40, 2, 1.0),
    (1, 60, 4, 0.6),
    (2, 80, 6, 0.4),
)

HEIGHT = HEIGHT or WIDTH

GRADIENT_TYPES = ("solid", "radial", "linear")

# Slider ranges, shown in the CLI help
LIMITS = {
    "particle_count": (5, 30),
    "trail_length": (20, 100),
    "glow_intensity": (0.0, 3.0),
    "particle_size": (1.0, 8.0),
    "animation_speed": (0.1, 1.0),
    "connection_distance": (0, 200),
}

DESERT_COLORS = ["#ffa500", "#ff6b35", "#d4a574", "#8b4513", "#cd853f", "#daa520"]

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class SimulationConfig:
    particle_color: str = "#ffa500"
    background_color: str = "#1a0f0a"
    background_color2: str = "#4a2c1a"
    gradient_type: str = "radial"
    particle_count: int = 15
    trail_length: int = 60
    glow_intensity: float = 1.5
    particle_size: float = 3.0
    animation_speed: float = 0.3
    shape_type: str = "saguaro"
    connection_distance: float = 0.0
    scene_type: str = scenes.NONE

    def validate(self):
        for name in ("particle_color", "background_color", "background_color2"):
            value = getattr(self, name)
            if not isinstance(value, str) or not _HEX_COLOR.match(value):
                raise ConfigError(f"{name} must be a #rrggbb color, got {value!r}")
        if self.gradient_type not in GRADIENT_TYPES:
            raise ConfigError(f"gradient_type must be one of {GRADIENT_TYPES}, got {self.gradient_type!r}")
        if self.shape_type not in shapes.SHAPES:
            raise ConfigError(f"unknown shape_type {self.shape_type!r}")
        if self.scene_type != scenes.NONE and self.scene_type not in scenes.SCENES:
            raise ConfigError(f"unknown scene_type {self.scene_type!r}")
        for name in ("particle_count", "trail_length"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value < 0:
                raise ConfigError(f"{name} must be a non-negative integer, got {value!r}")
        for name in ("glow_intensity", "particle_size", "animation_speed", "connection_distance"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value) or value < 0:
                raise ConfigError(f"{name} must be a non-negative number, got {value!r}")
        if self.particle_size == 0:
            raise ConfigError("particle_size must be positive")
        return self

    def replace(self, **changes):
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise ConfigError(f"unknown config fields: {sorted(unknown)}")
        return replace(self, **changes).validate()

    def to_dict(self):
        """The external (camelCase) spelling of the config."""
        return {_CAMEL[name]: value for name, value in asdict(self).items()}

    @classmethod
    def from_dict(cls, data):
        """Restore a config saved with ``to_dict``.

        Accepts camelCase or snake_case keys, ignores keys it does not know and
        fills missing ones from the defaults.
        """
        values = {}
        for key, value in data.items():
            name = _SNAKE.get(key, key)
            if name in _CAMEL:
                values[name] = value
        if values.get("scene_type") is None:
            values["scene_type"] = scenes.NONE
        return cls(**values).validate()


def _camel(name):
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


_CAMEL = {f.name: _camel(f.name) for f in fields(SimulationConfig)}
_SNAKE = {camel: name for name, camel in _CAMEL.items()}


# Named looks. A preset without a scene_type keeps
# the current one.
PRESETS = {
    "sunset": dict(
        particle_color="#ff6b35",
        background_color="#ff4500",
        background_color2="#8b0000",
        gradient_type="linear",
        glow_intensity=2.0,
        connection_distance=0,
        scene_type="sunset-sky",
    ),
    "night": dict(
        particle_color="#ffa500",
        background_color="#000428",
        background_color2="#004e92",
        gradient_type="radial",
        glow_intensity=2.5,
        connection_distance=80,
        scene_type="starry-night",
    ),
    "desert": dict(
        particle_color="#daa520",
        background_color="#8b4513",
        background_color2="#d2691e",
        gradient_type="radial",
        glow_intensity=1.5,
        connection_distance=0,
        scene_type="desert-landscape",
    ),
    "cactus": dict(
        particle_color="#228b22",
        background_color="#f4a460",
        background_color2="#cd853f",
        gradient_type="linear",
        glow_intensity=1.2,
        connection_distance=60,
        scene_type=scenes.NONE,
    ),
    "marfa": dict(
        particle_color="#ffa500",
        background_color="#191970",
        background_color2="#4b0082",
        gradient_type="radial",
        glow_intensity=3.0,
        connection_distance=100,
        scene_type=scenes.NONE,
    ),
    "heat": dict(
        particle_color="#ff0000",
        background_color="#ffe4b5",
        background_color2="#ffdead",
        gradient_type="radial",
        glow_intensity=1.8,
        connection_distance=0,
        scene_type="tumbleweed-desert",
    ),
}


def apply_preset(config, name):
    try:
        preset = dict(PRESETS[name])
    except KeyError:
        raise ConfigError(f"unknown preset {name!r}, expected one of {sorted(PRESETS)}") from None
    if not preset.get("scene_type"):
        preset.pop("scene_type", None)
    return config.replace(**preset)


def _random_hex(rng):
    return "#" + format(rng.randrange(0x1000000), "06x")


def randomize(rng):
    """A random design: one of the desert colors, a random shape and scene."""
    return SimulationConfig(
        particle_color=rng.choice(DESERT_COLORS),
        background_color=_random_hex(rng),
        background_color2=_random_hex(rng),
        gradient_type=rng.choice(GRADIENT_TYPES),
        particle_count=rng.randrange(10, 30),
        trail_length=rng.randrange(40, 100),
        glow_intensity=rng.random() * 2.5 + 0.5,
        particle_size=rng.random() * 3 + 2,
        animation_speed=rng.random() * 0.5 + 0.2,
        shape_type=rng.choice(sorted(shapes.SHAPES)),
        connection_distance=rng.randrange(50, 150) if rng.random() > 0.5 else 0,
        scene_type=rng.choice((scenes.NONE,) + tuple(scenes.SCENES)),
    ).validate()
