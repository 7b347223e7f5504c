import random

import pytest

import config
import scenes
import shapes
from config import ConfigError, SimulationConfig


def test_defaults_are_valid():
    assert SimulationConfig().validate() == SimulationConfig()


@pytest.mark.parametrize(
    "changes",
    [
        {"particle_color": "orange"},
        {"background_color": "#12345"},
        {"gradient_type": "conic"},
        {"shape_type": "jackalope"},
        {"scene_type": "moon-base"},
        {"particle_count": -1},
        {"particle_count": 2.5},
        {"trail_length": True},
        {"glow_intensity": float("nan")},
        {"animation_speed": -0.1},
        {"particle_size": 0},
    ],
)
def test_invalid_values_are_rejected(changes):
    with pytest.raises(ConfigError):
        SimulationConfig().replace(**changes)


def test_replace_rejects_unknown_fields():
    with pytest.raises(ConfigError):
        SimulationConfig().replace(sparkle=True)


def test_replace_returns_new_config():
    base = SimulationConfig()
    changed = base.replace(particle_count=20)
    assert changed.particle_count == 20
    assert base.particle_count == 15


def test_dict_round_trip_uses_camel_case():
    saved = SimulationConfig(shape_type="coyote", scene_type="prada-marfa", connection_distance=80)
    data = saved.to_dict()
    assert data["shapeType"] == "coyote"
    assert data["backgroundColor2"] == saved.background_color2
    assert data["connectionDistance"] == 80
    assert SimulationConfig.from_dict(data) == saved


def test_from_dict_fills_missing_scene():
    data = SimulationConfig().to_dict()
    del data["sceneType"]
    assert SimulationConfig.from_dict(data).scene_type == scenes.NONE
    data["sceneType"] = None
    assert SimulationConfig.from_dict(data).scene_type == scenes.NONE


def test_from_dict_accepts_snake_case_and_ignores_extras():
    restored = SimulationConfig.from_dict({"shape_type": "mesa", "walletAddress": "0xabc"})
    assert restored.shape_type == "mesa"


def test_from_dict_validates():
    with pytest.raises(ConfigError):
        SimulationConfig.from_dict({"shapeType": "jackalope"})


@pytest.mark.parametrize("name", sorted(config.PRESETS))
def test_presets_apply(name):
    result = config.apply_preset(SimulationConfig(), name)
    preset = config.PRESETS[name]
    assert result.particle_color == preset["particle_color"]
    assert result.scene_type == preset["scene_type"]


def test_unknown_preset():
    with pytest.raises(ConfigError):
        config.apply_preset(SimulationConfig(), "tundra")


def test_randomize_is_valid_and_seeded():
    for seed in range(50):
        design = config.randomize(random.Random(seed))
        assert design.validate() is design
        assert design.particle_color in config.DESERT_COLORS
        assert design.shape_type in shapes.SHAPES
        assert 10 <= design.particle_count < 30
        assert 0.2 <= design.animation_speed <= 0.7
    assert config.randomize(random.Random(3)) == config.randomize(random.Random(3))


def test_height_defaults_to_width():
    assert config.HEIGHT == config.WIDTH
