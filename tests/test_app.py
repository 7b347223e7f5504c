import random

import pytest

import marfa_particles


def parse(*argv):
    return marfa_particles.build_parser().parse_args(list(argv))


def test_build_config_defaults():
    config = marfa_particles.build_config(parse(), random.Random(0))
    assert config.shape_type == "saguaro"


def test_build_config_preset_then_overrides():
    args = parse("--preset", "night", "--shape", "coyote", "--particles", "20")
    config = marfa_particles.build_config(args, random.Random(0))
    assert config.scene_type == "starry-night"
    assert config.shape_type == "coyote"
    assert config.particle_count == 20


def test_bad_color_is_a_usage_error(capsys):
    with pytest.raises(SystemExit):
        marfa_particles.main(["--particle-color", "orange", "--headless", "--frames", "1"])
    assert "particle_color" in capsys.readouterr().err


def test_headless_needs_frames():
    with pytest.raises(SystemExit):
        marfa_particles.main(["--headless"])


def test_headless_run_writes_outputs(tmp_path, capsys):
    png = tmp_path / "last.png"
    html = tmp_path / "art.html"
    marfa_particles.main(
        ["--headless", "--frames", "3", "--seed", "1", "--shape", "desert-star", "--snapshot", str(png), "--export", str(html)]
    )
    assert png.read_bytes().startswith(b"\x89PNG")
    assert "MarfaEngine" in html.read_text(encoding="utf-8")
    assert "Time taken for 3 frames" in capsys.readouterr().out


def test_next_index(tmp_path, monkeypatch):
    monkeypatch.setattr(marfa_particles, "OUTPUT_DIR", str(tmp_path))
    assert marfa_particles.next_index("marfa", ".png") == 0
    (tmp_path / "marfa_0004.png").write_bytes(b"")
    assert marfa_particles.next_index("marfa", ".png") == 5
