import json
import os

import pytest

from Light_Bake.config import Config, load_config


def test_load_from_file_accepts_aliases(tmp_path):
    cfg = tmp_path / "config.json"
    cfg.write_text(
        json.dumps({"maxReflections": 2, "simulationRate": 30, "endTime": 2.0})
    )
    Config.load_from_file(str(cfg))
    assert Config.max_reflections == 2
    assert Config.simulation_rate == 30
    assert Config.end_time == 2.0


def test_unknown_keys_are_ignored(tmp_path):
    cfg = tmp_path / "config.json"
    cfg.write_text(json.dumps({"not_an_option": 1}))
    Config.load_from_file(str(cfg))
    assert not hasattr(Config, "not_an_option")


def test_load_yaml(tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("buffer_precision: 0.5\nthread_count: 3\n")
    Config.load_from_file(str(cfg))
    assert Config.buffer_precision == 0.5
    assert Config.thread_count == 3


def test_nested_dicts_are_merged(tmp_path):
    Config.light_presets = {"cone": {"rays": 10, "span": 30}}
    cfg = tmp_path / "config.json"
    cfg.write_text(json.dumps({"light_presets": {"cone": {"rays": 20}}}))
    Config.load_from_file(str(cfg))
    assert Config.light_presets == {"cone": {"rays": 20, "span": 30}}


def test_relative_paths_resolve_against_config(tmp_path):
    cfg = tmp_path / "config.json"
    cfg.write_text(
        json.dumps({"level_file": "scene.vgd", "paths": {"output_dir": "baked"}})
    )
    Config.load_from_file(str(cfg))
    assert Config.level_file == str(tmp_path / "scene.vgd")
    assert Config.output_dir == os.path.abspath(tmp_path / "baked")


def test_missing_config_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config.load_from_file(str(tmp_path / "absent.json"))


def test_config_must_be_a_mapping(tmp_path):
    cfg = tmp_path / "config.json"
    cfg.write_text("[1, 2]")
    with pytest.raises(ValueError):
        Config.load_from_file(str(cfg))


def test_load_config_returns_data(tmp_path):
    cfg = tmp_path / "config.json"
    cfg.write_text(json.dumps({"random_seed": 11}))
    assert load_config(str(cfg)) == {"random_seed": 11}
    assert Config.random_seed == 11


def test_frame_range_covers_half_open_window():
    Config.simulation_rate = 60
    Config.start_time = 0.5
    Config.end_time = 1.0
    frames = Config.frame_range()
    assert (frames.start, frames.stop) == (30, 60)
    assert len(frames) == 30
