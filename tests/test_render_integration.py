import json

import pytest

from Light_Bake.config import Config
from Light_Bake.engine.render import render_level
from Light_Bake.level.model import LevelModel
from tests.levels import static_object, wall_level


@pytest.fixture
def small_render(output_dir):
    Config.buffer_precision = 1.0
    Config.light_presets = {"point": {"rays": 1}}
    Config.start_time = 0.0
    Config.end_time = 2 / 60
    Config.random_seed = 5
    Config.preview_size = 16
    return output_dir


def test_wall_scene_bakes_one_point(small_render):
    level = LevelModel.from_dict(wall_level())
    result = render_level(level)

    assert result.frames == 2
    assert result.collisions == 2
    assert level.prefabs == [result.prefab]
    parent, point = result.objects
    assert parent["n"] == "Scene Parent"
    assert point["n"] == "Pixel | x:10, y:0"
    assert point["e"][3]["k"] == [
        {"ev": [3, 0]},
        {"t": pytest.approx(1 / 60), "ct": "Instant", "ev": [3, 80.0, 3]},
    ]
    assert json.dumps(point["e"][3]["k"][1]["ev"]) == "[3, 80.0, 3]"
    assert result.prefab["preview"]


def test_render_is_reproducible_with_seed(small_render):
    first = render_level(LevelModel.from_dict(wall_level())).prefab
    second = render_level(LevelModel.from_dict(wall_level())).prefab
    assert first == second


def test_scene_without_lights_renders_empty(small_render):
    level = LevelModel.from_dict({"objects": [static_object("w", "SCENE wall")]})
    result = render_level(level)
    assert result.objects[1:] == []
    assert result.collisions == 0


def test_frame_log_writes_records(small_render):
    Config.frame_log = True
    render_level(LevelModel.from_dict(wall_level()))

    frames = (small_render / "frame_log.jsonl").read_text().splitlines()
    assert [json.loads(line)["frame"] for line in frames] == [0, 1]
    assert json.loads(frames[0])["collisions"] == 1
    metrics = (small_render / "metrics.csv").read_text().splitlines()
    assert len(metrics) == 3
    (summary,) = (small_render / "render_log.jsonl").read_text().splitlines()
    assert json.loads(summary)["objects"] == 2


def test_preview_can_be_disabled(small_render):
    Config.embed_preview = False
    result = render_level(LevelModel.from_dict(wall_level()))
    assert result.prefab["preview"] == ""
