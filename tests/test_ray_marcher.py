import logging
import math

import numpy as np
import pytest

from Light_Bake.engine.backend.dispatch import LightDispatcher
from Light_Bake.engine.lights import LightKind, LightPlacement, LightProfile
from Light_Bake.engine.obstacles import Obstacle, ObstacleSet
from Light_Bake.engine.ray_marcher import MarchOptions, RayMarcher, fan_angles, reflect


def _light(rays=1, span=0.0, brightness=100.0, rotation=0.0, position=(0.0, 0.0)):
    profile = LightProfile(LightKind.POINT, rays, span, brightness)
    return LightPlacement(profile, position, rotation=rotation, color=2)


def _wall(x, reflectance=0.0, opacity=100.0):
    return Obstacle(x, -5.0, x, 5.0, opacity=opacity, reflectance=reflectance)


def test_single_ray_hits_wall():
    obstacles = ObstacleSet([_wall(10.0)])
    light = _light(rays=1, span=360.0, rotation=180.0)
    events = RayMarcher(MarchOptions()).cast_rays([light], obstacles)
    assert len(events) == 1
    assert events[0].position == pytest.approx((10.0, 0.0), abs=0.25)
    assert events[0].brightness == 100.0
    assert events[0].color == 2


def test_energy_decays_per_bounce():
    obstacles = ObstacleSet([_wall(10.0, 50.0), _wall(-10.0, 50.0)])
    events = RayMarcher(MarchOptions(max_reflections=5)).cast_rays(
        [_light()], obstacles
    )
    assert [e.brightness for e in events] == pytest.approx(
        [100 * 0.5 ** (k + 1) for k in range(6)]
    )
    assert [round(e.position[0]) for e in events] == [10, -10, 10, -10, 10, -10]


def test_minimum_brightness_stops_ray():
    obstacles = ObstacleSet([_wall(10.0, 50.0), _wall(-10.0, 50.0)])
    events = RayMarcher(MarchOptions(min_brightness=20.0)).cast_rays(
        [_light()], obstacles
    )
    assert [e.brightness for e in events] == pytest.approx([50.0, 25.0, 12.5])


def test_transparent_obstacle_passes_ray_undeviated():
    obstacles = ObstacleSet([_wall(10.0, 50.0, opacity=0.0), _wall(20.0)])
    events = RayMarcher(MarchOptions()).cast_rays([_light()], obstacles)
    assert [e.position[0] for e in events] == pytest.approx([10.0, 20.0])
    assert [e.brightness for e in events] == pytest.approx([50.0, 50.0])


def test_ray_leaving_scene_emits_nothing():
    obstacles = ObstacleSet([_wall(10.0)])
    assert RayMarcher().cast_ray((0.0, 0.0), math.pi, 100.0, 0, obstacles) == []


def test_undefined_reflectance_warns_and_absorbs(caplog):
    obstacles = ObstacleSet([Obstacle(10, -5, 10, 5, reflectance=None)])
    with caplog.at_level(logging.WARNING):
        events = RayMarcher(MarchOptions()).cast_rays([_light()], obstacles)
    assert [e.brightness for e in events] == [100.0]
    assert "undefined reflectance" in caplog.text


def test_no_obstacles_warns(caplog):
    with caplog.at_level(logging.WARNING):
        assert RayMarcher().cast_rays([_light()], ObstacleSet()) == []
    assert "no scene obstacles" in caplog.text


def test_fan_angles_span_the_light():
    angles = fan_angles(360.0, 4, 0.0)
    assert angles == pytest.approx([-math.pi, -math.pi / 2, 0.0, math.pi / 2])


def test_reflect_about_segment_normal():
    assert reflect([1.0, 0.0], [0.0, 10.0]) == pytest.approx([-1.0, 0.0])
    assert reflect([1.0, -1.0], [4.0, 0.0]) == pytest.approx([1.0, 1.0])


def test_reflect_zero_length_segment_keeps_direction():
    assert np.array_equal(reflect([0.6, 0.8], [0.0, 0.0]), [0.6, 0.8])


def test_parallel_dispatch_matches_sequential():
    obstacles = ObstacleSet([_wall(10.0, 50.0), _wall(-10.0, 50.0)])
    lights = [
        _light(rays=8, span=60.0, position=(0.0, y), rotation=r)
        for y, r in [(0.0, 0.0), (1.0, 180.0), (-1.0, 10.0)]
    ]
    marcher = RayMarcher(MarchOptions())
    sequential = marcher.cast_rays(lights, obstacles)
    with LightDispatcher(2) as dispatcher:
        parallel = marcher.cast_rays(lights, obstacles, dispatcher)
    assert parallel == sequential
