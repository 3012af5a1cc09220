import numpy as np
import pytest

from Light_Bake.engine.keyframes import Track
from Light_Bake.engine.shape import (
    OFFSCREEN,
    InheritMask,
    ParentBinding,
    Shape,
    rotate_vertices,
)

SQUARE = [(-0.5, -0.5), (0.5, -0.5), (0.5, 0.5), (-0.5, 0.5)]


def _shape(move=(0, 0), scale=(1, 1), rotate=0, color=(0, 100), **kwargs):
    return Shape(
        "s1",
        SQUARE,
        move=Track.constant(*move),
        scale=Track.constant(*scale),
        rotate=Track.constant(rotate),
        color=Track.constant(*color),
        **kwargs,
    )


def test_unspawned_shape_is_offscreen():
    state = _shape(spawn_time=2.0).evaluate(1.0)
    assert not state.spawned
    assert state.vertices.tolist() == [[OFFSCREEN, OFFSCREEN]]
    assert state.scale == (0.0, 0.0)
    assert state.opacity == 0.0


def test_scale_then_rotate_then_move():
    state = _shape(move=(10, 0), scale=(2, 1), rotate=90).evaluate(0.0)
    # (0.5, -0.5) -> scaled (1, -0.5) -> rotated (0.5, 1) -> moved (10.5, 1)
    assert state.vertices[1] == pytest.approx([10.5, 1.0])
    assert state.move == (10.0, 0.0)
    assert state.rotate == 90.0


def test_rotation_is_counter_clockwise():
    rotated = rotate_vertices(np.array([[1.0, 0.0]]), 90)
    assert rotated[0] == pytest.approx([0.0, 1.0])


def test_evaluation_is_idempotent():
    shape = Shape(
        "s1",
        SQUARE,
        move=Track.from_event({"k": [{"ev": [0, 0]}, {"t": 1.0, "ev": [4, 0]}]}),
        scale=Track(),
        rotate=Track(),
        color=Track(),
    )
    first = shape.evaluate(0.5).vertices.copy()
    shape.evaluate(1.0)
    shape.evaluate(0.25)
    assert np.array_equal(shape.evaluate(0.5).vertices, first)
    assert np.array_equal(shape.original_vertices, np.array(SQUARE))


def test_time_is_rebased_to_spawn_time():
    shape = Shape(
        "s1",
        SQUARE,
        move=Track.from_event({"k": [{"ev": [0, 0]}, {"t": 1.0, "ev": [10, 0]}]}),
        scale=Track(),
        rotate=Track(),
        color=Track(),
        spawn_time=2.0,
    )
    assert shape.evaluate(2.5).move == pytest.approx((5.0, 0.0))


def test_color_index_is_discrete_and_opacity_interpolates():
    shape = Shape(
        "s1",
        SQUARE,
        move=Track(),
        scale=Track(),
        rotate=Track(),
        color=Track.from_event({"k": [{"ev": [1, 0]}, {"t": 1.0, "ev": [5, 100]}]}),
    )
    state = shape.evaluate(0.5)
    assert state.color == 1
    assert state.opacity == pytest.approx(50.0)


def test_inherit_mask_parsing():
    assert InheritMask.from_string("101") == InheritMask(True, False, True)
    assert InheritMask.from_string(111) == InheritMask(True, True, True)
    assert InheritMask.from_string(None) == InheritMask()
    assert InheritMask.from_string("1") == InheritMask(move=True)


def _parent(mask):
    return ParentBinding(
        id="p",
        move=Track.constant(5, 5),
        scale=Track.constant(2, 2),
        rotate=Track.constant(90),
        mask=InheritMask.from_string(mask),
    )


def test_parent_move_only():
    state = _shape(parent=_parent("100")).evaluate(0.0)
    assert state.move == (5.0, 5.0)
    assert state.scale == (1.0, 1.0)
    assert state.rotate == 0.0
    assert state.vertices[0] == pytest.approx([4.5, 4.5])


def test_parent_all_channels():
    state = _shape(move=(1, 0), parent=_parent("111")).evaluate(0.0)
    assert state.scale == (2.0, 2.0)
    assert state.rotate == 90.0
    assert state.move == (6.0, 5.0)
    # child vertex (0.5, -0.5) -> moved (1.5, -0.5) -> parent scale (3, -1)
    # -> parent rotate (1, 3) -> parent move (6, 8)
    assert state.vertices[1] == pytest.approx([6.0, 8.0])


def test_parent_tracks_use_parent_spawn_time():
    parent = ParentBinding(
        id="p",
        move=Track.from_event({"k": [{"ev": [0, 0]}, {"t": 1.0, "ev": [10, 0]}]}),
        scale=Track(),
        rotate=Track(),
        spawn_time=1.0,
        mask=InheritMask.from_string("100"),
    )
    shape = _shape(parent=parent)
    assert shape.evaluate(1.5).move == pytest.approx((5.0, 0.0))
    assert shape.evaluate(0.5).move == pytest.approx((0.0, 0.0))


def test_from_events_pads_missing_tracks():
    shape = Shape.from_events("s1", SQUARE, [{"k": [{"ev": [3, 4]}]}])
    state = shape.evaluate(0.0)
    assert state.move == (3.0, 4.0)
    assert state.scale == (1.0, 1.0)
    assert state.opacity == 0.0
