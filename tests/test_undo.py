"""Tests for save / undo / erase / reset on interactive curves."""
import numpy as np
import pytest
from dataclasses import replace


@pytest.fixture
def shallow_config(small_config):
    from calcgraph.config import HistoryConfig
    return replace(small_config, history=HistoryConfig(max_undo=3))


def test_save_mutate_undo_round_trip(sine_curve):
    before_y = sine_curve.y.copy()
    before_types = sine_curve.point_types.copy()

    sine_curve.save()
    sine_curve.manipulate('triangle', 5, 4, 3)
    assert not np.allclose(sine_curve.y, before_y)

    sine_curve.undo()
    np.testing.assert_array_equal(sine_curve.y, before_y)
    np.testing.assert_array_equal(sine_curve.point_types, before_types)
    assert sine_curve.history_depth == 0


def test_undo_restores_saved_classification_without_reclassifying(small_flat_curve):
    from calcgraph.point import PointType
    small_flat_curve.manipulate('triangle', 5, 2, 2)
    small_flat_curve.save()
    small_flat_curve.smooth()
    assert small_flat_curve.cusps == []
    small_flat_curve.undo()
    assert [p.index for p in small_flat_curve.cusps] == [160, 200, 240]
    assert small_flat_curve.points[200].point_type is PointType.CUSP


def test_undo_with_empty_history_restores_initial(sine_curve):
    initial = sine_curve.y.copy()
    sine_curve.manipulate('shift', 1, 10)
    sine_curve.undo()
    np.testing.assert_array_equal(sine_curve.y, initial)
    sine_curve.undo()
    np.testing.assert_array_equal(sine_curve.y, initial)


def test_history_depth_is_bounded(shallow_config):
    from calcgraph.interactive import InteractiveCurve
    curve = InteractiveCurve(config=shallow_config)
    for value in range(1, 6):
        curve.save()
        curve.manipulate('shift', 5, value)
        assert curve.history_depth <= 3
    assert curve.history_depth == 3
    assert curve.value_at(5) == pytest.approx(5.0)

    # oldest saves (y = 0 and y = 1) were evicted
    restored = []
    for _ in range(4):
        curve.undo()
        restored.append(curve.value_at(5))
    assert restored == pytest.approx([4.0, 3.0, 2.0, 0.0])


def test_undo_fires_one_notification(sine_curve, notifications):
    sine_curve.save()
    notifications.listen(sine_curve)
    sine_curve.undo()
    assert notifications.count() == 1


def test_erase_keeps_history(small_flat_curve):
    small_flat_curve.manipulate('shift', 5, 2)
    small_flat_curve.save()
    small_flat_curve.erase()
    np.testing.assert_array_equal(small_flat_curve.y, 0.0)
    assert small_flat_curve.history_depth == 1
    small_flat_curve.undo()
    assert small_flat_curve.value_at(5) == pytest.approx(2.0)


def test_reset_is_idempotent(sine_curve, notifications):
    initial_y = sine_curve.y.copy()
    initial_types = sine_curve.point_types.copy()

    sine_curve.save()
    sine_curve.manipulate('hill', 3, 4, 2)
    sine_curve.save()

    notifications.listen(sine_curve)
    for _ in range(2):
        sine_curve.reset()
        np.testing.assert_array_equal(sine_curve.y, initial_y)
        np.testing.assert_array_equal(sine_curve.point_types, initial_types)
        assert sine_curve.history_depth == 0
        assert not sine_curve.was_manipulated
    assert notifications.count() == 2


def test_grid_never_changes(sine_curve):
    x = sine_curve.x.copy()
    sine_curve.save()
    sine_curve.manipulate('tilt', 9, 3)
    sine_curve.smooth()
    sine_curve.undo()
    sine_curve.reset()
    assert len(sine_curve) == 401
    np.testing.assert_array_equal(sine_curve.x, x)


def test_apply_function_is_undoable(small_flat_curve):
    small_flat_curve.apply_function(np.cos)
    assert small_flat_curve.value_at(0) == pytest.approx(1.0)
    assert small_flat_curve.history_depth == 1
    assert not small_flat_curve.was_manipulated
    small_flat_curve.undo()
    np.testing.assert_array_equal(small_flat_curve.y, 0.0)


def test_apply_function_at_positions_makes_cusps(small_flat_curve):
    small_flat_curve.apply_function(lambda x: x % 2, x_positions=[0, 1, 2, 3])
    assert small_flat_curve.value_at(1) == pytest.approx(1.0)
    assert small_flat_curve.value_at(1.5) == pytest.approx(0.5)
    assert [p.index for p in small_flat_curve.cusps] == [40, 80, 120]
