"""Tests for GrapherModel: propagation, predict mode, presets and readouts."""
import math

import numpy as np
import pytest

from calcgraph.numerics.manipulation import ManipulationMode


def _listen_all(model, notifications):
    notifications.listen(model.original_curve, 'original')
    notifications.listen(model.derivative_curve, 'derivative')
    notifications.listen(model.second_derivative_curve, 'second')
    notifications.listen(model.integral_curve, 'integral')


class TestPropagation:

    def test_hill_updates_whole_chain(self, model):
        model.begin_gesture()
        model.manipulate(15, 5, mode=ManipulationMode.HILL, width=2)

        assert model.original_curve.value_at(15) == pytest.approx(5.0)
        assert model.original_curve.value_at(13) == pytest.approx(0.0, abs=0.01)
        assert model.original_curve.value_at(17) == pytest.approx(0.0, abs=0.01)
        assert model.derivative_curve.value_at(15) == pytest.approx(0.0, abs=1e-9)
        # a Gaussian of height 5 and spread 1/sqrt(2) has area 5 * sqrt(pi / 2)
        assert model.integral_curve.value_at(30) == pytest.approx(5 * math.sqrt(math.pi / 2), rel=1e-6)

    def test_notification_order(self, model, notifications):
        _listen_all(model, notifications)
        model.manipulate(10, 2)
        assert notifications.calls == ['original', 'derivative', 'second', 'integral']

    def test_chain_is_consistent_inside_listeners(self, model):
        seen = []

        def check():
            seen.append(model.integral_curve.value_at(30))

        model.integral_curve.add_listener(check)
        model.manipulate(15, 1, mode='shift')
        assert seen == [pytest.approx(30.0)]

    def test_second_derivative_of_hill_is_negative_at_peak(self, model):
        model.manipulate(15, 5, mode='hill', width=4)
        assert model.second_derivative_curve.value_at(15) < 0

    def test_triangle_cusps_break_derivative(self, model):
        model.manipulate(10, 3, mode='triangle', width=4)
        for x in (8, 10, 12):
            assert model.original_curve.closest_point_at(x).is_cusp
            assert math.isnan(model.derivative_curve.value_at(x))
        assert model.derivative_curve.value_at(9) == pytest.approx(1.5)
        assert model.derivative_curve.value_at(11) == pytest.approx(-1.5)


class TestPredictMode:

    def test_predict_curve_is_transformed(self, model, notifications):
        _listen_all(model, notifications)
        model.predict_mode_enabled = True
        assert model.curve_to_transform is model.predict_curve

        model.manipulate(15, 3, mode='shift')
        assert model.predict_curve.value_at(15) == pytest.approx(3.0)
        np.testing.assert_array_equal(model.original_curve.y, 0.0)
        assert notifications.calls == []

    def test_predict_undo(self, model):
        model.predict_mode_enabled = True
        model.begin_gesture()
        model.manipulate(15, 3, mode='shift')
        model.undo()
        np.testing.assert_array_equal(model.predict_curve.y, 0.0)


class TestEntryPoints:

    def test_width_is_clamped(self, model):
        model.width = 100
        assert model.width == 15.0
        model.width = 0
        assert model.width == 1.0
        model.width = 6
        assert model.width == 6.0

    def test_smoothing_is_undoable(self, model):
        model.begin_gesture()
        model.manipulate(15, 3, mode='triangle', width=4)
        before = model.original_curve.y.copy()
        before_derivative = model.derivative_curve.y.copy()

        model.smooth()
        assert model.original_curve.cusps == []
        model.undo()

        np.testing.assert_array_equal(model.original_curve.y, before)
        np.testing.assert_array_equal(model.derivative_curve.y, before_derivative)

    def test_erase_is_undoable(self, model):
        model.manipulate(15, 3, mode='shift')
        model.erase()
        np.testing.assert_array_equal(model.original_curve.y, 0.0)
        np.testing.assert_array_equal(model.integral_curve.y, 0.0)
        model.undo()
        assert model.original_curve.value_at(4) == pytest.approx(3.0)
        assert model.integral_curve.value_at(4) == pytest.approx(12.0)

    def test_reset(self, model):
        model.mode = ManipulationMode.TRIANGLE
        model.width = 7
        model.begin_gesture()
        model.manipulate(10, 3)
        model.predict_mode_enabled = True
        model.manipulate(10, 3)

        model.reset()

        assert model.mode is ManipulationMode.HILL
        assert model.width == model.config.manipulation.width_default
        assert not model.predict_mode_enabled
        for curve in (model.original_curve, model.predict_curve):
            np.testing.assert_array_equal(curve.y, 0.0)
            assert curve.history_depth == 0
            assert not curve.was_manipulated
        np.testing.assert_array_equal(model.derivative_curve.y, 0.0)
        np.testing.assert_array_equal(model.second_derivative_curve.y, 0.0)


class TestPresets:

    def test_presets_load_and_undo(self, model):
        preset = model.apply_preset(0)
        assert preset.name == 'sine'
        x = model.original_curve.x
        np.testing.assert_allclose(model.original_curve.y, preset.function(x))
        assert not model.original_curve.was_manipulated

        model.undo()
        np.testing.assert_array_equal(model.original_curve.y, 0.0)
        np.testing.assert_array_equal(model.derivative_curve.y, 0.0)

    def test_index_wraps(self, model):
        assert model.apply_preset(len(model.presets)).name == model.presets[0].name
        assert model.apply_preset(-1).name == model.presets[-1].name

    def test_cycle(self, model):
        names = [model.cycle_preset().name for _ in range(3)]
        assert names == [p.name for p in model.presets[:3]]
        assert model.cycle_preset(-1).name == model.presets[1].name

    def test_cycle_backwards_from_start(self, model):
        assert model.cycle_preset(-1).name == model.presets[-1].name

    def test_coarse_preset_has_cusps(self, model):
        names = [p.name for p in model.presets]
        model.apply_preset(names.index('quadratic_cosine_coarse'))
        assert len(model.original_curve.cusps) > 0
        for point in model.original_curve.cusps:
            assert math.isnan(model.derivative_curve.y[point.index])

    @pytest.mark.parametrize("index", range(10))
    def test_integral_is_zero_at_origin(self, model, index):
        model.apply_preset(index)
        assert model.integral_curve.value_at(0) == 0.0
        assert model.area_under_curve(0) == 0.0
        assert len(model.integral_curve) == len(model.original_curve)


class TestReadouts:

    @pytest.fixture
    def tilted(self, model):
        model.manipulate(25, 5, mode='tilt')
        return model

    def test_readout(self, tilted):
        readout = tilted.readout(20)
        assert readout.x == 20
        assert readout.original == pytest.approx(2.5)
        assert readout.derivative == pytest.approx(0.5)
        assert readout.second_derivative == pytest.approx(0.0, abs=1e-9)
        # integral of 0.5 (x - 15) from 0 to 20
        assert readout.integral == pytest.approx(-50.0)

    def test_readout_outside_domain(self, tilted):
        readout = tilted.readout(-1)
        assert math.isnan(readout.original)
        assert math.isnan(readout.derivative)
        assert math.isnan(readout.integral)

    def test_tangent(self, tilted):
        y, slope = tilted.tangent_at(20)
        assert y == pytest.approx(2.5)
        assert slope == pytest.approx(0.5)
        assert tilted.tangent_line(20, 22) == pytest.approx(3.5)

    def test_tangent_at_cusp_is_undefined(self, model):
        model.manipulate(10, 3, mode='triangle', width=4)
        assert math.isnan(model.tangent_line(10, 11))

    def test_area_under_curve(self, tilted):
        assert tilted.area_under_curve(15) == pytest.approx(-56.25)
