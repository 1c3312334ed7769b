# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

import math
import threading
import time
from unittest.mock import patch

import numpy as np
import pytest

from waveforms import AlreadyRunningError, Waveform, WaveformConfigError, WaveformFlow


class TestWaveformInit:
    """Construction and parameter validation."""

    def test_default_init(self):
        wv = Waveform(50)

        assert wv.wavelength == 50.0
        assert wv.amplitude == 1.0
        assert wv.phase == 0.0

    def test_fresh_waveform_is_not_running(self):
        wv = Waveform(50, 1.0, 0.0)

        assert wv.running is False
        assert not wv.is_running()

    def test_state(self):
        wv = Waveform(100, 2.5, 0.5)

        assert wv.state == {"wavelength": 100.0, "amplitude": 2.5, "phase": 0.5, "running": False}

    @pytest.mark.parametrize("wavelength", [0, -1.0, math.inf, math.nan, "abc", None])
    def test_invalid_wavelength_raises(self, wavelength):
        with pytest.raises(WaveformConfigError):
            Waveform(wavelength)

    @pytest.mark.parametrize("field", ["amplitude", "phase"])
    @pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan])
    def test_non_finite_parameters_raise(self, field, value):
        with pytest.raises(WaveformConfigError):
            Waveform(50, **{field: value})

    def test_negative_amplitude_is_accepted(self):
        wv = Waveform(50, -2.0)

        assert wv.square(1) == -2.0


class TestPointEvaluation:
    """Point evaluation through the Waveform methods."""

    def test_shape_methods(self, waveform):
        assert waveform.sine(13) == pytest.approx(0.99802, abs=1e-5)
        assert waveform.square(40) == -1.0
        assert waveform.triangle(40) == pytest.approx(-0.8, abs=1e-5)
        assert waveform.sawtooth(24) == pytest.approx(0.96, abs=1e-5)

    def test_evaluate_matches_shape_methods(self, waveform):
        for shape in ("sine", "square", "triangle", "sawtooth"):
            assert waveform.evaluate(shape, 7.0) == getattr(waveform, shape)(7.0)

    def test_evaluate_is_deterministic(self, waveform):
        assert waveform.evaluate("sine", 1.0) == waveform.evaluate("sine", 1.0)

    def test_evaluate_invalid_shape(self, waveform):
        with pytest.raises(WaveformConfigError):
            waveform.evaluate("noise", 1.0)

    def test_samples_over_grid(self, waveform):
        values = waveform.samples("square", 0, 50, 1)

        assert isinstance(values, np.ndarray)
        assert len(values) == 50
        assert np.all(values[:25] == 1.0)
        assert np.all(values[25:] == -1.0)

    def test_samples_invalid_step(self, waveform):
        with pytest.raises(ValueError):
            waveform.samples("sine", 0, 10, 0)


class TestFlowLifecycle:
    """Start/stop lifecycle of waveform flows."""

    def test_start_returns_flow_and_sets_running(self, waveform):
        flow = waveform.sine_flow(10)

        assert isinstance(flow, WaveformFlow)
        assert waveform.running
        assert waveform.state["running"] is True

    def test_double_start_raises(self, waveform):
        waveform.sine_flow(10)

        with pytest.raises(AlreadyRunningError):
            waveform.square_flow(10)

        assert waveform.running

    def test_stop_never_started(self, waveform):
        # Should not crash or block when stopping before starting
        waveform.stop_flow()

        assert not waveform.running

    def test_double_stop(self, waveform):
        waveform.triangle_flow(10)

        waveform.stop_flow()
        waveform.stop_flow()

        assert not waveform.running

    def test_stop_closes_flow(self, waveform):
        flow = waveform.sawtooth_flow(10)

        waveform.stop_flow()

        assert flow.closed
        assert flow.join(timeout=1.0)

    def test_restart_after_stop(self, waveform):
        first = waveform.sine_flow(10)
        waveform.stop_flow()

        second = waveform.sine_flow(10)

        assert second is not first
        assert waveform.running
        assert second.get(timeout=1.0) is not None

    def test_invalid_interval_leaves_waveform_idle(self, waveform):
        for interval in (0, -10, 1.5, True, "10"):
            with pytest.raises(WaveformConfigError):
                waveform.sine_flow(interval)

        assert not waveform.running

    def test_invalid_shape_leaves_waveform_idle(self, waveform):
        with pytest.raises(WaveformConfigError):
            waveform.start_flow("noise", 10)

        assert not waveform.running

    def test_concurrent_starts_have_one_winner(self, waveform):
        n_threads = 8
        barrier = threading.Barrier(n_threads)
        results = []
        results_lock = threading.Lock()

        def starter():
            barrier.wait()
            try:
                waveform.sine_flow(10)
                outcome = "started"
            except AlreadyRunningError:
                outcome = "rejected"
            with results_lock:
                results.append(outcome)

        threads = [threading.Thread(target=starter) for _ in range(n_threads)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5.0)

        assert results.count("started") == 1
        assert results.count("rejected") == n_threads - 1

    def test_flow_context_manager(self, waveform):
        with waveform.flow("triangle", 5) as values:
            assert waveform.running
            value = next(values)

        assert -1.0 <= value <= 1.0
        assert not waveform.running
        assert values.closed

    def test_flow_samples_current_time_in_millis(self, waveform):
        with patch("waveforms.flow.now_millis", return_value=13.0):
            flow = waveform.sine_flow(1)
            value = flow.get(timeout=1.0)

        assert value == pytest.approx(0.99802, abs=1e-5)

    def test_restart_after_flow_with_block(self, waveform):
        with waveform.sine_flow(10) as values:
            next(values)

        assert values.closed
        assert not waveform.running

        restarted = waveform.sine_flow(10)
        assert waveform.running
        assert restarted.get(timeout=1.0) is not None

    def test_restart_after_flow_stopped_directly(self, waveform):
        flow = waveform.square_flow(10)
        flow.stop()

        assert not waveform.running
        assert waveform.state["running"] is False

        waveform.square_flow(10)
        assert waveform.running

    def test_restart_after_producer_failure(self, waveform):
        with patch("waveforms.flow.now_millis", side_effect=ArithmeticError("clock failure")):
            flow = waveform.triangle_flow(1)
            assert flow.join(timeout=1.0)

        assert flow.closed
        assert not waveform.running

        waveform.triangle_flow(1)
        assert waveform.running

    def test_stop_after_flow_ended_by_itself(self, waveform):
        flow = waveform.sawtooth_flow(10)
        flow.stop()

        # Should not crash or block
        waveform.stop_flow()

        assert not waveform.running

class TestFlowValues:
    """One second flows at 10 ms, sampled against the wall clock."""

    def _collect(self, waveform, shape, duration=1.0):
        flow = waveform.start_flow(shape, 10)
        values = []

        def consume():
            for v in flow:
                values.append(v)

        consumer = threading.Thread(target=consume, daemon=True)
        consumer.start()
        time.sleep(duration)
        waveform.stop_flow()
        consumer.join(timeout=1.0)

        assert not consumer.is_alive()
        return values

    @pytest.mark.parametrize("shape", ["sine", "triangle", "sawtooth"])
    def test_values_strictly_within_amplitude(self, slow_waveform, shape):
        values = self._collect(slow_waveform, shape)

        assert len(values) > 0
        assert min(values) > -slow_waveform.amplitude
        assert max(values) < slow_waveform.amplitude

    def test_square_values_within_amplitude(self, slow_waveform):
        values = self._collect(slow_waveform, "square")

        assert len(values) > 0
        assert set(values) <= {-1.0, 1.0}
