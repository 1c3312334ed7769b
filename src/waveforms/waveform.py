# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

import math
import threading
from contextlib import contextmanager
from functools import partial

import numpy as np

from .errors import AlreadyRunningError, WaveformConfigError
from .flow import WaveformFlow
from .logger import Logger
from .shapes import WaveShape, get_shape

logger = Logger("Waveform")


class Waveform:
    """
    Periodic waveform defined by wavelength, amplitude and phase.

    A Waveform can be evaluated at any point in time with one of the supported
    shapes ("sine", "square", "triangle", "sawtooth"), or it can run a flow: a
    background producer that samples the waveform at the current wall-clock time
    (in milliseconds) at a fixed interval and streams the values to a consumer.

    Only one flow can be active per Waveform at a time.

    Example:
        ```python
        wv = Waveform(wavelength=1000, amplitude=1.0, phase=0.0)
        flow = wv.sine_flow(10)
        for value in flow:
            print(value)
            if value > 0.99:
                wv.stop_flow()
        ```
    """

    def __init__(self, wavelength: float, amplitude: float = 1.0, phase: float = 0.0):
        """
        Initialize the waveform.

        Args:
            wavelength (float): Period length, in the same unit as the time values (ms for flows).
            amplitude (float): Peak value of the waveform (default: 1.0).
            phase (float): Time offset of the waveform origin (default: 0.0).

        Raises:
            WaveformConfigError: If the wavelength is not a finite positive number, or
                if amplitude or phase are not finite numbers.
        """
        self._wavelength = _to_finite_float("wavelength", wavelength)
        if self._wavelength <= 0.0:
            raise WaveformConfigError(f"Invalid wavelength '{wavelength}'. Must be positive")
        self._amplitude = _to_finite_float("amplitude", amplitude)
        self._phase = _to_finite_float("phase", phase)

        self._flow_lock = threading.Lock()
        self._flow: WaveformFlow | None = None

    @property
    def wavelength(self) -> float:
        return self._wavelength

    @property
    def amplitude(self) -> float:
        return self._amplitude

    @property
    def phase(self) -> float:
        return self._phase

    @property
    def running(self) -> bool:
        """Whether a flow is currently active on this waveform."""
        return self._flow is not None and not self._flow.closed

    def is_running(self) -> bool:
        return self.running

    @property
    def state(self) -> dict:
        """
        Get current waveform state.

        Returns:
            dict: Dictionary containing wavelength, amplitude, phase and running flag.
        """
        return {
            "wavelength": self._wavelength,
            "amplitude": self._amplitude,
            "phase": self._phase,
            "running": self.running,
        }

    def evaluate(self, shape: WaveShape, t):
        """
        Evaluate the waveform at time t.

        Args:
            shape (WaveShape): One of "sine", "square", "triangle", "sawtooth".
            t (float | np.ndarray): Time value, or array of time values.

        Returns:
            float | np.ndarray: Sample value, or array of values when t is an array.

        Raises:
            WaveformConfigError: If the shape is unknown.
        """
        return get_shape(shape)(self._wavelength, self._amplitude, self._phase, t)

    def sine(self, t):
        return self.evaluate("sine", t)

    def square(self, t):
        return self.evaluate("square", t)

    def triangle(self, t):
        return self.evaluate("triangle", t)

    def sawtooth(self, t):
        return self.evaluate("sawtooth", t)

    def samples(self, shape: WaveShape, start: float, stop: float, step: float = 1.0) -> np.ndarray:
        """
        Evaluate the waveform over the regular grid [start, stop) with the given step.

        Raises:
            ValueError: If step is not positive.
        """
        if step <= 0:
            raise ValueError(f"Invalid step '{step}'. Must be positive")

        return np.asarray(self.evaluate(shape, np.arange(start, stop, step, dtype=np.float64)))

    def start_flow(self, shape: WaveShape, interval_ms: int) -> WaveformFlow:
        """
        Start streaming samples of the given shape, one every `interval_ms` milliseconds.

        Returns immediately, values are produced in a background thread.

        Args:
            shape (WaveShape): One of "sine", "square", "triangle", "sawtooth".
            interval_ms (int): Tick interval in milliseconds, a positive integer.

        Returns:
            WaveformFlow: Iterable stream of sample values.

        Raises:
            AlreadyRunningError: If a flow is already active on this waveform.
            WaveformConfigError: If the shape is unknown or the interval is invalid.
        """
        func = get_shape(shape)

        with self._flow_lock:
            if self.running:
                logger.warning(f"Rejected {shape} flow: waveform is running already")
                raise AlreadyRunningError("Waveform is running already")

            sample = partial(func, self._wavelength, self._amplitude, self._phase)
            flow = WaveformFlow(sample, interval_ms, name=shape)
            flow.start()

            self._flow = flow

        logger.info(f"Started {shape} flow every {interval_ms} ms")
        return flow

    def sine_flow(self, interval_ms: int) -> WaveformFlow:
        return self.start_flow("sine", interval_ms)

    def square_flow(self, interval_ms: int) -> WaveformFlow:
        return self.start_flow("square", interval_ms)

    def triangle_flow(self, interval_ms: int) -> WaveformFlow:
        return self.start_flow("triangle", interval_ms)

    def sawtooth_flow(self, interval_ms: int) -> WaveformFlow:
        return self.start_flow("sawtooth", interval_ms)

    def stop_flow(self) -> None:
        """
        Stop the active flow, if any.

        No new ticks are produced after this call. It does not wait for the producer
        thread to exit. Calling it on a waveform that is not running does nothing.
        """
        with self._flow_lock:
            flow = self._flow
            self._flow = None
            if flow is None or flow.closed:
                # Never started, already stopped, or ended by itself
                logger.debug("Waveform is not running, nothing to stop")
                return

            flow.stop()

        logger.info(f"Stopped {flow.name} flow")

    @contextmanager
    def flow(self, shape: WaveShape, interval_ms: int):
        """
        Run a flow for the duration of a with block.

        Example:
            ```python
            with wv.flow("triangle", 10) as values:
                first = next(values)
            ```
        """
        stream = self.start_flow(shape, interval_ms)
        try:
            yield stream
        finally:
            self.stop_flow()

    def __repr__(self) -> str:
        return f"Waveform(wavelength={self._wavelength}, amplitude={self._amplitude}, phase={self._phase})"


def _to_finite_float(name: str, value) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError) as e:
        raise WaveformConfigError(f"Invalid {name} '{value}'. Must be a number") from e
    if not math.isfinite(result):
        raise WaveformConfigError(f"Invalid {name} '{value}'. Must be finite")
    return result
