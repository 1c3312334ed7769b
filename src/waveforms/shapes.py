# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

"""
Closed-form periodic waveform functions.

Every function takes (wavelength, amplitude, phase, t) and is pure. They accept
scalars or numpy arrays for t: scalars give back a float, arrays give back an
array of samples. Parameters are not validated here, a zero wavelength yields
inf/nan like the underlying numpy operations do.
"""

from collections.abc import Callable
from typing import Literal, TypeAlias

import numpy as np

from .errors import WaveformConfigError

WaveShape: TypeAlias = Literal["sine", "square", "triangle", "sawtooth"]
ShapeFunction: TypeAlias = Callable[[float, float, float, float | np.ndarray], float | np.ndarray]

_TWO_PI = 2.0 * np.pi


def _as_output(value):
    # numpy returns 0-d results for scalar inputs
    if np.ndim(value) == 0:
        return float(value)
    return value


def sine(wavelength: float, amplitude: float, phase: float, t):
    with np.errstate(divide="ignore", invalid="ignore"):
        return _as_output(amplitude * np.sin((_TWO_PI * np.asarray(t, dtype=np.float64) - phase) / wavelength))


def square(wavelength: float, amplitude: float, phase: float, t):
    """Square wave, +amplitude on the first half of each period. fmod keeps the sign of t - phase."""
    with np.errstate(divide="ignore", invalid="ignore"):
        position = np.fmod(np.asarray(t, dtype=np.float64) - phase, wavelength)
        return _as_output(np.where(position < wavelength / 2.0, amplitude, -amplitude).astype(np.float64))


def triangle(wavelength: float, amplitude: float, phase: float, t):
    with np.errstate(divide="ignore", invalid="ignore"):
        angle = (_TWO_PI * np.asarray(t, dtype=np.float64) - phase) / wavelength
        return _as_output(2.0 * amplitude / np.pi * np.arcsin(np.sin(angle)))


def sawtooth(wavelength: float, amplitude: float, phase: float, t):
    with np.errstate(divide="ignore", invalid="ignore"):
        angle = (_TWO_PI * np.asarray(t, dtype=np.float64) - phase) / (2.0 * wavelength)
        return _as_output(2.0 * amplitude / np.pi * np.arctan(np.tan(angle)))


SHAPES: dict[str, ShapeFunction] = {
    "sine": sine,
    "square": square,
    "triangle": triangle,
    "sawtooth": sawtooth,
}


def get_shape(shape: WaveShape) -> ShapeFunction:
    """
    Look up the function for a waveform shape.

    Args:
        shape (WaveShape): One of "sine", "square", "triangle", "sawtooth".

    Returns:
        ShapeFunction: The matching pure waveform function.

    Raises:
        WaveformConfigError: If the shape is unknown.
    """
    try:
        return SHAPES[shape]
    except (KeyError, TypeError):
        raise WaveformConfigError(f"Invalid shape '{shape}'. Must be one of {tuple(SHAPES)}") from None
