# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

from .waveform import Waveform
from .flow import WaveformFlow, Ticker
from .shapes import SHAPES, ShapeFunction, WaveShape, get_shape, sawtooth, sine, square, triangle
from .logger import Logger, set_log_level
from .errors import *

__all__ = [
    "Waveform",
    "WaveformFlow",
    "Ticker",
    "WaveShape",
    "ShapeFunction",
    "SHAPES",
    "get_shape",
    "sine",
    "square",
    "triangle",
    "sawtooth",
    "Logger",
    "set_log_level",
    "WaveformError",
    "WaveformConfigError",
    "AlreadyRunningError",
    "FlowClosedError",
]
