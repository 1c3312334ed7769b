# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

import math

import pytest

from waveforms import Waveform


@pytest.fixture
def waveform():
    """Waveform with wavelength 50, amplitude 1 and phase 0, stopped after the test."""
    wv = Waveform(50, 1.0, 0.0)
    yield wv
    wv.stop_flow()


@pytest.fixture
def slow_waveform():
    """Waveform with a 1000 ms wavelength and phase pi, for wall-clock flows."""
    wv = Waveform(1000, 1.0, math.pi)
    yield wv
    wv.stop_flow()
