# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

"""
Telemetry Stub Example

Emits a fake temperature metric around 21.5 degrees as a slow triangle
wave, one reading every 100 ms, for five seconds.
"""

import time

from waveforms import Waveform

BASELINE = 21.5

# One full oscillation every 2 seconds, +/- 3 degrees
wv = Waveform(wavelength=2000, amplitude=3.0)

deadline = time.monotonic() + 5.0
with wv.flow("triangle", 100) as readings:
    for reading in readings:
        print(f"temperature={BASELINE + reading:.2f}")
        if time.monotonic() >= deadline:
            break
