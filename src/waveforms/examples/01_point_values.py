# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

"""
Point Evaluation Example

Prints one period of every waveform shape for a waveform with
wavelength 50, amplitude 1 and no phase offset.
"""

from waveforms import Waveform

wv = Waveform(wavelength=50, amplitude=1.0, phase=0.0)

print(f"{'t':>4} {'sine':>9} {'square':>9} {'triangle':>9} {'sawtooth':>9}")
for i in range(1, 51):
    t = float(i)
    print(f"{t:4.0f} {wv.sine(t):9.5f} {wv.square(t):9.5f} {wv.triangle(t):9.5f} {wv.sawtooth(t):9.5f}")
