# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

"""
Sine Flow Example

Streams a sine wave sampled every millisecond for one second, reading
the values from a background consumer thread.
"""

import threading
import time

from waveforms import Waveform

# Wavelength is expressed in milliseconds when streaming
wv = Waveform(wavelength=100, amplitude=1.0, phase=0.0)

flow = wv.sine_flow(1)


def consume():
    for i, value in enumerate(flow, start=1):
        print(f"Sine: {i} {value:.5f}")


consumer = threading.Thread(target=consume, daemon=True)
consumer.start()

time.sleep(1.0)
wv.stop_flow()
consumer.join()
