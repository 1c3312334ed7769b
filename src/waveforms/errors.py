# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0


class WaveformError(Exception):
    """Base exception for waveform-related errors."""

    pass


class WaveformConfigError(WaveformError, ValueError):
    """Exception raised when waveform or flow configuration is invalid."""

    pass


class AlreadyRunningError(WaveformError):
    """Exception raised when starting a flow on a waveform that is already streaming."""

    pass


class FlowClosedError(WaveformError):
    """Exception raised when reading from a flow that has ended."""

    pass
