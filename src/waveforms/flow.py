# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

import queue
import threading
import time
from collections.abc import Callable

from .errors import FlowClosedError, WaveformConfigError
from .logger import Logger

logger = Logger("WaveformFlow")


def now_millis() -> float:
    """Wall-clock time as whole milliseconds since the Unix epoch."""
    return float(time.time_ns() // 1_000_000)


class Ticker:
    """
    Periodic timer firing every `interval_ms` milliseconds.

    Deadlines are absolute on the monotonic clock, so the cadence does not drift
    with the time spent between waits. When the caller falls behind by more than
    one interval, the schedule is re-anchored on the current time and the missed
    ticks are skipped rather than queued.
    """

    def __init__(self, interval_ms: int):
        if isinstance(interval_ms, bool) or not isinstance(interval_ms, int) or interval_ms <= 0:
            raise WaveformConfigError(f"Invalid interval '{interval_ms}'. Must be a positive integer of milliseconds")

        self.interval_ms = interval_ms
        self._interval = interval_ms / 1000.0
        self._next_deadline = time.monotonic() + self._interval
        self._stopped = threading.Event()

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    def wait(self) -> bool:
        """
        Block until the next tick.

        Returns:
            bool: True when a tick fired, False when the ticker was stopped.
        """
        timeout = self._next_deadline - time.monotonic()
        if timeout > 0 and self._stopped.wait(timeout):
            return False
        if self._stopped.is_set():
            return False

        now = time.monotonic()
        self._next_deadline += self._interval
        if self._next_deadline <= now:
            self._next_deadline = now + self._interval
        return True

    def stop(self) -> None:
        """Stop the ticker. Safe to call more than once."""
        self._stopped.set()


class WaveformFlow:
    """
    Live stream of waveform samples, one per tick.

    A daemon producer thread waits on a Ticker, evaluates the sample function at the
    current wall-clock time in milliseconds and hands the value over through a
    one-value buffer. Handing a value over returns as soon as it is buffered; the
    producer then blocks on the next value while the buffer is full, so a slow consumer
    slows production down instead of piling up values.

    The flow is iterable exactly once. Iteration ends after the flow is stopped and
    any value already accepted into the slot has been read. A value still waiting
    for the slot when the flow is stopped is dropped.
    """

    POLL_INTERVAL = 0.05
    """Seconds between closed-flag checks while producer or consumer are blocked."""

    def __init__(self, sample: Callable[[float], float], interval_ms: int, name: str = "flow"):
        """
        Initialize the flow without starting it.

        Args:
            sample (Callable[[float], float]): Function mapping a timestamp in milliseconds to a value.
            interval_ms (int): Tick interval in milliseconds.
            name (str): Name used for the producer thread and log messages.

        Raises:
            WaveformConfigError: If the interval is not a positive integer.
        """
        self._sample = sample
        self._ticker = Ticker(interval_ms)
        self.name = name

        self._slot: queue.Queue[float] = queue.Queue(maxsize=1)
        self._closed = threading.Event()
        self._producer: threading.Thread | None = None

    @property
    def interval_ms(self) -> int:
        return self._ticker.interval_ms

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def start(self) -> None:
        if self._producer is not None:
            raise RuntimeError(f"{self.name} has already been started")

        self._producer = threading.Thread(target=self._produce, name=f"WaveformFlow-{self.name}", daemon=True)
        self._producer.start()
        logger.debug(f"Producer for {self.name} started, interval {self.interval_ms} ms")

    def stop(self) -> None:
        """
        Stop producing values and close the flow.

        Returns immediately without waiting for the producer thread. Safe to call
        more than once.
        """
        self._ticker.stop()
        self._closed.set()

    def join(self, timeout: float | None = None) -> bool:
        """
        Wait for the producer thread to exit.

        Returns:
            bool: True if the producer has exited (or was never started).
        """
        if self._producer is None:
            return True
        self._producer.join(timeout)
        return not self._producer.is_alive()

    def get(self, timeout: float | None = None) -> float:
        """
        Read the next sample.

        Args:
            timeout (float): Maximum seconds to wait, None waits indefinitely.

        Returns:
            float: The next sample value.

        Raises:
            FlowClosedError: If the flow has ended and no value is pending.
            TimeoutError: If no value arrives within the timeout.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            try:
                return self._slot.get_nowait()
            except queue.Empty:
                if self._closed.is_set():
                    raise FlowClosedError(f"{self.name} is closed") from None

            wait = self.POLL_INTERVAL
            if deadline is not None:
                wait = min(wait, deadline - time.monotonic())
                if wait <= 0:
                    raise TimeoutError(f"No value from {self.name} within {timeout} seconds")

            try:
                return self._slot.get(timeout=wait)
            except queue.Empty:
                continue

    def __iter__(self):
        return self

    def __next__(self) -> float:
        try:
            return self.get()
        except FlowClosedError:
            raise StopIteration from None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()

    def _produce(self) -> None:
        try:
            while self._ticker.wait():
                value = self._sample(now_millis())
                if not self._deliver(value):
                    break
        except Exception as e:
            logger.error(f"Failed to produce sample for {self.name}: {e}")
        finally:
            self._ticker.stop()
            self._closed.set()
            logger.debug(f"Producer for {self.name} exited")

    def _deliver(self, value: float) -> bool:
        # Blocks while the consumer holds back, gives up once the flow is closed
        while not self._closed.is_set():
            try:
                self._slot.put(value, timeout=self.POLL_INTERVAL)
                return True
            except queue.Full:
                continue
        return False
