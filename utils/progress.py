"""Progress reporting for long corpus runs."""

import time
from collections import deque
from typing import Callable, Optional


class ProgressTracker:
    """Tracks progress of one step with speed and ETA.

    Uses a sliding window of recent ticks for a smooth rate estimate.
    """

    def __init__(self, total: int, window_size: int = 10, step_name: str = "", unit: str = "texts"):
        """
        Args:
            total: Total number of items in this step
            window_size: Number of recent ticks to average for the rate
            step_name: Shown as "[step_name]" in front of the progress line
            unit: Item name shown in the rate ("texts/sec")
        """
        self.total = total
        self.done = 0
        self.step_name = step_name
        self.unit = unit

        self._start_time: Optional[float] = None
        self._last_time: Optional[float] = None
        # (elapsed, count) per tick
        self._ticks: deque = deque(maxlen=window_size)

    def start(self):
        self._start_time = time.monotonic()
        self._last_time = self._start_time

    def tick(self, count: int = 1):
        """Record completion of count items."""
        now = time.monotonic()
        if self._last_time is not None and count > 0:
            self._ticks.append((now - self._last_time, count))
        self._last_time = now
        self.done += count

    @property
    def percent(self) -> float:
        if self.total == 0:
            return 100.0
        return (self.done / self.total) * 100

    @property
    def items_per_second(self) -> float:
        elapsed = sum(t for t, _ in self._ticks)
        if elapsed <= 0:
            return 0.0
        return sum(c for _, c in self._ticks) / elapsed

    @property
    def eta_seconds(self) -> Optional[float]:
        """Estimated seconds remaining, None when unknown or finished."""
        speed = self.items_per_second
        if speed <= 0 or self.done >= self.total:
            return None
        return (self.total - self.done) / speed

    @property
    def elapsed_seconds(self) -> float:
        if self._start_time is None:
            return 0.0
        return time.monotonic() - self._start_time

    def format_progress(self) -> str:
        """Format: [step] done/total (pct%) | speed unit/sec | ETA: time"""
        parts = []
        if self.step_name:
            parts.append(f"[{self.step_name}]")

        parts.append(f"{self.done}/{self.total}")
        parts.append(f"({self.percent:.0f}%)")

        speed = self.items_per_second
        if speed > 0:
            parts.append(f"| {speed:.1f} {self.unit}/sec")

        eta = self.eta_seconds
        if eta is not None:
            parts.append(f"| ETA: {format_duration(eta)}")
        elif self.done >= self.total and self._start_time is not None:
            parts.append(f"| {format_duration(self.elapsed_seconds)}")

        return " ".join(parts)

    def __str__(self) -> str:
        return self.format_progress()


def format_duration(seconds: float) -> str:
    """Format seconds as "45s", "2m 5s" or "1h 23m 45s"."""
    if seconds < 0:
        return "N/A"

    seconds = int(seconds)
    if seconds < 60:
        return f"{seconds}s"

    minutes, seconds = divmod(seconds, 60)
    if minutes < 60:
        return f"{minutes}m {seconds}s"

    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes}m {seconds}s"


class ProgressCallback:
    """Progress callback for FrequencyListBuilder that prints to console.

    One tracker per step (shard); the line is rewritten in place and
    finished with a newline when the step completes.
    """

    def __init__(self, print_interval: int = 1000, unit: str = "texts"):
        """
        Args:
            print_interval: Print every N items (0 = every update)
            unit: Item name for the rate
        """
        self.print_interval = print_interval
        self.unit = unit
        self._trackers: dict[str, ProgressTracker] = {}
        self._last_printed: dict[str, int] = {}

    def __call__(self, step_name: str, done: int, total: int):
        if step_name not in self._trackers or self._trackers[step_name].total != total:
            tracker = ProgressTracker(total, step_name=step_name, unit=self.unit)
            tracker.start()
            self._trackers[step_name] = tracker
            self._last_printed[step_name] = -1

        tracker = self._trackers[step_name]
        increment = done - tracker.done
        if increment > 0:
            tracker.tick(increment)

        finished = done >= total
        should_print = (
            self.print_interval == 0
            or finished
            or done - self._last_printed[step_name] >= self.print_interval
        )
        if should_print and self._last_printed[step_name] != done:
            print(f"\r{tracker.format_progress()}", end="", flush=True)
            self._last_printed[step_name] = done
            if finished:
                print()


def create_progress_callback(print_every: int = 1000) -> Callable[[str, int, int], None]:
    """Create a progress callback for FrequencyListBuilder(on_progress=...)."""
    return ProgressCallback(print_interval=print_every)
