"""
EnergyRateTracker: sliding-window energy rate.

Samples are (energy, dt) pairs. The window has a fixed duration for the life
of the tracker; each insert evicts the oldest samples while the samples after
them still cover the whole window. The oldest kept sample may straddle the
window start; only the share of its energy inside the window is counted,
assuming it was spread evenly over its dt. The average rate is that energy
divided by the window duration, so a partially filled window under-reports.
"""

from __future__ import annotations

from collections import deque

from .constants import TIME_EPSILON

DEFAULT_WINDOW_S = 1.0


class EnergyRateTracker:
    def __init__(self, window_s: float = DEFAULT_WINDOW_S) -> None:
        if not window_s > 0.0:
            raise ValueError(f"Rate window must be positive, got {window_s!r}.")
        self._window_s = float(window_s)
        self._samples: deque[tuple[float, float]] = deque()

    @property
    def window_s(self) -> float:
        return self._window_s

    def __len__(self) -> int:
        return len(self._samples)

    def span_s(self) -> float:
        """Total duration currently covered by the samples."""
        return sum(dt for _, dt in self._samples)

    def add_energy_info(self, energy: float, dt: float) -> None:
        if not dt > 0.0:
            raise ValueError(f"dt must be positive, got {dt!r}.")
        self._samples.append((float(energy), float(dt)))
        span = self.span_s()
        while len(self._samples) > 1 and span - self._samples[0][1] >= self._window_s - TIME_EPSILON:
            _, old_dt = self._samples.popleft()
            span -= old_dt

    def get_average_rate(self) -> float:
        """Energy per second over the window (W), 0.0 when empty."""
        if not self._samples:
            return 0.0
        energy = sum(e for e, _ in self._samples)
        excess = self.span_s() - self._window_s
        if excess > 0.0:
            # Drop the part of the oldest sample that lies before the window
            old_energy, old_dt = self._samples[0]
            energy -= old_energy * excess / old_dt
        return energy / self._window_s

    def reset(self) -> None:
        self._samples.clear()
