"""Rolling-average speed smoother.

Keeps the last WINDOW_SIZE speed samples in a fixed ring of slots. The
capacity never changes: a push into a full ring overwrites the oldest slot.
"""

from __future__ import annotations

# Number of samples averaged. A fixed tuning constant.
WINDOW_SIZE = 5


class SpeedSmoother:
    """Mean of the most recent WINDOW_SIZE speed samples (km/h)."""

    def __init__(self) -> None:
        self._slots: list[float] = [0.0] * WINDOW_SIZE
        self._head = 0  # index of the oldest sample
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def push(self, speed_kmh: float) -> float:
        """Add a sample, evicting the oldest once full; return the new mean."""
        if self._count < WINDOW_SIZE:
            self._slots[(self._head + self._count) % WINDOW_SIZE] = speed_kmh
            self._count += 1
        else:
            self._slots[self._head] = speed_kmh
            self._head = (self._head + 1) % WINDOW_SIZE
        return self.mean()

    def mean(self) -> float:
        if self._count == 0:
            return 0.0
        return sum(self.values()) / self._count

    def values(self) -> tuple[float, ...]:
        """Current window, oldest first."""
        return tuple(
            self._slots[(self._head + i) % WINDOW_SIZE] for i in range(self._count)
        )

    def reset(self) -> None:
        self._slots = [0.0] * WINDOW_SIZE
        self._head = 0
        self._count = 0
