from __future__ import annotations

from dataclasses import dataclass

from .project_constants import ROUND_DURATION_S


@dataclass(frozen=True)
class RoundClock:
    start_time: int
    duration: int = ROUND_DURATION_S

    @property
    def closes_at(self) -> int:
        return self.start_time + self.duration

    def is_entry_open(self, now: int) -> bool:
        # Window is [start, start + duration)
        return now < self.closes_at

    def seconds_remaining(self, now: int) -> int:
        return max(0, self.closes_at - now)
