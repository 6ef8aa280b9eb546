from __future__ import annotations


class LevelTimer:
    """Seconds spent on the current level."""

    def __init__(self) -> None:
        self._elapsed = 0.0

    @property
    def elapsed(self) -> float:
        return self._elapsed

    def reset(self) -> None:
        self._elapsed = 0.0

    def tick(self, delta: float) -> None:
        self._elapsed += delta


class GameTimer:
    """One-shot countdown for the whole scored session."""

    def __init__(self, duration_minutes: float) -> None:
        self._duration = duration_minutes * 60.0
        self._elapsed = 0.0
        self._finished = self._duration <= 0
        self._just_finished = False

    @property
    def duration(self) -> float:
        return self._duration

    def tick(self, delta: float) -> None:
        self._just_finished = False
        if self._finished:
            return
        self._elapsed += delta
        if self._elapsed >= self._duration:
            self._finished = True
            self._just_finished = True

    def just_finished(self) -> bool:
        """True only for the tick on which the countdown expired."""
        return self._just_finished

    def is_finished(self) -> bool:
        return self._finished

    def remaining_time(self) -> float:
        if self._finished:
            return 0.0
        return self._duration - self._elapsed

    def remaining_minutes(self) -> int:
        return int(self.remaining_time() // 60)

    def remaining_seconds(self) -> int:
        return int(self.remaining_time() % 60)
