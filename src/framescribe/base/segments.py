from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Window:
    """A fixed-length time slice of the source video.

    Attributes:
        index: Ordinal position in the plan, starting at 0.
        start_second: Window start in whole seconds.
        length_seconds: Window length in whole seconds, always positive.
    """

    index: int
    start_second: int
    length_seconds: int

    @property
    def end_second(self) -> int:
        return self.start_second + self.length_seconds

    def __str__(self) -> str:
        return f"window {self.index} [{self.start_second}s, {self.end_second}s)"


def plan_windows(duration: int, interval_seconds: int) -> list[Window]:
    """Split ``[0, duration)`` into consecutive windows of ``interval_seconds``.

    The last window is clipped to the remainder. A zero duration gives an empty plan.

    Args:
        duration: Source duration in whole seconds.
        interval_seconds: Window length in whole seconds.

    Returns:
        Windows ordered by index, exactly tiling ``[0, duration)``.

    Raises:
        ValueError: If duration is negative or interval_seconds is not positive.
    """
    if duration < 0:
        raise ValueError("duration must be non-negative")
    if interval_seconds <= 0:
        raise ValueError("interval_seconds must be positive")

    return [
        Window(index=index, start_second=start, length_seconds=min(interval_seconds, duration - start))
        for index, start in enumerate(range(0, duration, interval_seconds))
    ]
