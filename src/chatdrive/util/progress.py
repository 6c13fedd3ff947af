from __future__ import annotations

from typing import Callable, Optional

PercentCallback = Callable[[int], None]


class ProgressTracker:
    """
    Turn byte counts into upload percentages for a caller callback.

    Guarantees:
        - emitted values are integers in [0, 100] and never decrease;
        - 100 is emitted only by complete(), exactly once;
        - nothing is emitted after fail() or complete().
    """

    def __init__(self, callback: Optional[PercentCallback]) -> None:
        self._callback = callback
        self._last: Optional[int] = None
        self._closed = False

    @property
    def last_percent(self) -> Optional[int]:
        return self._last

    def update(self, sent: int, total: int) -> None:
        """Report that `sent` of `total` bytes have been transferred."""
        if self._closed or total <= 0:
            return
        percent = round(sent * 100 / total)
        # 100 means the whole operation succeeded; bytes on the wire are not enough.
        percent = max(0, min(99, percent))
        self._emit(percent)

    def complete(self) -> None:
        if self._closed:
            return
        self._emit(100)
        self._closed = True

    def fail(self) -> None:
        self._closed = True

    def _emit(self, percent: int) -> None:
        if self._last is not None and percent <= self._last:
            return
        self._last = percent
        if self._callback is not None:
            self._callback(percent)
