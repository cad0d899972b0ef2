"""Last-known robot position shared between the position feed and order handling."""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Optional

from ..models.domain import PositionSample
from ..models.errors import PositionUnknown


class PositionTracker:
    """Holds the latest position sample; each update replaces the previous one."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sample: Optional[PositionSample] = None

    def update(self, x: float, y: float, timestamp: datetime | None = None) -> PositionSample:
        sample = PositionSample(x=float(x), y=float(y), timestamp=timestamp or datetime.now(timezone.utc))
        with self._lock:
            self._sample = sample
        return sample

    def snapshot(self) -> Optional[PositionSample]:
        with self._lock:
            return self._sample

    def require(self) -> PositionSample:
        sample = self.snapshot()
        if sample is None:
            raise PositionUnknown("AMR current position not Known!")
        return sample
