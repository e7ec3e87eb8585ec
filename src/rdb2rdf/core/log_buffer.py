"""
In-memory log buffer.

Keeps the most recent log records so that a hosting service can expose them
(e.g. a "recent activity" endpoint) without reading log files. The buffer is
bounded: once full, the oldest record is evicted for every new one.
"""

import logging
import threading
from collections import deque
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List, Optional

from ..constants import LoggingConfig


class MemoryLogHandler(logging.Handler):
    """Logging handler that retains the last ``capacity`` records as dicts."""

    def __init__(self, capacity: int = LoggingConfig.MEMORY_BUFFER_CAPACITY, level: int = logging.NOTSET):
        super().__init__(level)
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._records: Deque[Dict[str, Any]] = deque(maxlen=capacity)
        self._buffer_lock = threading.Lock()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = {
                "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
            }
        except Exception:
            self.handleError(record)
            return
        with self._buffer_lock:
            self._records.append(entry)

    def recent(self, level: Optional[str] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Return buffered records, oldest first.

        Args:
            level: Only return records with this level name (e.g. "WARNING").
            limit: Only return the newest ``limit`` matching records.
        """
        with self._buffer_lock:
            entries = list(self._records)
        if level:
            wanted = level.upper()
            entries = [e for e in entries if e["level"] == wanted]
        if limit is not None:
            entries = entries[-limit:] if limit > 0 else []
        return entries

    def clear(self) -> None:
        with self._buffer_lock:
            self._records.clear()

    def __len__(self) -> int:
        return len(self._records)
