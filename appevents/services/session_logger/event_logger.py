"""
Event-logging collaborator for the session logger.

Events are appended to an in-process queue; shipping them anywhere is the
concern of whatever drains the queue.
"""

import threading
import time
import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, List, Mapping, Optional, Union

logger = logging.getLogger(__name__)

ParamValue = Union[str, int, float]


class FlushBehavior(str, Enum):
    AUTO = "auto"
    EXPLICIT_ONLY = "explicit_only"


@dataclass(frozen=True)
class EventRecord:
    """Immutable record of one logged app event"""
    event_name: str
    parameters: Mapping[str, ParamValue]
    value_to_sum: Optional[float] = None
    activity_name: Optional[str] = None
    app_id: Optional[str] = None
    log_time: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        return {
            "event_name": self.event_name,
            "value_to_sum": self.value_to_sum,
            "parameters": dict(self.parameters),
            "activity_name": self.activity_name,
            "app_id": self.app_id,
            "log_time": self.log_time,
        }


class AppEventQueue:
    """Thread-safe in-process sink for logged events"""

    def __init__(self):
        self._records: List[EventRecord] = []
        self._flushed = 0
        self._lock = threading.Lock()

    def add(self, record: EventRecord) -> None:
        with self._lock:
            self._records.append(record)

    def flush(self) -> int:
        """Marks every pending record as flushed and returns how many there were"""
        with self._lock:
            count = len(self._records) - self._flushed
            self._flushed = len(self._records)

        if count:
            logger.info(f"Flushed {count} app event(s)")
        return count

    def pending(self) -> List[EventRecord]:
        with self._lock:
            return list(self._records[self._flushed:])

    def recent(self, limit: int = 20) -> List[EventRecord]:
        with self._lock:
            return list(self._records[-limit:]) if limit > 0 else []

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
            self._flushed = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


# Process-wide defaults (singleton, like the rest of the service layer)
default_queue = AppEventQueue()
_flush_behavior = FlushBehavior.AUTO


def get_flush_behavior() -> FlushBehavior:
    return _flush_behavior


def set_flush_behavior(behavior: Union[FlushBehavior, str]) -> None:
    global _flush_behavior
    _flush_behavior = FlushBehavior(behavior)


class InternalAppEventsLogger:
    """Logs named events with parameters for one activity/app pair"""

    def __init__(
        self,
        activity_name: Optional[str],
        app_id: Optional[str],
        queue: Optional[AppEventQueue] = None,
    ):
        self.activity_name = activity_name
        self.app_id = app_id
        self.queue = queue if queue is not None else default_queue

    def log_event(
        self,
        event_name: str,
        value_to_sum: Optional[float] = None,
        parameters: Optional[Mapping[str, Any]] = None,
    ) -> EventRecord:
        record = EventRecord(
            event_name=event_name,
            parameters=MappingProxyType(dict(parameters or {})),
            value_to_sum=value_to_sum,
            activity_name=self.activity_name,
            app_id=self.app_id,
        )
        self.queue.add(record)
        logger.debug(f"Logged event {event_name} for activity {self.activity_name}")
        return record

    def flush(self) -> int:
        return self.queue.flush()
