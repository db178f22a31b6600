"""
Session Logger Module - app activate/deactivate telemetry

Logs session lifecycle events with time-between-sessions quanta and a cached
package fingerprint.
"""

from typing import Optional

from ...config import Settings
from . import event_logger
from .event_logger import AppEventQueue, EventRecord, FlushBehavior, InternalAppEventsLogger
from .fingerprint import PackageFingerprintCache, compute_checksum
from .kv_store import KeyValueStore, MemoryKeyValueStore, SQLiteKeyValueStore
from .package_info import ConfiguredPackageInspector, PackageInfo, PackageInspector
from .quanta import INACTIVE_MILLIS_QUANTA, get_quanta_index, quanta_label
from .session_info import SessionInfo, SourceApplicationInfo
from .session_logger import SessionLogger


def build_session_logger(
    settings: Settings,
    store: Optional[KeyValueStore] = None,
    queue: Optional[AppEventQueue] = None,
) -> SessionLogger:
    """Wire a SessionLogger from settings (SQLite store unless one is given)"""
    event_logger.set_flush_behavior(settings.flush_behavior)
    cache = PackageFingerprintCache(
        store=store if store is not None else SQLiteKeyValueStore(settings.store_path),
        inspector=ConfiguredPackageInspector.from_settings(settings),
    )
    return SessionLogger(
        fingerprint_cache=cache,
        cert_paths=settings.cert_paths,
        queue=queue,
    )


__all__ = [
    "AppEventQueue",
    "ConfiguredPackageInspector",
    "EventRecord",
    "FlushBehavior",
    "INACTIVE_MILLIS_QUANTA",
    "InternalAppEventsLogger",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "PackageFingerprintCache",
    "PackageInfo",
    "PackageInspector",
    "SQLiteKeyValueStore",
    "SessionInfo",
    "SessionLogger",
    "SourceApplicationInfo",
    "build_session_logger",
    "compute_checksum",
    "get_quanta_index",
    "quanta_label",
]
