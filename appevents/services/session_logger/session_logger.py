"""
Session lifecycle events: app activated / app deactivated.

Stateless orchestration: each call turns one snapshot from the session
tracker into one outgoing event.
"""

import logging
from typing import Callable, Iterable, Optional

from . import event_logger
from .constants import (
    EVENT_NAME_ACTIVATED_APP,
    EVENT_NAME_DEACTIVATED_APP,
    EVENT_NAME_SESSION_INTERRUPTIONS,
    EVENT_NAME_TIME_BETWEEN_SESSIONS,
    EVENT_PARAM_APP_CERT_HASH,
    EVENT_PARAM_PACKAGE_FP,
    EVENT_PARAM_SOURCE_APPLICATION,
    LOG_TIME_APP_EVENT_KEY,
    UNCLASSIFIED,
)
from .certificate import get_certificate_hash
from .event_logger import AppEventQueue, EventRecord, FlushBehavior, InternalAppEventsLogger
from .fingerprint import PackageFingerprintCache
from .quanta import SECOND_IN_MILLIS, quanta_label
from .session_info import SessionInfo, SourceApplicationInfo

logger = logging.getLogger(__name__)


def log_clock_skew_event() -> None:
    logger.warning("Clock skew detected")


def source_application_string(info: Optional[SourceApplicationInfo]) -> str:
    return str(info) if info is not None else UNCLASSIFIED


class SessionLogger:
    """
    Emits the activate/deactivate events for a host application.

    Collaborators:
    - fingerprint_cache: package checksum lookup (optional field on activate)
    - cert_paths: signing certificates for the install identity hash
    - queue: event sink (defaults to the process-wide queue)
    - flush_behavior: callable returning the current FlushBehavior
    """

    def __init__(
        self,
        fingerprint_cache: Optional[PackageFingerprintCache] = None,
        cert_paths: Iterable[str] = (),
        queue: Optional[AppEventQueue] = None,
        flush_behavior: Callable[[], FlushBehavior] = event_logger.get_flush_behavior,
    ):
        self.fingerprint_cache = fingerprint_cache
        self.cert_paths = list(cert_paths)
        self.queue = queue
        self.flush_behavior = flush_behavior

    @property
    def events_queue(self) -> AppEventQueue:
        return self.queue if self.queue is not None else event_logger.default_queue

    def _events_logger(self, activity_name: Optional[str], app_id: Optional[str]):
        return InternalAppEventsLogger(activity_name, app_id, self.events_queue)

    # ---------- ACTIVATE ----------

    def log_activate_app(
        self,
        activity_name: Optional[str],
        source_application_info: Optional[SourceApplicationInfo],
        app_id: Optional[str],
        package_name: Optional[str] = None,
    ) -> EventRecord:
        params = {
            EVENT_PARAM_SOURCE_APPLICATION: source_application_string(source_application_info),
        }

        # Fingerprint and certificate hash are optional; absent means omitted
        if self.fingerprint_cache is not None and package_name:
            package_fp = self.fingerprint_cache.resolve(package_name)
            if package_fp is not None:
                params[EVENT_PARAM_PACKAGE_FP] = package_fp

        cert_hash = get_certificate_hash(self.cert_paths)
        if cert_hash is not None:
            params[EVENT_PARAM_APP_CERT_HASH] = cert_hash

        events_logger = self._events_logger(activity_name, app_id)
        record = events_logger.log_event(EVENT_NAME_ACTIVATED_APP, parameters=params)

        if self.flush_behavior() != FlushBehavior.EXPLICIT_ONLY:
            events_logger.flush()

        return record

    # ---------- DEACTIVATE ----------

    def log_deactivate_app(
        self,
        activity_name: Optional[str],
        session_info: Optional[SessionInfo],
        app_id: Optional[str],
    ) -> Optional[EventRecord]:
        if session_info is None:
            return None

        last_event_time = session_info.session_last_event_time or 0

        interruption_duration = session_info.disk_restore_time - last_event_time
        if interruption_duration < 0:
            interruption_duration = 0
            log_clock_skew_event()

        session_length = session_info.session_length
        if session_length < 0:
            log_clock_skew_event()
            session_length = 0

        params = {
            EVENT_NAME_SESSION_INTERRUPTIONS: session_info.interruption_count,
            EVENT_NAME_TIME_BETWEEN_SESSIONS: quanta_label(interruption_duration),
            EVENT_PARAM_SOURCE_APPLICATION: source_application_string(
                session_info.source_application_info
            ),
            LOG_TIME_APP_EVENT_KEY: last_event_time // SECOND_IN_MILLIS,
        }

        return self._events_logger(activity_name, app_id).log_event(
            EVENT_NAME_DEACTIVATED_APP,
            value_to_sum=session_length / SECOND_IN_MILLIS,
            parameters=params,
        )
