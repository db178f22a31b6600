from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SourceApplicationInfo:
    """
    Attribution for how the current session was opened.
    Read-only snapshot handed over by the session tracker.
    """
    calling_application_package: Optional[str] = None
    opened_by_app_link: bool = False

    def __str__(self) -> str:
        open_type = "Applink" if self.opened_by_app_link else "Unclassified"
        if self.calling_application_package:
            return f"{open_type}({self.calling_application_package})"
        return open_type


@dataclass(frozen=True)
class SessionInfo:
    """
    DTO for the session snapshot supplied by the external session tracker.
    All timestamps are epoch milliseconds.
    """
    session_start_time: Optional[int]
    session_last_event_time: Optional[int]
    disk_restore_time: int = 0
    interruption_count: int = 0
    source_application_info: Optional[SourceApplicationInfo] = None

    @property
    def session_length(self) -> int:
        # Not clamped here; a negative length is reported as clock skew by the caller
        if self.session_start_time is None or self.session_last_event_time is None:
            return 0
        return self.session_last_event_time - self.session_start_time
