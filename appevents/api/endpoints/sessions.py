"""
FastAPI endpoints for session lifecycle events.

The session tracker reports activations and deactivations here; the backend
assembles the events (quanta, fingerprint, clock-skew handling) and queues them.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from functools import lru_cache
import logging

from ...config import Settings, get_settings
from ...services.session_logger import (
    SessionInfo,
    SessionLogger,
    SourceApplicationInfo,
    build_session_logger,
)
from ...services.session_logger.event_logger import EventRecord

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


@lru_cache(maxsize=1)
def get_session_logger() -> SessionLogger:
    """Process-wide SessionLogger built from settings (singleton)"""
    return build_session_logger(get_settings())


# --- REQUEST/RESPONSE MODELS ---

class SourceApplication(BaseModel):
    """How the session was opened"""
    calling_application_package: Optional[str] = Field(None, description="Package that launched the app")
    opened_by_app_link: bool = Field(False, description="Session opened through an app link")

    def to_info(self) -> SourceApplicationInfo:
        return SourceApplicationInfo(
            calling_application_package=self.calling_application_package,
            opened_by_app_link=self.opened_by_app_link,
        )


class SessionSnapshot(BaseModel):
    """Session state from the tracker; all timestamps in epoch milliseconds"""
    session_start_time: Optional[int] = Field(None, description="Session start (ms)")
    session_last_event_time: Optional[int] = Field(None, description="Last event / session end (ms)")
    disk_restore_time: int = Field(0, description="When the session was restored from disk (ms)")
    interruption_count: int = Field(0, ge=0, description="Interruptions during the session")
    source_application: Optional[SourceApplication] = None

    def to_info(self) -> SessionInfo:
        return SessionInfo(
            session_start_time=self.session_start_time,
            session_last_event_time=self.session_last_event_time,
            disk_restore_time=self.disk_restore_time,
            interruption_count=self.interruption_count,
            source_application_info=(
                self.source_application.to_info() if self.source_application else None
            ),
        )


class ActivateRequest(BaseModel):
    activity_name: str = Field(..., description="Activity/screen that became active")
    app_id: Optional[str] = Field(None, description="Overrides the configured app id")
    source_application: Optional[SourceApplication] = None


class DeactivateRequest(BaseModel):
    activity_name: str = Field(..., description="Activity/screen that was deactivated")
    app_id: Optional[str] = Field(None, description="Overrides the configured app id")
    session: Optional[SessionSnapshot] = Field(None, description="Omitted when there is nothing to deactivate")


class EventResponse(BaseModel):
    event_name: str
    value_to_sum: Optional[float] = None
    parameters: Dict[str, Any]
    activity_name: Optional[str] = None
    app_id: Optional[str] = None
    log_time: float

    @classmethod
    def from_record(cls, record: EventRecord) -> "EventResponse":
        return cls(**record.to_dict())


class DeactivateResponse(BaseModel):
    logged: bool
    event: Optional[EventResponse] = None


class FlushResponse(BaseModel):
    flushed: int


# --- ENDPOINTS ---

@router.post("/activate", response_model=EventResponse)
async def activate(
    request: ActivateRequest,
    session_logger: SessionLogger = Depends(get_session_logger),
    settings: Settings = Depends(get_settings),
):
    """Logs the app-activated event with attribution, package fingerprint and cert hash."""
    app_id = request.app_id or settings.app_id

    logger.info(f"Activate for activity {request.activity_name}")

    try:
        record = session_logger.log_activate_app(
            request.activity_name,
            request.source_application.to_info() if request.source_application else None,
            app_id,
            package_name=settings.package_name,
        )
        return EventResponse.from_record(record)

    except Exception as e:
        logger.error(f"Activate logging failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Session logging error: {str(e)}")


@router.post("/deactivate", response_model=DeactivateResponse)
async def deactivate(
    request: DeactivateRequest,
    session_logger: SessionLogger = Depends(get_session_logger),
    settings: Settings = Depends(get_settings),
):
    """Logs the app-deactivated event; a request without a session is a no-op."""
    app_id = request.app_id or settings.app_id

    try:
        record = session_logger.log_deactivate_app(
            request.activity_name,
            request.session.to_info() if request.session else None,
            app_id,
        )
    except Exception as e:
        logger.error(f"Deactivate logging failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Session logging error: {str(e)}")

    if record is None:
        logger.debug(f"No session to deactivate for activity {request.activity_name}")
        return DeactivateResponse(logged=False)

    return DeactivateResponse(logged=True, event=EventResponse.from_record(record))


@router.get("/events", response_model=List[EventResponse])
async def recent_events(
    limit: int = Query(20, ge=1, le=500),
    session_logger: SessionLogger = Depends(get_session_logger),
):
    """Most recently queued events, oldest first"""
    return [EventResponse.from_record(r) for r in session_logger.events_queue.recent(limit)]


@router.post("/flush", response_model=FlushResponse)
async def flush(session_logger: SessionLogger = Depends(get_session_logger)):
    """Explicit flush, the only flush under the explicit_only policy"""
    return FlushResponse(flushed=session_logger.events_queue.flush())


@router.get("/health")
async def health_check():
    """Check if session logging services are available"""
    return {
        "status": "healthy",
        "services": {
            "session_logger": "available",
            "fingerprint_cache": "available",
        }
    }
