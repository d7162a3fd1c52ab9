"""API endpoints for the calendar scheduling service."""

from datetime import UTC, datetime

from fastapi import APIRouter, HTTPException

from clinic_calendar import __version__
from clinic_calendar.errors import CalendarError, DurationError
from clinic_calendar.models.api import (
    ConflictRequest,
    ConflictResponse,
    GroupPayload,
    HealthResponse,
    IntervalPayload,
    LayoutRequest,
    LayoutResponse,
    SlotPayload,
    SnapRequest,
    SnapResponse,
)
from clinic_calendar.services.conflicts import find_conflicts
from clinic_calendar.services.layout import group_overlaps
from clinic_calendar.services.snapping import clamp_duration, snap_drag_result, snap_resize_result
from clinic_calendar.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/conflicts", response_model=ConflictResponse, tags=["Scheduling"])
async def check_conflicts(request: ConflictRequest) -> ConflictResponse:
    """Return the existing appointments a candidate interval overlaps."""
    try:
        candidate = request.candidate.to_interval()
        existing = [payload.to_interval() for payload in request.existing]
        conflicts = find_conflicts(candidate, existing, exclude_id=request.exclude_id)
    except (CalendarError, TypeError) as e:
        # TypeError: naive and timezone-aware times mixed across intervals
        raise HTTPException(status_code=400, detail=str(e)) from e

    logger.info(f"Conflict check for {candidate.id}: {len(conflicts)} conflict(s) in {len(existing)} intervals")
    return ConflictResponse(
        has_conflict=bool(conflicts),
        conflicts=[IntervalPayload.from_interval(interval) for interval in conflicts],
    )


@router.post("/layout", response_model=LayoutResponse, tags=["Scheduling"])
async def compute_layout(request: LayoutRequest) -> LayoutResponse:
    """Group overlapping appointments and assign side-by-side slots."""
    try:
        groups = group_overlaps([payload.to_interval() for payload in request.intervals])
    except (CalendarError, TypeError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return LayoutResponse(
        groups=[
            GroupPayload(members=[SlotPayload.model_validate(member.as_dict()) for member in group.members])
            for group in groups
        ]
    )


@router.post("/snap/move", response_model=SnapResponse, tags=["Scheduling"])
async def snap_move(request: SnapRequest) -> SnapResponse:
    """Snap a dragged appointment to the grid, keeping its length."""
    try:
        start, end = snap_drag_result(request.start, request.end)
        clamp_duration(start, end)
    except (DurationError, TypeError) as e:
        logger.warning(f"Rejected move {request.start.isoformat()} - {request.end.isoformat()}: {e}")
        raise HTTPException(status_code=400, detail=str(e)) from e
    return SnapResponse(start=start, end=end)


@router.post("/snap/resize", response_model=SnapResponse, tags=["Scheduling"])
async def snap_resize(request: SnapRequest) -> SnapResponse:
    """Snap a resized appointment end to the grid; the start is kept."""
    try:
        end = snap_resize_result(request.start, request.end)
        clamp_duration(request.start, end)
    except (DurationError, TypeError) as e:
        logger.warning(f"Rejected resize {request.start.isoformat()} - {request.end.isoformat()}: {e}")
        raise HTTPException(status_code=400, detail=str(e)) from e
    return SnapResponse(start=request.start, end=end)


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(UTC),
        version=__version__,
    )
