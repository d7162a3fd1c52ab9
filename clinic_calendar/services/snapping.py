"""Grid snapping and duration bounds for drag and resize gestures.

All times are rounded on their millisecond epoch value, so snapping is
independent of the timezone the interval is displayed in. Naive datetimes
are treated as UTC for the arithmetic and returned naive.
"""

from datetime import UTC, datetime, timedelta

from clinic_calendar.errors import DurationTooLongError, DurationTooShortError

GRID_MINUTES = 15
MIN_DURATION_MINUTES = 15
MAX_DURATION_MINUTES = 720

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_EPOCH_NAIVE = datetime(1970, 1, 1)
_MILLISECOND = timedelta(milliseconds=1)


def _epoch_ms(timestamp: datetime) -> int:
    epoch = _EPOCH_NAIVE if timestamp.tzinfo is None else _EPOCH
    return (timestamp - epoch) // _MILLISECOND


def _from_epoch_ms(ms: int, like: datetime) -> datetime:
    if like.tzinfo is None:
        return _EPOCH_NAIVE + timedelta(milliseconds=ms)
    return (_EPOCH + timedelta(milliseconds=ms)).astimezone(like.tzinfo)


def snap_to_grid(timestamp: datetime, granularity_minutes: int = GRID_MINUTES) -> datetime:
    """Round a timestamp to the nearest multiple of the grid, half up.

    Args:
        timestamp: Time to round
        granularity_minutes: Grid size in minutes

    Returns:
        The nearest grid boundary, in the same timezone as the input
    """
    step = granularity_minutes * 60_000
    ms = _epoch_ms(timestamp)
    snapped = (ms + step // 2) // step * step
    return _from_epoch_ms(snapped, timestamp)


def clamp_duration(
    start: datetime,
    end: datetime,
    min_minutes: int = MIN_DURATION_MINUTES,
    max_minutes: int = MAX_DURATION_MINUTES,
) -> tuple[datetime, datetime]:
    """Check an interval length against the allowed bounds.

    Out-of-range lengths are rejected, never adjusted.

    Raises:
        DurationTooShortError: If the interval is shorter than min_minutes
        DurationTooLongError: If the interval is longer than max_minutes
    """
    minutes = (end - start) / timedelta(minutes=1)
    if minutes < min_minutes:
        raise DurationTooShortError(minutes, min_minutes)
    if minutes > max_minutes:
        raise DurationTooLongError(minutes, max_minutes)
    return start, end


def snap_drag_result(
    raw_start: datetime, raw_end: datetime, granularity_minutes: int = GRID_MINUTES
) -> tuple[datetime, datetime]:
    """Snap a moved interval, keeping its length exactly.

    Only the start is snapped; the end is the snapped start plus the
    original duration.
    """
    duration = raw_end - raw_start
    start = snap_to_grid(raw_start, granularity_minutes)
    return start, start + duration


def snap_resize_result(
    start: datetime,
    raw_end: datetime,
    granularity_minutes: int = GRID_MINUTES,
    min_minutes: int = MIN_DURATION_MINUTES,
) -> datetime:
    """Snap a resized end time, never ending before start + min_minutes.

    Rounding is to the nearest boundary, so 14:52 snaps to 14:45 and
    14:53 to 15:00. DESIGN.md ("Resize scenario 3") records why an end
    dragged to 14:52 does not land on 15:00.
    """
    floor = start + timedelta(minutes=min_minutes)
    end = snap_to_grid(raw_end, granularity_minutes)
    return end if end >= floor else floor
