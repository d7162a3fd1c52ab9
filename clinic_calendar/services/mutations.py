"""Optimistic mutation coordinator: snapshot, apply, commit, keep or restore."""

import asyncio
from collections.abc import Awaitable, Callable, Iterable

from clinic_calendar.errors import (
    CommitError,
    InvalidIntervalError,
    MutationInFlightError,
    UnknownIntervalError,
)
from clinic_calendar.models.interval import TimeInterval
from clinic_calendar.models.mutation import MutationKind, MutationOutcome, PendingMutation
from clinic_calendar.utils.logging import get_logger

logger = get_logger(__name__)

CommitCallable = Callable[[], Awaitable[None]]


class MutationCoordinator:
    """Owns the loaded interval collection and applies changes optimistically.

    Each proposal is applied locally right away, then committed remotely.
    A failed or timed-out commit puts the collection back the way it was.
    Only one mutation per interval id may be committing at a time.
    """

    def __init__(self, intervals: Iterable[TimeInterval] = (), commit_timeout: float | None = None):
        """Initialize the coordinator.

        Args:
            intervals: Intervals of the loaded date window
            commit_timeout: Seconds before a commit is abandoned, None for no limit
        """
        self._intervals: list[TimeInterval] = list(intervals)
        self.commit_timeout = commit_timeout
        self._in_flight: dict[str, PendingMutation] = {}
        self._version = 0

    @property
    def intervals(self) -> tuple[TimeInterval, ...]:
        """Current collection, including unconfirmed optimistic changes."""
        return tuple(self._intervals)

    def get(self, interval_id: str) -> TimeInterval:
        """Return the current interval with this id."""
        for interval in self._intervals:
            if interval.id == interval_id:
                return interval
        raise UnknownIntervalError(interval_id)

    def is_in_flight(self, interval_id: str) -> bool:
        return interval_id in self._in_flight

    def settled_intervals(self) -> list[TimeInterval]:
        """Collection as last confirmed, with every in-flight change reverted."""
        settled: list[TimeInterval] = []
        for interval in self._intervals:
            pending = self._in_flight.get(interval.id)
            if pending is None:
                settled.append(interval)
            elif pending.original is not None:
                settled.append(pending.original)

        # Deletes still committing are no longer in the list
        present = {interval.id for interval in self._intervals}
        for interval_id, pending in self._in_flight.items():
            if interval_id not in present and pending.original is not None:
                settled.append(pending.original)

        return settled

    def replace_all(self, intervals: Iterable[TimeInterval]) -> None:
        """Replace the collection, e.g. after reloading from the backend."""
        if self._in_flight:
            raise MutationInFlightError(next(iter(self._in_flight)))
        self._intervals = list(intervals)
        self._version += 1

    async def propose(
        self,
        kind: MutationKind,
        interval: TimeInterval,
        commit: CommitCallable,
    ) -> MutationOutcome:
        """Apply a change locally, commit it remotely, roll back on failure.

        Args:
            kind: Type of change
            interval: New interval for create/move/resize, the interval to remove for delete
            commit: Zero-argument coroutine function persisting the change

        Returns:
            Outcome of the commit; failures carry a CommitError

        Raises:
            MutationInFlightError: If this interval is already committing
            UnknownIntervalError: If move/resize/delete targets an unloaded id
        """
        if interval.id in self._in_flight:
            logger.warning(f"Rejected {kind} for {interval.id}: a change is already committing")
            raise MutationInFlightError(interval.id)

        mutation = self._apply(kind, interval)
        self._in_flight[interval.id] = mutation
        applied_version = self._version
        logger.info(f"Applied {kind} for {interval.id} optimistically, committing")

        try:
            if self.commit_timeout is None:
                await commit()
            else:
                await asyncio.wait_for(commit(), timeout=self.commit_timeout)
        except asyncio.CancelledError:
            self._rollback(mutation, restore_snapshot=self._version == applied_version)
            logger.warning(f"Commit of {kind} for {interval.id} was cancelled, rolled back")
            raise
        except Exception as e:
            self._rollback(mutation, restore_snapshot=self._version == applied_version)
            if isinstance(e, TimeoutError) and self.commit_timeout is not None:
                message = f"Saving timed out after {self.commit_timeout:g}s"
            else:
                message = str(e) or e.__class__.__name__
            logger.warning(f"Commit of {kind} for {interval.id} failed, rolled back: {message}")
            error = CommitError(message, mutation)
            error.__cause__ = e
            return MutationOutcome(success=False, mutation=mutation, error=error)
        finally:
            del self._in_flight[interval.id]

        logger.info(f"Committed {kind} for {interval.id}")
        return MutationOutcome(success=True, mutation=mutation)

    def _apply(self, kind: MutationKind, interval: TimeInterval) -> PendingMutation:
        snapshot = tuple(self._intervals)
        original = None

        if kind is MutationKind.CREATE:
            if any(existing.id == interval.id for existing in self._intervals):
                raise InvalidIntervalError(f"Appointment {interval.id} already exists")
            self._intervals.append(interval)
        else:
            index = self._index_of(interval.id)
            original = self._intervals[index]
            if kind is MutationKind.DELETE:
                del self._intervals[index]
            else:
                self._intervals[index] = interval

        self._version += 1
        return PendingMutation(
            kind=kind,
            proposed=None if kind is MutationKind.DELETE else interval,
            original=original,
            snapshot=snapshot,
        )

    def _rollback(self, mutation: PendingMutation, restore_snapshot: bool) -> None:
        if restore_snapshot:
            self._intervals = list(mutation.snapshot)
            self._version += 1
            return

        # Other changes landed since this one was applied; revert only this id
        interval_id = mutation.interval_id
        current = [interval for interval in self._intervals if interval.id != interval_id]
        if mutation.original is not None:
            position = next(
                (i for i, interval in enumerate(mutation.snapshot) if interval.id == interval_id),
                len(current),
            )
            current.insert(min(position, len(current)), mutation.original)
        self._intervals = current
        self._version += 1

    def _index_of(self, interval_id: str) -> int:
        for index, interval in enumerate(self._intervals):
            if interval.id == interval_id:
                return index
        raise UnknownIntervalError(interval_id)
