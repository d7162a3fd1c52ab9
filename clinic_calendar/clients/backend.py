"""Clinic backend REST client for calendar events."""

from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from clinic_calendar.config import CalendarConfig
from clinic_calendar.errors import BackendError, InvalidIntervalError
from clinic_calendar.models.calendar import CalendarEvent, EventsEnvelope, StatusEnvelope
from clinic_calendar.models.interval import TimeInterval
from clinic_calendar.models.mutation import MutationKind
from clinic_calendar.utils.logging import get_logger

logger = get_logger(__name__)


class BackendClient:
    """Async client for the clinic backend calendar endpoints.

    Every write answers with a `{success, error?}` envelope; a false
    `success` or a non-2xx status raises BackendError. Requests are sent
    once, failures are reported to the caller and never retried here.
    """

    def __init__(self, config: CalendarConfig | None = None, http_client: httpx.AsyncClient | None = None):
        """Initialize backend client.

        Args:
            config: Calendar configuration (defaults to environment)
            http_client: Preconfigured httpx client, mainly for tests
        """
        self.config = config or CalendarConfig.from_env()
        self.client = http_client or httpx.AsyncClient(timeout=self.config.request_timeout_seconds)

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def get_status(self, user_id: str) -> bool:
        """Return whether the user's calendar is connected."""
        data = await self._request("GET", f"calendar/status/{user_id}", check_envelope=False)
        return StatusEnvelope.model_validate(data).connected

    async def fetch_events(self, user_id: str) -> list[CalendarEvent]:
        """Fetch the user's calendar events."""
        data = await self._request("GET", f"calendar/events/{user_id}", check_envelope=False)
        envelope = EventsEnvelope.model_validate(data)
        if not envelope.success:
            raise BackendError(envelope.error or "Failed to fetch events")
        logger.info(f"Fetched {len(envelope.events)} events for user {user_id}")
        return envelope.events

    async def fetch_intervals(self, user_id: str) -> list[TimeInterval]:
        """Fetch the user's events as intervals.

        Events that cannot be placed on the grid, such as zero-length
        reminders, are skipped with a warning.
        """
        intervals = []
        for event in await self.fetch_events(user_id):
            try:
                intervals.append(event.to_interval())
            except InvalidIntervalError as e:
                logger.warning(f"Skipping event {event.id}: {e}")
        return intervals

    async def create_event(self, user_id: str, interval: TimeInterval) -> dict[str, Any]:
        """Create an event for an interval."""
        payload = CalendarEvent.from_interval(interval).to_payload()
        return await self._request("POST", f"calendar/events/{user_id}", json=payload)

    async def update_event(self, user_id: str, interval: TimeInterval) -> dict[str, Any]:
        """Update the times of an existing event."""
        payload = CalendarEvent.from_interval(interval).to_payload()
        return await self._request("PUT", f"calendar/events/{user_id}/{interval.id}", json=payload)

    async def delete_event(self, user_id: str, event_id: str) -> dict[str, Any]:
        """Delete an event."""
        return await self._request("DELETE", f"calendar/events/{user_id}/{event_id}")

    def commit_for(
        self, user_id: str, kind: MutationKind, interval: TimeInterval
    ) -> Callable[[], Awaitable[None]]:
        """Build the commit callable that persists a mutation."""

        async def commit() -> None:
            if kind is MutationKind.CREATE:
                await self.create_event(user_id, interval)
            elif kind is MutationKind.DELETE:
                await self.delete_event(user_id, interval.id)
            else:
                await self.update_event(user_id, interval)

        return commit

    async def _request(
        self,
        method: str,
        endpoint: str,
        json: dict[str, Any] | None = None,
        check_envelope: bool = True,
    ) -> dict[str, Any]:
        url = self.config.build_api_url(endpoint)
        logger.debug(f"{method} {url}")

        try:
            response = await self.client.request(method, url, json=json)
        except httpx.HTTPError as e:
            logger.error(f"Backend request {method} {url} failed: {e}", exc_info=True)
            raise BackendError(f"Could not reach the clinic backend: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.is_error:
            message = data.get("error") if isinstance(data, dict) else None
            logger.error(f"Backend request {method} {url} returned {response.status_code}: {message}")
            raise BackendError(message or f"Backend returned {response.status_code}", response.status_code)

        if not isinstance(data, dict):
            raise BackendError("Unexpected response from the clinic backend", response.status_code)

        if check_envelope and not data.get("success", False):
            raise BackendError(data.get("error") or "Request was rejected by the clinic backend", response.status_code)

        return data
