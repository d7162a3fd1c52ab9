"""Calendar configuration."""

import os
from dataclasses import dataclass

DEFAULT_BACKEND_URL = "http://localhost:3001"


@dataclass
class CalendarConfig:
    """Configuration for the calendar scheduler and backend client."""

    backend_url: str = DEFAULT_BACKEND_URL
    grid_minutes: int = 15
    min_duration_minutes: int = 15
    max_duration_minutes: int = 720  # 12 hours

    # None leaves commits unbounded
    commit_timeout_seconds: float | None = None
    request_timeout_seconds: float = 30.0

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "CalendarConfig":
        """Build configuration from environment variables."""
        commit_timeout = os.getenv("CLINIC_COMMIT_TIMEOUT")
        return cls(
            backend_url=os.getenv("CLINIC_BACKEND_URL", DEFAULT_BACKEND_URL).rstrip("/"),
            commit_timeout_seconds=float(commit_timeout) if commit_timeout else None,
            request_timeout_seconds=float(os.getenv("CLINIC_REQUEST_TIMEOUT", "30")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def build_api_url(self, endpoint: str) -> str:
        """Join an endpoint path onto the backend base URL."""
        clean_endpoint = endpoint[1:] if endpoint.startswith("/") else endpoint
        return f"{self.backend_url.rstrip('/')}/{clean_endpoint}"
