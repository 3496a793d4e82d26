"""API errors and the per-request debug log returned to clients."""

import json
import logging
import time
from datetime import UTC, datetime
from typing import Any


class APIError(Exception):
    """An error response: {error, details?, logs?, timeTaken?}."""

    def __init__(
        self,
        status_code: int,
        error: str,
        details: str | None = None,
        logs: list[str] | None = None,
        time_taken: str | None = None,
    ):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.details = details
        self.logs = logs
        self.time_taken = time_taken

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        if self.logs is not None:
            body["logs"] = self.logs
        if self.time_taken is not None:
            body["timeTaken"] = self.time_taken
        return body


class RequestLog:
    """Timestamped messages for one request, mirrored to the module logger."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.entries: list[str] = []
        self.started = time.monotonic()

    def __call__(self, message: str, data: Any = None) -> str:
        entry = f"[{datetime.now(UTC).isoformat()}] {message}"
        if data is not None:
            entry = f"{entry}: {json.dumps(data, default=str)}"
        self.logger.info(entry)
        self.entries.append(entry)
        return entry

    def elapsed(self) -> str:
        return f"{time.monotonic() - self.started:.2f}s"

    def error(
        self,
        status_code: int,
        error: str,
        details: str | None = None,
        timed: bool = True,
    ) -> APIError:
        """Build an APIError carrying this log."""
        self(error if details is None else f"{error}: {details}")
        return APIError(
            status_code,
            error,
            details=details,
            logs=list(self.entries),
            time_taken=self.elapsed() if timed else None,
        )
