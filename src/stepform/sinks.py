"""External collaborators at the form's boundary.

- Submission sinks receive the final values and return a payload, or
  raise. Any callable works; ``HTTPSubmissionSink`` posts JSON with httpx.
- Prefill sources supply initial values at construction and reset time.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

import httpx

from stepform.errors import SubmissionError

logger = logging.getLogger("stepform.sinks")


@runtime_checkable
class SubmissionSink(Protocol):
    """Anything with an async ``submit(values)``."""

    async def submit(self, values: Mapping[str, str]) -> Any: ...


@runtime_checkable
class PrefillSource(Protocol):
    """Supplies initial values, e.g. previously known profile data."""

    def load(self) -> Mapping[str, str]: ...


@dataclass(frozen=True, slots=True)
class MappingPrefill:
    """Prefill from a plain mapping. Non-string values are stringified."""

    data: Mapping[str, object]

    def load(self) -> Mapping[str, str]:
        return {key: "" if value is None else str(value) for key, value in self.data.items()}


@dataclass(frozen=True, slots=True)
class HTTPSubmissionSink:
    """POST form values as JSON and return the decoded response body.

    Usage::

        sink = HTTPSubmissionSink("https://api.example.com/bookings",
                                  headers={"Authorization": f"Bearer {token}"})
        result = await form.handle_submit(sink)

    Transport failures and non-2xx responses raise ``SubmissionError``.
    ``transport`` is passed to ``httpx.AsyncClient`` (tests use
    ``httpx.MockTransport``).
    """

    url: str
    method: str = "POST"
    headers: Mapping[str, str] = field(default_factory=dict)
    timeout: float = 30.0
    transport: httpx.AsyncBaseTransport | None = None

    async def submit(self, values: Mapping[str, str]) -> Any:
        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
                response = await client.request(
                    self.method,
                    self.url,
                    json=dict(values),
                    headers=dict(self.headers),
                )
        except httpx.HTTPError as exc:
            msg = f"Submission to {self.url} failed: {exc}"
            raise SubmissionError(msg, original=exc, detail=str(exc)) from exc

        if not response.is_success:
            logger.debug("Sink %s returned %d", self.url, response.status_code)
            msg = f"Submission to {self.url} returned {response.status_code}"
            raise SubmissionError(msg, status=response.status_code, detail=response.text)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            msg = f"Submission to {self.url} returned a non-JSON body"
            raise SubmissionError(msg, original=exc, status=response.status_code, detail=response.text) from exc

    async def __call__(self, values: Mapping[str, str]) -> Any:
        return await self.submit(values)
