"""
Response Shapes.

Untyped results of calls whose outcome is judged by status code rather
than by body.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx

HTTP_OK = 200
HTTP_NOT_FOUND = 404


@dataclass(frozen=True, slots=True)
class RawResponse:
    """
    Status and body of a response, returned without validation.

    Headers keep httpx's case-insensitive lookup, so "Allow" and "allow"
    find the same value.
    """

    status_code: int
    text: str
    headers: Mapping[str, str] = field(default_factory=httpx.Headers)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_not_found(self) -> bool:
        return self.status_code == HTTP_NOT_FOUND

    def json(self) -> Any:
        return json.loads(self.text)


@dataclass(frozen=True, slots=True)
class DeleteOutcome:
    """Confirmation of a successful delete."""

    status_code: int
    message: str | None = None

    @property
    def is_ok(self) -> bool:
        """True for 200 OK, the only status this API uses for deletes."""
        return self.status_code == HTTP_OK
