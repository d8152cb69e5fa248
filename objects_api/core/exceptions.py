"""
Client Exceptions.

Every failure of a client call reaches the caller as one of these:

- RequestFailed: the server answered with a non-success status
- DecodeFailed: the body does not match the expected shape
- RequestTimeout: no answer within the configured timeout

Usage:
    from objects_api.core.exceptions import RequestFailed

    try:
        record = await client.get_by_id(object_id)
    except RequestFailed as e:
        if e.status_code == 404:
            ...
"""


class ObjectsAPIError(Exception):
    """Base class for all client failures."""


class RequestFailed(ObjectsAPIError):
    """
    Non-success HTTP status where success was required.

    Attributes:
        method: HTTP method of the failed call
        path: Request path
        status_code: HTTP status code returned
        allow: Value of the Allow header, if the server sent one
        body: Raw response body
    """

    def __init__(
        self,
        method: str,
        path: str,
        status_code: int,
        body: str = "",
        allow: str | None = None,
    ):
        self.method = method
        self.path = path
        self.status_code = status_code
        self.body = body
        self.allow = allow
        super().__init__(
            f"{method} {path} returned {status_code}. "
            f"Allow: {allow or '<none>'}. Body: {body}"
        )

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class DecodeFailed(ObjectsAPIError):
    """Response body could not be decoded into the expected type."""

    def __init__(self, path: str, expected: str, body: str, reason: str):
        self.path = path
        self.expected = expected
        self.body = body
        self.reason = reason
        super().__init__(f"Could not decode {path} response as {expected}: {reason}")


class RequestTimeout(ObjectsAPIError):
    """No response within the configured timeout."""

    def __init__(self, method: str, path: str, timeout: float):
        self.method = method
        self.path = path
        self.timeout = timeout
        super().__init__(f"{method} {path} timed out after {timeout}s")
