"""
Objects API Client.

Async typed client for the objects endpoints of restful-api.dev.
Every call is a single round trip; nothing is retried or cached.
"""

import json
from collections.abc import Iterable
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from objects_api.core.config import get_default_headers, get_server_base_url
from objects_api.core.exceptions import DecodeFailed, RequestFailed, RequestTimeout
from objects_api.core.logging import get_logger
from objects_api.models.objects import (
    CreateOrReplaceRequest,
    ObjectRecord,
    PartialUpdateRequest,
)
from objects_api.models.responses import DeleteOutcome, RawResponse

logger = get_logger(__name__)

T = TypeVar("T")

OBJECTS_PATH = "/objects"

_record_adapter = TypeAdapter(ObjectRecord)
_record_list_adapter = TypeAdapter(list[ObjectRecord])


def _object_path(object_id: str) -> str:
    """Path of one record, with the id percent-encoded as a single segment."""
    if not object_id:
        raise ValueError("object_id must not be empty")
    return f"{OBJECTS_PATH}/{quote(object_id, safe='')}"


class ObjectsClient:
    """
    Typed client for the objects API.

    Features:
    - Base URL, timeout and headers from config/settings/application.yaml
    - Non-success statuses raised as RequestFailed
    - Bodies decoded into ObjectRecord, failures raised as DecodeFailed
    - Timeouts raised as RequestTimeout

    Usage:
        async with ObjectsClient() as client:
            records = await client.list_all()
            created = await client.create(CreateOrReplaceRequest(name="Pixel 8"))
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: API base URL. If None, reads from application.yaml.
            timeout: Request timeout in seconds. If None, reads from application.yaml.
            headers: Default headers. If None, reads from application.yaml.
            transport: Optional httpx transport, used to stub the server in tests.
        """
        if base_url is None or timeout is None:
            config_base_url, config_timeout = get_server_base_url()
            base_url = base_url or config_base_url
            timeout = timeout if timeout is not None else config_timeout

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = headers if headers is not None else get_default_headers()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "ObjectsClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Send one request and return the response without checking its status.

        Raises:
            RequestTimeout: If no response arrives within the timeout
            httpx.HTTPError: On any other transport failure
        """
        client = await self._get_client()
        logger.debug("API request", method=method, path=path)

        try:
            response = await client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.error("API request timed out", method=method, path=path, timeout=self.timeout)
            raise RequestTimeout(method, path, self.timeout) from e
        except httpx.HTTPError as e:
            logger.error("API request failed", method=method, path=path, error=str(e))
            raise

        logger.debug("API response", method=method, path=path, status_code=response.status_code)
        return response

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request that must succeed."""
        response = await self.request(method, path, **kwargs)
        if not response.is_success:
            logger.warning(
                "API call unsuccessful",
                method=method,
                path=path,
                status_code=response.status_code,
            )
            raise RequestFailed(
                method,
                path,
                response.status_code,
                body=response.text,
                allow=response.headers.get("allow"),
            )
        return response

    @staticmethod
    def _decode(response: httpx.Response, adapter: TypeAdapter[T], expected: str) -> T:
        path = response.request.url.path
        try:
            return adapter.validate_python(response.json())
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeFailed(path, expected, response.text, f"invalid JSON: {e}") from e
        except ValidationError as e:
            raise DecodeFailed(path, expected, response.text, str(e)) from e

    async def list_all(self) -> list[ObjectRecord]:
        """GET /objects. An empty list is a valid answer."""
        response = await self._send("GET", OBJECTS_PATH)
        return self._decode(response, _record_list_adapter, "list[ObjectRecord]")

    async def list_by_ids(self, ids: Iterable[str]) -> list[ObjectRecord]:
        """GET /objects?id=..&id=.. for a subset of records."""
        params = [("id", object_id) for object_id in ids]
        response = await self._send("GET", OBJECTS_PATH, params=params)
        return self._decode(response, _record_list_adapter, "list[ObjectRecord]")

    async def get_by_id(self, object_id: str) -> ObjectRecord:
        """
        GET /objects/{id}.

        Raises:
            RequestFailed: On any non-success status, 404 included
            ValueError: If object_id is empty
        """
        response = await self._send("GET", _object_path(object_id))
        return self._decode(response, _record_adapter, "ObjectRecord")

    async def get_by_id_raw(self, object_id: str) -> RawResponse:
        """GET /objects/{id} without raising on the status code."""
        response = await self.request("GET", _object_path(object_id))
        return RawResponse(
            status_code=response.status_code,
            text=response.text,
            headers=response.headers,
        )

    async def create(self, request: CreateOrReplaceRequest) -> ObjectRecord:
        """POST /objects. Returns the record with its server-assigned id."""
        response = await self._send("POST", OBJECTS_PATH, json=request.to_wire())
        record = self._decode(response, _record_adapter, "ObjectRecord")
        logger.info("Object created", object_id=record.id, name=record.name)
        return record

    async def replace(self, object_id: str, request: CreateOrReplaceRequest) -> ObjectRecord:
        """PUT /objects/{id}. Replaces name and data entirely."""
        response = await self._send("PUT", _object_path(object_id), json=request.to_wire())
        record = self._decode(response, _record_adapter, "ObjectRecord")
        logger.info("Object replaced", object_id=record.id, name=record.name)
        return record

    async def update_partial(self, object_id: str, request: PartialUpdateRequest) -> ObjectRecord:
        """PATCH /objects/{id}. Sends only the members that are set."""
        response = await self._send("PATCH", _object_path(object_id), json=request.to_wire())
        record = self._decode(response, _record_adapter, "ObjectRecord")
        logger.info("Object updated", object_id=record.id)
        return record

    async def delete(self, object_id: str) -> DeleteOutcome:
        """DELETE /objects/{id}. This API answers 200 OK with a message."""
        response = await self._send("DELETE", _object_path(object_id))
        message = None
        try:
            body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            body = None
        if isinstance(body, dict) and isinstance(body.get("message"), str):
            message = body["message"]
        logger.info("Object deleted", object_id=object_id, status_code=response.status_code)
        return DeleteOutcome(status_code=response.status_code, message=message)

