"""
Scoped Object Lifecycle.

Create a record on entry and delete it on every exit path, so a scenario
that fails halfway never leaves its record behind on the server.

Usage:
    async with scoped_object(client, request) as record:
        fetched = await client.get_by_id(record.id)
        assert fetched.name == request.name
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from objects_api.client.client import ObjectsClient
from objects_api.core.exceptions import ObjectsAPIError, RequestFailed
from objects_api.core.logging import get_logger
from objects_api.models.objects import CreateOrReplaceRequest, ObjectRecord

logger = get_logger(__name__)


async def release_object(client: ObjectsClient, object_id: str) -> bool:
    """
    Delete a record, logging instead of raising on failure.

    Returns:
        True if this call deleted the record
    """
    try:
        await client.delete(object_id)
    except RequestFailed as e:
        if e.is_not_found:
            logger.debug("Cleanup skipped, object already gone", object_id=object_id)
        else:
            logger.warning(
                "Cleanup delete failed",
                object_id=object_id,
                status_code=e.status_code,
                body=e.body,
            )
        return False
    except (ObjectsAPIError, httpx.HTTPError) as e:
        logger.warning("Cleanup delete failed", object_id=object_id, error=str(e))
        return False
    return True


@asynccontextmanager
async def scoped_object(
    client: ObjectsClient,
    request: CreateOrReplaceRequest,
) -> AsyncIterator[ObjectRecord]:
    """
    Create a record for the duration of the block.

    A failed create raises before the block runs and leaves nothing to
    clean up. Cleanup failures are logged and never replace an exception
    raised inside the block.
    """
    record = await client.create(request)
    try:
        yield record
    finally:
        await release_object(client, record.id)
