"""
Typed Client Module.

Async HTTP client for the restful-api.dev objects endpoints.

Architecture:
- ObjectsClient owns base URL, timeout and default headers
- One method per CRUD verb, each a single round trip with no retry
- Responses are decoded into objects_api.models types
- scoped_object pairs a create with a guaranteed delete

Usage:
    async with ObjectsClient() as client:
        async with scoped_object(client, request) as record:
            fetched = await client.get_by_id(record.id)
"""
