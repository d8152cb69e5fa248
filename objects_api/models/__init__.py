"""
Entity Model.

Typed views of the JSON exchanged with the objects API.

- objects: records, data payloads and outbound requests (pydantic)
- responses: raw response and delete outcome (dataclasses)
"""
