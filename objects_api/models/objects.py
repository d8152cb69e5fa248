"""
Object Models.

Pydantic models for records returned by the objects API and the request
bodies sent to it.

Wire names are kept exactly as the API uses them, spaces and capitals
included ("CPU model", "Hard disk size"). Decoding matches property names
case-insensitively, so a known attribute sent as "Capacity" or
"Screen size" is read into its field and written back under the field's
wire name ("capacity", "screen size"). A key is only folded onto a field
when the payload does not also carry that field's exact wire name; the
other spellings stay extras. Unknown payload attributes, nulls included,
are kept verbatim.
"""

import math
from datetime import datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    field_validator,
    model_serializer,
    model_validator,
)

from objects_api.core.utils import from_epoch_millis, to_epoch_millis

Scalar = str | int | float | bool


class WireModel(BaseModel):
    """Base model that resolves wire property names case-insensitively."""

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _match_wire_names(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        wire_names = {
            (field.alias or name).lower(): field.alias or name
            for name, field in cls.model_fields.items()
        }
        matched = {}
        for key, item in value.items():
            if isinstance(key, str) and key not in cls.model_fields:
                wire_name = wire_names.get(key.lower())
                if wire_name is not None and wire_name not in value and wire_name not in matched:
                    key = wire_name
            matched[key] = item
        return matched

    @model_serializer(mode="wrap")
    def _omit_absent_fields(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        # Declared fields holding None are dropped; extras keep explicit nulls.
        dumped = handler(self)
        extras = self.model_extra or {}
        return {key: item for key, item in dumped.items() if item is not None or key in extras}

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict using wire names, absent members omitted."""
        return self.model_dump(mode="json", by_alias=True)


class DataPayload(WireModel):
    """
    Open set of attributes nested in a record.

    The known attributes below are typed conveniences; any other key the
    server sends is kept as an extra and written back unchanged.
    """

    model_config = ConfigDict(extra="allow")

    __pydantic_extra__: dict[str, Scalar | None]

    year: Scalar | None = None
    price: Scalar | None = None
    cpu_model: Scalar | None = Field(default=None, alias="CPU model")
    hard_disk_size: Scalar | None = Field(default=None, alias="Hard disk size")
    color: Scalar | None = None
    capacity: Scalar | None = None
    screen_size: Scalar | None = Field(default=None, alias="screen size")
    generation: Scalar | None = Field(default=None, alias="Generation")

    @property
    def price_value(self) -> float | None:
        """Price as a number; None when missing or not numeric."""
        if self.price is None or isinstance(self.price, bool):
            return None
        if isinstance(self.price, (int, float)):
            return float(self.price)
        try:
            value = float(self.price)
        except ValueError:
            return None
        return value if math.isfinite(value) else None

    def get(self, wire_name: str, default: Any = None) -> Any:
        """Look up any attribute by its wire name, ignoring case."""
        lowered = wire_name.lower()
        for key, value in self.to_wire().items():
            if key.lower() == lowered:
                return value
        return default


class ObjectRecord(WireModel):
    """A record as stored and returned by the server."""

    id: str = Field(min_length=1)
    name: str
    data: DataPayload | None = None
    created_at_millis: int | None = Field(default=None, alias="createdAt")
    updated_at_millis: int | None = Field(default=None, alias="updatedAt")

    @field_validator("created_at_millis", "updated_at_millis", mode="before")
    @classmethod
    def _accept_iso_timestamps(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.lstrip("-").isdigit():
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
            return to_epoch_millis(parsed)
        return value

    @property
    def created_at(self) -> datetime | None:
        return from_epoch_millis(self.created_at_millis)

    @property
    def updated_at(self) -> datetime | None:
        return from_epoch_millis(self.updated_at_millis)


class CreateOrReplaceRequest(WireModel):
    """Body for POST /objects and PUT /objects/{id}."""

    name: str
    data: DataPayload | None = None


class PartialUpdateRequest(WireModel):
    """Body for PATCH /objects/{id}; only members that are set are sent."""

    name: str | None = None
    data: DataPayload | None = None
