from typing import Any, ClassVar, Literal

from pydantic import JsonValue, model_validator

from .base import BaseModelObject, ExternalId, Identifier, InternalId, RequestResource, ResponseResource


class AssetRequest(RequestResource):
    container_fields: ClassVar[frozenset[str]] = frozenset({"metadata", "labels"})

    name: str
    external_id: str | None = None
    parent_id: int | None = None
    parent_external_id: str | None = None
    description: str | None = None
    metadata: dict[str, str] | None = None
    data_set_id: int | None = None
    source: str | None = None
    labels: list[dict[Literal["externalId"], str]] | None = None
    geo_location: dict[str, JsonValue] | None = None

    @model_validator(mode="after")
    def one_parent_reference(self) -> "AssetRequest":
        if self.parent_id is not None and self.parent_external_id is not None:
            raise ValueError("Only one of parentId and parentExternalId can be set")
        return self

    def as_id(self) -> ExternalId | None:
        return ExternalId(external_id=self.external_id) if self.external_id else None


class AssetUpdate(BaseModelObject):
    """A change to an existing asset, for example
    ``{"id": 123, "update": {"name": {"set": "New name"}}}``."""

    id: int | None = None
    external_id: str | None = None
    update: dict[str, dict[str, JsonValue]]

    @model_validator(mode="after")
    def exactly_one_identifier(self) -> "AssetUpdate":
        if (self.id is None) == (self.external_id is None):
            raise ValueError("Exactly one of id and externalId must be set")
        return self

    def as_id(self) -> Identifier:
        if self.id is not None:
            return InternalId(id=self.id)
        return ExternalId(external_id=self.external_id)  # type: ignore[arg-type]

    @classmethod
    def load(cls, change: "AssetUpdate | AssetRequest | dict[str, Any]") -> "AssetUpdate":
        if isinstance(change, AssetUpdate):
            return change
        elif isinstance(change, AssetRequest):
            return cls._load(change.as_update())
        return cls._load(change)


class Aggregates(BaseModelObject):
    child_count: int | None = None
    depth: int | None = None
    path: list[dict[str, int]] | None = None


class AssetResponse(ResponseResource[AssetRequest]):
    id: int
    name: str
    external_id: str | None = None
    parent_id: int | None = None
    parent_external_id: str | None = None
    description: str | None = None
    metadata: dict[str, str] | None = None
    data_set_id: int | None = None
    source: str | None = None
    labels: list[dict[Literal["externalId"], str]] | None = None
    geo_location: dict[str, JsonValue] | None = None
    created_time: int
    last_updated_time: int
    root_id: int | None = None
    aggregates: Aggregates | None = None

    def as_id(self) -> InternalId:
        return InternalId(id=self.id)

    def as_request_resource(self) -> AssetRequest:
        dumped = self.dump()
        for read_only in ("id", "createdTime", "lastUpdatedTime", "rootId", "aggregates"):
            dumped.pop(read_only, None)
        if "parentId" in dumped:
            dumped.pop("parentExternalId", None)
        return AssetRequest._load(dumped)
