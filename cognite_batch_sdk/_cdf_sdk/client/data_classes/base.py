import sys
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self


class BaseModelObject(BaseModel):
    """Base class for all object. This includes resources and nested objects."""

    # We allow extra fields to support forward compatibility.
    model_config = ConfigDict(alias_generator=to_camel, extra="allow", populate_by_name=True)

    def dump(self, camel_case: bool = True) -> dict[str, Any]:
        """Dump the resource to a dictionary.

        Args:
            camel_case (bool): Whether to use camelCase for the keys. Default is True.

        """
        return self.model_dump(mode="json", by_alias=camel_case, exclude_unset=True)

    @classmethod
    def _load(cls, resource: dict[str, Any]) -> Self:
        return cls.model_validate(resource, by_alias=True)


class Identifier(BaseModel, ABC):
    """Base class for identifier objects, {"id": ...} or {"externalId": "..."}."""

    model_config = ConfigDict(alias_generator=to_camel, extra="ignore", populate_by_name=True, frozen=True)

    def dump(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    @abstractmethod
    def __str__(self) -> str:
        raise NotImplementedError()


class InternalId(Identifier):
    id: int

    def __str__(self) -> str:
        return f"id={self.id}"


class ExternalId(Identifier):
    external_id: str

    def __str__(self) -> str:
        return f"externalId={self.external_id!r}"


def as_identifier(value: "int | str | dict[str, Any] | Identifier") -> Identifier:
    """Interprets an int as an internal id and a str as an external id."""
    if isinstance(value, Identifier):
        return value
    elif isinstance(value, bool):
        raise TypeError(f"Expected an int, str or identifier, got {value!r}")
    elif isinstance(value, int):
        return InternalId(id=value)
    elif isinstance(value, str):
        return ExternalId(external_id=value)
    elif isinstance(value, dict) and "id" in value:
        return InternalId.model_validate(value)
    elif isinstance(value, dict) and "externalId" in value:
        return ExternalId.model_validate(value)
    raise TypeError(f"Expected an int, str or identifier, got {value!r}")


class RequestResource(BaseModelObject, ABC):
    """A resource as it is sent to the API."""

    # Fields that hold a list or a mapping. On update they are added to, not replaced.
    container_fields: ClassVar[frozenset[str]] = frozenset()

    @abstractmethod
    def as_id(self) -> Identifier | None:
        raise NotImplementedError()

    def __str__(self) -> str:
        return str(self.as_id())

    def as_update(self) -> dict[str, Any]:
        """Converts the resource to a patch update item with the fields that are set."""
        identifier = self.as_id()
        if identifier is None:
            raise ValueError(f"Cannot update {type(self).__name__} without an identifier")
        update_item = identifier.dump()
        update: dict[str, Any] = {}
        for key, value in self.dump(camel_case=True).items():
            if key in update_item:
                continue
            if key in self.container_fields:
                update[key] = {"add": value}
            elif value is None:
                update[key] = {"setNull": True}
            else:
                update[key] = {"set": value}
        update_item["update"] = update
        return update_item


T_RequestResource = TypeVar("T_RequestResource", bound=RequestResource)


class ResponseResource(BaseModelObject, Generic[T_RequestResource], ABC):
    @abstractmethod
    def as_request_resource(self) -> T_RequestResource:
        """Convert the response resource to a request resource."""
        raise NotImplementedError()


T_Item = TypeVar("T_Item", bound=BaseModel)


class PagedResponse(BaseModel, Generic[T_Item]):
    items: list[T_Item]
    next_cursor: str | None = Field(None, alias="nextCursor")
