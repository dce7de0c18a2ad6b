from .assets import Aggregates, AssetRequest, AssetResponse, AssetUpdate
from .base import ExternalId, Identifier, InternalId, PagedResponse, as_identifier

__all__ = [
    "Aggregates",
    "AssetRequest",
    "AssetResponse",
    "AssetUpdate",
    "ExternalId",
    "Identifier",
    "InternalId",
    "PagedResponse",
    "as_identifier",
]
