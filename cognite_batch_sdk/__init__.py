from ._cdf_sdk.client import CogniteBatchClient, CogniteBatchClientConfig
from ._cdf_sdk.client.data_classes import AssetRequest, AssetResponse, AssetUpdate
from ._cdf_sdk.client.http_client import CogniteAPIError, CogniteMultiError
from ._cdf_sdk.exceptions import (
    CogniteSDKError,
    CyclicDependencyError,
    DuplicatedExternalIdError,
    MultiItemError,
)
from ._cdf_sdk.utils import (
    MultiItemResult,
    all_at_once,
    asset_chunker,
    chunk_by_dependency,
    each_in_sequence,
)
from ._version import __version__

__all__ = [
    "AssetRequest",
    "AssetResponse",
    "AssetUpdate",
    "CogniteAPIError",
    "CogniteBatchClient",
    "CogniteBatchClientConfig",
    "CogniteMultiError",
    "CogniteSDKError",
    "CyclicDependencyError",
    "DuplicatedExternalIdError",
    "MultiItemError",
    "MultiItemResult",
    "__version__",
    "all_at_once",
    "asset_chunker",
    "chunk_by_dependency",
    "each_in_sequence",
]
