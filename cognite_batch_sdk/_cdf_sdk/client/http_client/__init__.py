from ._client import AsyncHTTPClient
from ._data_classes import (
    ErrorDetails,
    FailedRequest,
    FailedResponse,
    HTTPResult,
    RequestMessage,
    SuccessResponse,
)
from ._exception import CogniteAPIError, CogniteMultiError

__all__ = [
    "AsyncHTTPClient",
    "CogniteAPIError",
    "CogniteMultiError",
    "ErrorDetails",
    "FailedRequest",
    "FailedResponse",
    "HTTPResult",
    "RequestMessage",
    "SuccessResponse",
]
