import gzip
from typing import Any, Literal

import httpx
from cognite.client import global_config
from pydantic import BaseModel, JsonValue, TypeAdapter

from cognite_batch_sdk._cdf_sdk.client.http_client._exception import CogniteAPIError
from cognite_batch_sdk._cdf_sdk.utils.useful_types import PrimitiveType

_BODY_SERIALIZER = TypeAdapter(dict[str, JsonValue])


class HTTPResult(BaseModel):
    def get_success_or_raise(self) -> "SuccessResponse":
        """Returns the response if it is a success, otherwise raises a CogniteAPIError."""
        if isinstance(self, SuccessResponse):
            return self
        elif isinstance(self, FailedResponse):
            raise CogniteAPIError(
                self.error.message,
                status=self.status_code,
                request_id=self.request_id,
                missing=self.error.missing,
                duplicated=self.error.duplicated,
            )
        elif isinstance(self, FailedRequest):
            raise CogniteAPIError(f"Request failed with error: {self.error}", status=0)
        else:
            raise CogniteAPIError(f"Unknown {type(self).__name__} type", status=0)


class FailedRequest(HTTPResult):
    error: str


class SuccessResponse(HTTPResult):
    status_code: int
    body: str
    request_id: str | None = None

    @property
    def body_json(self) -> dict[str, Any]:
        """Parse the response body as JSON."""
        return _BODY_SERIALIZER.validate_json(self.body)


class ErrorDetails(BaseModel):
    """This is the expected structure of error details in the CDF API"""

    code: int
    message: str
    missing: list[JsonValue] | None = None
    duplicated: list[JsonValue] | None = None

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ErrorDetails":
        """Populate the error details from a httpx response."""
        try:
            res = TypeAdapter(dict[Literal["error"], ErrorDetails]).validate_json(response.text)
        except ValueError:
            return cls(code=response.status_code, message=response.text)
        return res["error"]


class FailedResponse(HTTPResult):
    status_code: int
    body: str
    error: ErrorDetails
    request_id: str | None = None


class RequestMessage(BaseModel):
    endpoint_url: str
    method: Literal["GET", "POST", "PATCH", "DELETE", "PUT"]
    body_content: dict[str, JsonValue] | None = None
    parameters: dict[str, PrimitiveType] | None = None
    disable_gzip: bool = False
    connect_attempt: int = 0
    read_attempt: int = 0
    status_attempt: int = 0

    @property
    def total_attempts(self) -> int:
        return self.connect_attempt + self.read_attempt + self.status_attempt

    @property
    def use_gzip(self) -> bool:
        return self.body_content is not None and not (global_config.disable_gzip or self.disable_gzip)

    @property
    def content(self) -> bytes | None:
        if self.body_content is None:
            return None
        # We serialize using pydantic instead of json.dumps. This is because pydantic is faster
        # and handles more complex types such as datetime, float('nan'), etc.
        data = _BODY_SERIALIZER.dump_json(self.body_content)
        if self.use_gzip:
            data = gzip.compress(data)
        return data
