from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from cognite_batch_sdk._cdf_sdk.constants import MULTI_ERROR_MESSAGE
from cognite_batch_sdk._cdf_sdk.exceptions import CogniteSDKError
from cognite_batch_sdk._cdf_sdk.utils.collection import flatten
from cognite_batch_sdk._cdf_sdk.utils.multi_item import MultiItemResult


class CogniteAPIError(CogniteSDKError):
    """A request to the CDF API failed.

    Args:
        message: The error message returned by the API.
        status: The HTTP status code. 0 if no response was received.
        request_id: The X-Request-ID of the failed request, if known.
        missing: Items the API reported as missing.
        duplicated: Items the API reported as duplicated.
    """

    def __init__(
        self,
        message: str,
        status: int,
        request_id: str | None = None,
        missing: list[Any] | None = None,
        duplicated: list[Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.request_id = request_id
        self.missing = missing
        self.duplicated = duplicated

    def __str__(self) -> str:
        text = f"{self.message} | code: {self.status}"
        if self.request_id:
            text += f" | X-Request-ID: {self.request_id}"
        if self.missing:
            text += f"\nMissing: {json.dumps(self.missing, default=str)}"
        if self.duplicated:
            text += f"\nDuplicated: {json.dumps(self.duplicated, default=str)}"
        return text


class CogniteMultiError(CogniteSDKError):
    """Some of the chunks of a chunked request failed.

    The outcome is given per chunk, while this error exposes it per item:
    ``succeded``, ``failed`` and ``responses`` are the flattened chunks.
    ``errors`` has one entry per error raised.
    """

    def __init__(self, result: MultiItemResult[Sequence[Any], Sequence[Any]]) -> None:
        super().__init__(MULTI_ERROR_MESSAGE)
        self.message = MULTI_ERROR_MESSAGE
        self.succeded: list[Any] = flatten(result.succeded)
        self.failed: list[Any] = flatten(result.failed)
        self.responses: list[Any] = flatten(result.responses)
        self.errors: list[Exception] = list(result.errors)

    @property
    def _api_errors(self) -> list[CogniteAPIError]:
        return [error for error in self.errors if isinstance(error, CogniteAPIError)]

    @property
    def statuses(self) -> list[int]:
        return [error.status for error in self._api_errors]

    @property
    def status(self) -> int | None:
        return next(iter(self.statuses), None)

    @property
    def request_ids(self) -> list[str | None]:
        return [error.request_id for error in self._api_errors]

    @property
    def request_id(self) -> str | None:
        return next(iter(self.request_ids), None)

    @property
    def missing(self) -> list[Any]:
        return flatten(error.missing or [] for error in self._api_errors)

    @property
    def duplicated(self) -> list[Any]:
        return flatten(error.duplicated or [] for error in self._api_errors)

    def __str__(self) -> str:
        lines = [f"{self.message} Succeeded: {len(self.succeded)}, failed: {len(self.failed)}."]
        lines.extend(f"    {error!s}" for error in self.errors)
        return "\n".join(lines)
