from __future__ import annotations

from graphlib import CycleError
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from cognite_batch_sdk._cdf_sdk.utils.multi_item import MultiItemResult

T_Input = TypeVar("T_Input")
T_Response = TypeVar("T_Response")


class CogniteSDKError(Exception):
    def __repr__(self) -> str:
        # Repr is what is called by rich when the exception is printed.
        return str(self)


class CogniteValidationError(CogniteSDKError):
    pass


class DuplicatedExternalIdError(CogniteValidationError):
    def __init__(self, message: str, duplicated: dict[str, list[int]]) -> None:
        super().__init__(message)
        self.duplicated = duplicated

    def __str__(self) -> str:
        lines = [super().__str__()]
        for external_id, positions in self.duplicated.items():
            lines.append(f"    {external_id!r} at positions {', '.join(map(str, positions))}")
        return "\n".join(lines)


class CyclicDependencyError(CycleError, CogniteValidationError):
    """Raised when records reference each other's external ids in a loop.

    The second argument is the cycle, given as the external ids of the
    records on it, starting and ending with the same external id.
    """

    def __str__(self) -> str:
        return self.args[0]

    @property
    def cycle(self) -> list[Any]:
        return self.args[1]


class MultiItemError(CogniteSDKError, Generic[T_Input, T_Response]):
    """Raised by the multi-item executors when at least one input failed.

    The full outcome is available as ``result``, and its four lists are
    forwarded as attributes for convenience.
    """

    def __init__(self, result: MultiItemResult[T_Input, T_Response]) -> None:
        super().__init__(f"{len(result.failed)} of {len(result.failed) + len(result.succeded)} items failed.")
        self.result = result

    @property
    def succeded(self) -> list[T_Input]:
        return self.result.succeded

    @property
    def failed(self) -> list[T_Input]:
        return self.result.failed

    @property
    def errors(self) -> list[Exception]:
        return self.result.errors

    @property
    def responses(self) -> list[T_Response]:
        return self.result.responses
