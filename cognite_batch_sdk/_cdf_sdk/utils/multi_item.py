import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeAlias, TypeVar

from cognite_batch_sdk._cdf_sdk.exceptions import MultiItemError

T_Input = TypeVar("T_Input")
T_Response = TypeVar("T_Response")

Operation: TypeAlias = Callable[[T_Input], Awaitable[T_Response]]


@dataclass(frozen=True)
class MultiItemResult(Generic[T_Input, T_Response]):
    """The outcome of running one operation over many inputs.

    ``succeded`` and ``responses`` are parallel, as are ``failed`` and ``errors``.
    Each list keeps the relative order of the inputs.

    Note the field is spelled ``succeded``, matching the error payload the
    SDK has always exposed.
    """

    succeded: list[T_Input] = field(default_factory=list)
    failed: list[T_Input] = field(default_factory=list)
    errors: list[Exception] = field(default_factory=list)
    responses: list[T_Response] = field(default_factory=list)

    @property
    def succeeded(self) -> list[T_Input]:
        return self.succeded

    @property
    def has_failures(self) -> bool:
        return bool(self.failed)

    def get_responses_or_raise(self) -> list[T_Response]:
        if self.failed:
            raise MultiItemError(self)
        return self.responses


async def _settle(
    operation: Operation[T_Input, T_Response], item: T_Input
) -> tuple[T_Response, None] | tuple[None, Exception]:
    try:
        return await operation(item), None
    except Exception as error:
        return None, error


async def all_at_once(
    inputs: Sequence[T_Input], operation: Operation[T_Input, T_Response]
) -> list[T_Response]:
    """Run the operation for all inputs concurrently and wait for every one of them.

    All operations are started before any is awaited, and there is no cap on
    how many run at the same time.

    Args:
        inputs: The inputs to run the operation on.
        operation: An async callable taking a single input.

    Returns:
        The responses, in the same order as the inputs.

    Raises:
        MultiItemError: If one or more operations raised. The error carries
            both the successful and the failed inputs.

    Examples:
        >>> async def double(x: int) -> int:
        ...     return x * 2
        >>> asyncio.run(all_at_once([1, 2, 3], double))
        [2, 4, 6]
    """
    if not inputs:
        return []
    outcomes = await asyncio.gather(*(_settle(operation, item) for item in inputs))
    result: MultiItemResult[T_Input, T_Response] = MultiItemResult()
    for item, (response, error) in zip(inputs, outcomes):
        if error is None:
            result.succeded.append(item)
            result.responses.append(response)  # type: ignore[arg-type]
        else:
            result.failed.append(item)
            result.errors.append(error)
    return result.get_responses_or_raise()


async def each_in_sequence(
    inputs: Sequence[T_Input],
    operation: Operation[T_Input, T_Response],
    stop_on_failure: bool = True,
) -> list[T_Response]:
    """Run the operation for one input at a time, in order.

    Each operation is awaited before the next one is started. This is used when
    later inputs depend on earlier ones, for example asset chunks where a child
    references a parent created by a previous chunk.

    Stopping at the first failure is the default. For ``[1, 2, 0, 3, 0]`` where
    ``0`` fails, ``3`` is never attempted and ``failed`` is ``[0, 3, 0]`` with a
    single error. Pass ``stop_on_failure=False`` to attempt every input.

    Args:
        inputs: The inputs to run the operation on.
        operation: An async callable taking a single input.
        stop_on_failure: If True, the first failure stops the run. The failing
            input and every input not yet attempted are reported as failed, with
            the single error raised. If False, every input is attempted and each
            failed input gets its own error.

    Returns:
        The responses, in the same order as the inputs.

    Raises:
        MultiItemError: If one or more operations raised.
    """
    result: MultiItemResult[T_Input, T_Response] = MultiItemResult()
    for no, item in enumerate(inputs):
        try:
            response = await operation(item)
        except Exception as error:
            result.errors.append(error)
            if stop_on_failure:
                result.failed.extend(inputs[no:])
                break
            result.failed.append(item)
        else:
            result.succeded.append(item)
            result.responses.append(response)
    return result.get_responses_or_raise()
