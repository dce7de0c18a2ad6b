from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable, Sequence
from operator import itemgetter
from typing import Any, TypeVar

from pydantic import JsonValue, TypeAdapter

from cognite_batch_sdk._cdf_sdk.client.data_classes import (
    AssetRequest,
    AssetResponse,
    AssetUpdate,
    Identifier,
    PagedResponse,
    as_identifier,
)
from cognite_batch_sdk._cdf_sdk.client.http_client import AsyncHTTPClient, CogniteMultiError, RequestMessage
from cognite_batch_sdk._cdf_sdk.constants import DEFAULT_SEARCH_LIMIT, LIST_PAGE_LIMIT
from cognite_batch_sdk._cdf_sdk.exceptions import MultiItemError
from cognite_batch_sdk._cdf_sdk.utils.collection import chunker_sequence, flatten
from cognite_batch_sdk._cdf_sdk.utils.graph import asset_chunker
from cognite_batch_sdk._cdf_sdk.utils.multi_item import MultiItemResult, all_at_once, each_in_sequence

logger = logging.getLogger(__name__)

T_Chunk = TypeVar("T_Chunk")
T_Item = TypeVar("T_Item")

_ASSET_LIST_ADAPTER = TypeAdapter(list[AssetResponse])
_ASSET_PAGE_ADAPTER = TypeAdapter(PagedResponse[AssetResponse])

IdentifierLike = int | str | dict[str, Any] | Identifier


class AssetsAPI:
    ENDPOINT = "/assets"

    def __init__(self, http_client: AsyncHTTPClient) -> None:
        self._http_client = http_client
        self._config = http_client.config

    async def create(
        self, items: Sequence[AssetRequest | dict[str, Any]], chunk_size: int | None = None
    ) -> list[AssetResponse]:
        """Create assets.

        The assets are sorted such that a parent referenced by ``parentExternalId`` is
        always created before its children, then sent one chunk at a time.

        Args:
            items (Sequence[AssetRequest | dict[str, Any]]): The assets to create.
            chunk_size (int | None): Maximum number of assets per request. Defaults to
                ``create_chunk_size`` in the client configuration.

        Returns:
            list[AssetResponse]: The created assets, in the same order as the input.

        Raises:
            CogniteMultiError: If one of the requests failed. Chunks after the failing one
                are not sent and are reported as failed. The items of the error are also
                in input order.
        """
        assets = [item if isinstance(item, AssetRequest) else AssetRequest._load(item) for item in items]
        chunks = asset_chunker(
            list(enumerate(assets)),
            self._config.create_chunk_size if chunk_size is None else chunk_size,
            external_id=lambda pair: pair[1].external_id,
            parent_external_id=lambda pair: pair[1].parent_external_id,
        )
        logger.debug("Creating %d assets in %d chunks", len(assets), len(chunks))

        async def create_chunk(chunk: list[tuple[int, AssetRequest]]) -> list[tuple[int, AssetResponse]]:
            created = await self._post_items(self.ENDPOINT, [asset.dump() for _, asset in chunk])
            # The API returns the items in the order they were sent.
            return list(zip((no for no, _ in chunk), _ASSET_LIST_ADAPTER.validate_python(created)))

        try:
            responses = await each_in_sequence(chunks, create_chunk)
        except MultiItemError as error:
            result = error.result
            raise CogniteMultiError(
                MultiItemResult(
                    succeded=[_in_input_order(result.succeded)],
                    failed=[_in_input_order(result.failed)],
                    errors=result.errors,
                    responses=[_in_input_order(result.responses)],
                )
            ) from error
        return _in_input_order(responses)

    async def retrieve(
        self,
        ids: Sequence[IdentifierLike],
        ignore_unknown_ids: bool = False,
        aggregated_properties: bool = False,
    ) -> list[AssetResponse]:
        """Retrieve assets by their IDs or external IDs.

        Args:
            ids (Sequence[int | str | dict | Identifier]): Integers are read as internal ids
                and strings as external ids.
            ignore_unknown_ids (bool): Do not fail on ids that do not exist.
            aggregated_properties (bool): Include child count, depth and path.
        Returns:
            list[AssetResponse]: The retrieved assets.
        """
        extra_body: dict[str, JsonValue] = {"ignoreUnknownIds": ignore_unknown_ids}
        if aggregated_properties:
            extra_body["aggregatedProperties"] = ["childCount", "depth", "path"]

        async def retrieve_chunk(chunk: Sequence[IdentifierLike]) -> list[AssetResponse]:
            body = [as_identifier(identifier).dump() for identifier in chunk]
            return _ASSET_LIST_ADAPTER.validate_python(await self._post_items(f"{self.ENDPOINT}/byids", body, extra_body))

        return await self._in_parallel(ids, retrieve_chunk)

    async def update(self, changes: Sequence[AssetUpdate | AssetRequest | dict[str, Any]]) -> list[AssetResponse]:
        """Update assets.

        Args:
            changes (Sequence[AssetUpdate | AssetRequest | dict]): The changes to apply. An
                AssetRequest is converted to a patch of the fields that are set on it.
        Returns:
            list[AssetResponse]: The updated assets.
        """
        updates = [AssetUpdate.load(change) for change in changes]

        async def update_chunk(chunk: Sequence[AssetUpdate]) -> list[AssetResponse]:
            body = [update.dump() for update in chunk]
            return _ASSET_LIST_ADAPTER.validate_python(await self._post_items(f"{self.ENDPOINT}/update", body))

        return await self._in_parallel(updates, update_chunk)

    async def delete(
        self,
        ids: Sequence[IdentifierLike],
        recursive: bool = False,
        ignore_unknown_ids: bool = False,
    ) -> None:
        """Delete assets by their IDs or external IDs.

        Args:
            ids (Sequence[int | str | dict | Identifier]): The assets to delete.
            recursive (bool): Also delete the subtrees of the assets.
            ignore_unknown_ids (bool): Do not fail on ids that do not exist.
        """
        extra_body: dict[str, JsonValue] = {"recursive": recursive, "ignoreUnknownIds": ignore_unknown_ids}

        async def delete_chunk(chunk: Sequence[IdentifierLike]) -> list[Identifier]:
            identifiers = [as_identifier(identifier) for identifier in chunk]
            await self._post_items(f"{self.ENDPOINT}/delete", [identifier.dump() for identifier in identifiers], extra_body)
            return identifiers

        await self._in_parallel(ids, delete_chunk)

    async def search(
        self,
        filter: dict[str, JsonValue] | None = None,
        search: dict[str, JsonValue] | None = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> list[AssetResponse]:
        """Search for assets, for example ``search={"name": "21PT1019"}``."""
        body: dict[str, JsonValue] = {"limit": limit}
        if filter is not None:
            body["filter"] = filter
        if search is not None:
            body["search"] = search
        response = await self._post(f"{self.ENDPOINT}/search", body)
        return _ASSET_PAGE_ADAPTER.validate_python(response).items

    async def iterate(
        self, filter: dict[str, JsonValue] | None = None, limit: int | None = None
    ) -> AsyncIterator[AssetResponse]:
        """Iterate over assets matching the filter, following the cursor page by page."""
        cursor: str | None = None
        yielded = 0
        while limit is None or yielded < limit:
            body: dict[str, JsonValue] = {
                "limit": LIST_PAGE_LIMIT if limit is None else min(LIST_PAGE_LIMIT, limit - yielded)
            }
            if filter is not None:
                body["filter"] = filter
            if cursor is not None:
                body["cursor"] = cursor
            page = _ASSET_PAGE_ADAPTER.validate_python(await self._post(f"{self.ENDPOINT}/list", body))
            for asset in page.items:
                yield asset
            yielded += len(page.items)
            cursor = page.next_cursor
            if cursor is None or not page.items:
                break

    async def list(self, filter: dict[str, JsonValue] | None = None, limit: int | None = None) -> list[AssetResponse]:
        """List assets, for example ``filter={"labels": {"containsAny": [{"externalId": "PUMP"}]}}``.

        Args:
            filter (dict | None): The asset filter.
            limit (int | None): Maximum number of assets to return. None returns all.
        """
        return [asset async for asset in self.iterate(filter, limit)]

    async def _in_parallel(
        self, items: Sequence[T_Chunk], operation: Callable[[Sequence[T_Chunk]], Awaitable[Sequence[Any]]]
    ) -> list[Any]:
        chunks = list(chunker_sequence(items, self._config.request_chunk_size))
        return flatten(await self._run_chunks(all_at_once, chunks, operation))

    @staticmethod
    async def _run_chunks(
        executor: Callable[..., Awaitable[list[Any]]],
        chunks: Sequence[Any],
        operation: Callable[[Any], Awaitable[Any]],
    ) -> list[Any]:
        try:
            return await executor(chunks, operation)
        except MultiItemError as error:
            raise CogniteMultiError(error.result) from error

    async def _post_items(
        self, endpoint: str, items: list[dict[str, Any]], extra_body: dict[str, JsonValue] | None = None
    ) -> list[dict[str, Any]]:
        response = await self._post(endpoint, {"items": items, **(extra_body or {})})
        return response.get("items", [])

    async def _post(self, endpoint: str, body: dict[str, Any]) -> dict[str, Any]:
        message = RequestMessage(
            endpoint_url=self._config.create_api_url(endpoint), method="POST", body_content=body
        )
        result = await self._http_client.request_with_retries(message)
        return result.get_success_or_raise().body_json


def _in_input_order(chunks: Iterable[Sequence[tuple[int, T_Item]]]) -> list[T_Item]:
    return [item for _, item in sorted(flatten(chunks), key=itemgetter(0))]
