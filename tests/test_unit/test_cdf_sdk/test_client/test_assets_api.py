import json
from typing import Any

import httpx
import pytest
import respx

from cognite_batch_sdk._cdf_sdk.client import CogniteBatchClient
from cognite_batch_sdk._cdf_sdk.client.data_classes import AssetRequest, AssetResponse, AssetUpdate, ExternalId
from cognite_batch_sdk._cdf_sdk.client.http_client import CogniteAPIError, CogniteMultiError
from cognite_batch_sdk._cdf_sdk.exceptions import CyclicDependencyError
from tests.constants import API_URL


def as_created(items: list[dict[str, Any]], first_id: int = 1) -> list[dict[str, Any]]:
    return [
        {**item, "id": first_id + no, "createdTime": 0, "lastUpdatedTime": 0, "rootId": first_id}
        for no, item in enumerate(items)
    ]


def request_items_of(request: httpx.Request) -> list[dict[str, Any]]:
    return json.loads(request.content)["items"]


def echo_created(request: httpx.Request) -> httpx.Response:
    return httpx.Response(201, json={"items": as_created(request_items_of(request))})


def request_items(call: respx.models.Call) -> list[dict[str, Any]]:
    return request_items_of(call.request)


@pytest.mark.usefixtures("disable_gzip", "no_backoff")
class TestAssetsCreate:
    @pytest.mark.asyncio
    async def test_create_with_labels(self, rsps: respx.MockRouter, client: CogniteBatchClient) -> None:
        assets = [{"name": "My pump", "labels": [{"externalId": "PUMP"}]}]
        rsps.post(f"{API_URL}/assets").mock(side_effect=echo_created)

        created = await client.assets.create(assets)

        assert len(created) == 1
        assert isinstance(created[0], AssetResponse)
        assert created[0].labels == [{"externalId": "PUMP"}]
        assert request_items(rsps.calls[-1]) == assets

    @pytest.mark.asyncio
    async def test_parents_are_created_first(self, rsps: respx.MockRouter, client: CogniteBatchClient) -> None:
        child = {"parentExternalId": "abc", "externalId": "def", "name": "test-child"}
        root = {"externalId": "abc", "name": "test-root"}
        grandchild = {"parentExternalId": "def", "name": "test-grandchild"}
        rsps.post(f"{API_URL}/assets").mock(side_effect=echo_created)

        created = await client.assets.create([child, root, grandchild], chunk_size=2)

        assert [asset.name for asset in created] == ["test-child", "test-root", "test-grandchild"]
        assert [request_items(call) for call in rsps.calls] == [[root, child], [grandchild]]

    @pytest.mark.asyncio
    async def test_created_assets_follow_input_order(self, rsps: respx.MockRouter, client: CogniteBatchClient) -> None:
        child = {"parentExternalId": "abc", "externalId": "def", "name": "test-child"}
        root = {"externalId": "abc", "name": "test-root"}
        rsps.post(f"{API_URL}/assets").mock(side_effect=echo_created)

        created = await client.assets.create([child, root])

        assert [asset.name for asset in created] == ["test-child", "test-root"]
        assert [asset.external_id for asset in created] == ["def", "abc"]
        assert request_items(rsps.calls[-1]) == [root, child]

    @pytest.mark.asyncio
    async def test_failure_items_follow_input_order(self, rsps: respx.MockRouter, client: CogniteBatchClient) -> None:
        child = {"parentExternalId": "abc", "externalId": "def", "name": "test-child"}
        root = {"externalId": "abc", "name": "test-root"}
        other = {"externalId": "ghi", "name": "test-other"}

        def fail_on_other(request: httpx.Request) -> httpx.Response:
            if request_items_of(request)[0]["name"] == "test-other":
                return httpx.Response(400, json={"error": {"code": 400, "message": "Invalid"}})
            return echo_created(request)

        rsps.post(f"{API_URL}/assets").mock(side_effect=fail_on_other)

        with pytest.raises(CogniteMultiError) as exc_info:
            await client.assets.create([child, root, other], chunk_size=1)

        error = exc_info.value
        assert [asset.name for asset in error.succeded] == ["test-child", "test-root"]
        assert [asset.name for asset in error.responses] == ["test-child", "test-root"]
        assert [asset.name for asset in error.failed] == ["test-other"]
        assert [request_items(call)[0]["name"] for call in rsps.calls] == ["test-root", "test-child", "test-other"]

    @pytest.mark.asyncio
    async def test_create_uses_configured_chunk_size(self, rsps: respx.MockRouter, client: CogniteBatchClient) -> None:
        client.config.create_chunk_size = 3
        rsps.post(f"{API_URL}/assets").mock(side_effect=echo_created)

        created = await client.assets.create([AssetRequest(name=f"asset-{no}") for no in range(7)])

        assert len(created) == 7
        assert [len(request_items(call)) for call in rsps.calls] == [3, 3, 1]

    @pytest.mark.asyncio
    async def test_create_empty(self, rsps: respx.MockRouter, client: CogniteBatchClient) -> None:
        assert await client.assets.create([]) == []
        assert len(rsps.calls) == 0

    @pytest.mark.asyncio
    async def test_failing_chunk_stops_the_remaining(
        self, rsps: respx.MockRouter, client: CogniteBatchClient
    ) -> None:
        assets = [AssetRequest(name=f"asset-{no}", external_id=f"asset-{no}") for no in range(3)]
        rsps.post(f"{API_URL}/assets").mock(
            side_effect=[
                httpx.Response(201, json={"items": as_created([assets[0].dump()])}),
                httpx.Response(
                    400,
                    json={"error": {"code": 400, "message": "Duplicated", "duplicated": [{"externalId": "asset-1"}]}},
                    headers={"X-Request-ID": "r1"},
                ),
            ]
        )

        with pytest.raises(CogniteMultiError) as exc_info:
            await client.assets.create(assets, chunk_size=1)

        error = exc_info.value
        assert error.succeded == [assets[0]]
        assert error.failed == [assets[1], assets[2]]
        assert [asset.external_id for asset in error.responses] == ["asset-0"]
        assert error.status == 400
        assert error.request_id == "r1"
        assert error.duplicated == [{"externalId": "asset-1"}]
        assert len(rsps.calls) == 2

    @pytest.mark.asyncio
    async def test_cycle_is_rejected_before_any_request(
        self, rsps: respx.MockRouter, client: CogniteBatchClient
    ) -> None:
        assets = [
            {"externalId": "a", "parentExternalId": "b", "name": "a"},
            {"externalId": "b", "parentExternalId": "a", "name": "b"},
        ]

        with pytest.raises(CyclicDependencyError):
            await client.assets.create(assets)
        assert len(rsps.calls) == 0


@pytest.mark.usefixtures("disable_gzip", "no_backoff")
class TestAssetsRequests:
    @pytest.mark.asyncio
    async def test_retrieve_in_input_order(self, rsps: respx.MockRouter, client: CogniteBatchClient) -> None:
        client.config.request_chunk_size = 2

        def by_ids(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            items = [
                {"id": item.get("id", 99), "externalId": item.get("externalId"), "name": "x"}
                for item in body["items"]
            ]
            return httpx.Response(200, json={"items": as_created(items, first_id=items[0]["id"])})

        rsps.post(f"{API_URL}/assets/byids").mock(side_effect=by_ids)

        retrieved = await client.assets.retrieve([1, "abc", {"id": 3}, ExternalId(external_id="def")])

        assert [asset.external_id for asset in retrieved] == [None, "abc", None, "def"]
        assert len(rsps.calls) == 2
        sent = sorted((json.loads(call.request.content) for call in rsps.calls), key=lambda body: str(body["items"]))
        assert all(body["ignoreUnknownIds"] is False for body in sent)
        assert [body["items"] for body in sent] == [
            [{"id": 1}, {"externalId": "abc"}],
            [{"id": 3}, {"externalId": "def"}],
        ]

    @pytest.mark.asyncio
    async def test_delete_with_ignore_unknown_ids(self, rsps: respx.MockRouter, client: CogniteBatchClient) -> None:
        route = rsps.post(f"{API_URL}/assets/delete").respond(200, json={})

        await client.assets.delete([123], ignore_unknown_ids=True)

        assert route.call_count == 1
        assert json.loads(route.calls[-1].request.content) == {
            "items": [{"id": 123}],
            "recursive": False,
            "ignoreUnknownIds": True,
        }

    @pytest.mark.asyncio
    async def test_update_labels(self, rsps: respx.MockRouter, client: CogniteBatchClient) -> None:
        change = {
            "id": 123,
            "update": {"labels": {"add": [{"externalId": "PUMP"}], "remove": [{"externalId": "VALVE"}]}},
        }
        route = rsps.post(f"{API_URL}/assets/update").respond(
            200, json={"items": as_created([{"name": "pump", "labels": [{"externalId": "PUMP"}]}], first_id=123)}
        )

        updated = await client.assets.update([change])

        assert updated[0].id == 123
        assert json.loads(route.calls[-1].request.content) == {"items": [change]}

    @pytest.mark.asyncio
    async def test_update_from_request_resource(self, rsps: respx.MockRouter, client: CogniteBatchClient) -> None:
        route = rsps.post(f"{API_URL}/assets/update").respond(
            200, json={"items": as_created([{"name": "new", "externalId": "abc"}])}
        )

        await client.assets.update([AssetRequest(name="new", external_id="abc", metadata={"a": "b"}, description=None)])

        assert json.loads(route.calls[-1].request.content) == {
            "items": [
                {
                    "externalId": "abc",
                    "update": {
                        "name": {"set": "new"},
                        "metadata": {"add": {"a": "b"}},
                        "description": {"setNull": True},
                    },
                }
            ]
        }

    @pytest.mark.asyncio
    async def test_failed_chunk_raises_multi_error(self, rsps: respx.MockRouter, client: CogniteBatchClient) -> None:
        client.config.request_chunk_size = 1

        def fail_on_missing(request: httpx.Request) -> httpx.Response:
            items = json.loads(request.content)["items"]
            if items == [{"id": 2}]:
                return httpx.Response(400, json={"error": {"code": 400, "message": "Missing", "missing": items}})
            return httpx.Response(200, json={"items": as_created([{"name": "x"}], first_id=items[0]["id"])})

        rsps.post(f"{API_URL}/assets/byids").mock(side_effect=fail_on_missing)

        with pytest.raises(CogniteMultiError) as exc_info:
            await client.assets.retrieve([1, 2, 3])

        assert exc_info.value.succeded == [1, 3]
        assert exc_info.value.failed == [2]
        assert [asset.id for asset in exc_info.value.responses] == [1, 3]
        assert exc_info.value.missing == [{"id": 2}]


@pytest.mark.usefixtures("disable_gzip", "no_backoff")
class TestAssetsQueries:
    @pytest.mark.asyncio
    async def test_search(self, rsps: respx.MockRouter, client: CogniteBatchClient) -> None:
        route = rsps.post(f"{API_URL}/assets/search").respond(200, json={"items": as_created([{"name": "21PT1019"}])})

        found = await client.assets.search(filter={"parentIds": [1, 2]}, search={"name": "21PT1019"})

        assert [asset.name for asset in found] == ["21PT1019"]
        assert json.loads(route.calls[-1].request.content) == {
            "limit": 100,
            "filter": {"parentIds": [1, 2]},
            "search": {"name": "21PT1019"},
        }

    @pytest.mark.asyncio
    async def test_list_follows_cursor(self, rsps: respx.MockRouter, client: CogniteBatchClient) -> None:
        label_filter = {"labels": {"containsAny": [{"externalId": "PUMP"}]}}
        route = rsps.post(f"{API_URL}/assets/list").mock(
            side_effect=[
                httpx.Response(200, json={"items": as_created([{"name": "a"}]), "nextCursor": "next"}),
                httpx.Response(200, json={"items": as_created([{"name": "b"}], first_id=2)}),
            ]
        )

        assets = await client.assets.list(filter=label_filter)

        assert [asset.name for asset in assets] == ["a", "b"]
        first, second = (json.loads(call.request.content) for call in route.calls)
        assert first == {"limit": 1000, "filter": label_filter}
        assert second == {"limit": 1000, "filter": label_filter, "cursor": "next"}

    @pytest.mark.asyncio
    async def test_list_with_limit(self, rsps: respx.MockRouter, client: CogniteBatchClient) -> None:
        route = rsps.post(f"{API_URL}/assets/list").respond(
            200, json={"items": as_created([{"name": "a"}, {"name": "b"}]), "nextCursor": "next"}
        )

        assets = await client.assets.list(limit=2)

        assert len(assets) == 2
        assert route.call_count == 1
        assert json.loads(route.calls[-1].request.content) == {"limit": 2}

    @pytest.mark.asyncio
    async def test_list_failure_raises_api_error(self, rsps: respx.MockRouter, client: CogniteBatchClient) -> None:
        rsps.post(f"{API_URL}/assets/list").respond(403, json={"error": {"code": 403, "message": "Forbidden"}})

        with pytest.raises(CogniteAPIError) as exc_info:
            await client.assets.list()

        assert str(exc_info.value) == "Forbidden | code: 403"


class TestAssetDataClasses:
    def test_response_as_request(self) -> None:
        response = AssetResponse._load(
            {"id": 1, "name": "a", "parentId": 2, "createdTime": 0, "lastUpdatedTime": 0, "rootId": 2}
        )

        assert response.as_request_resource() == AssetRequest(name="a", parent_id=2)

    def test_request_with_both_parent_references(self) -> None:
        with pytest.raises(ValueError):
            AssetRequest(name="a", parent_id=1, parent_external_id="b")

    def test_update_requires_one_identifier(self) -> None:
        with pytest.raises(ValueError):
            AssetUpdate(update={"name": {"set": "a"}})
