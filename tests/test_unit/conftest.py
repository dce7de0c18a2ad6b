from __future__ import annotations

from collections.abc import AsyncIterator, Iterator

import pytest
import pytest_asyncio
import respx
from cognite.client import global_config
from cognite.client.credentials import Token

from cognite_batch_sdk._cdf_sdk.client import CogniteBatchClient, CogniteBatchClientConfig
from cognite_batch_sdk._cdf_sdk.client.http_client import AsyncHTTPClient
from tests.constants import BASE_URL, PROJECT


@pytest.fixture(autouse=True)
def disable_pypi_check() -> Iterator[None]:
    old = global_config.disable_pypi_version_check
    global_config.disable_pypi_version_check = True
    yield
    global_config.disable_pypi_version_check = old


@pytest.fixture
def disable_gzip() -> Iterator[None]:
    old = global_config.disable_gzip
    global_config.disable_gzip = True
    yield
    global_config.disable_gzip = old


@pytest.fixture
def no_backoff() -> Iterator[None]:
    old = global_config.max_retry_backoff
    global_config.max_retry_backoff = 0
    yield
    global_config.max_retry_backoff = old


@pytest.fixture
def sdk_config() -> CogniteBatchClientConfig:
    return CogniteBatchClientConfig(
        client_name="test-client",
        project=PROJECT,
        base_url=BASE_URL,
        timeout=10,
        credentials=Token("abc"),
    )


@pytest.fixture
def rsps() -> Iterator[respx.MockRouter]:
    with respx.mock() as rsps:
        yield rsps


@pytest_asyncio.fixture
async def http_client(sdk_config: CogniteBatchClientConfig) -> AsyncIterator[AsyncHTTPClient]:
    async with AsyncHTTPClient(sdk_config) as client:
        yield client


@pytest_asyncio.fixture
async def client(sdk_config: CogniteBatchClientConfig) -> AsyncIterator[CogniteBatchClient]:
    async with CogniteBatchClient(sdk_config) as client:
        yield client
