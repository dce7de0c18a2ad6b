import sys
from typing import Literal

from rich.console import Console

from cognite_batch_sdk._cdf_sdk.client.api import AssetsAPI
from cognite_batch_sdk._cdf_sdk.client.config import CogniteBatchClientConfig
from cognite_batch_sdk._cdf_sdk.client.http_client import AsyncHTTPClient

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self


class CogniteBatchClient:
    """Async client for the CDF asset API.

    Args:
        config (CogniteBatchClientConfig): The client configuration.
        console (Console | None): Optional Rich Console for printing warnings, for example on rate limiting.

    Examples:
        >>> from cognite.client.credentials import Token
        >>> config = CogniteBatchClientConfig(
        ...     client_name="my-app", project="my-project", credentials=Token("abc"),
        ...     base_url="https://bluefield.cognitedata.com",
        ... )
        >>> async with CogniteBatchClient(config) as client:
        ...     created = await client.assets.create([{"externalId": "root", "name": "Root"}])
    """

    def __init__(self, config: CogniteBatchClientConfig, console: Console | None = None) -> None:
        self.config = config
        self.http_client = AsyncHTTPClient(config, console=console)
        self.assets = AssetsAPI(self.http_client)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self, exc_type: type[BaseException] | None, exc_value: BaseException | None, traceback: object | None
    ) -> Literal[False]:
        await self.http_client.aclose()
        return False
