from cognite.client import ClientConfig
from cognite.client.credentials import CredentialProvider

from cognite_batch_sdk._cdf_sdk.constants import DEFAULT_CHUNK_SIZE, DEFAULT_MAX_RETRIES


class CogniteBatchClientConfig(ClientConfig):
    """Configuration for the batch client.

    Args:
        client_name (str): A user-defined name for the client, sent with every request.
        project (str): The CDF project.
        credentials (CredentialProvider): Provides the authorization header.
        api_subversion (str | None): The API subversion, sent as the ``cdf-version`` header.
        base_url (str | None): The base URL of the CDF cluster.
        headers (dict[str, str] | None): Extra headers for every request.
        timeout (int | None): Request timeout in seconds.
        create_chunk_size (int): Maximum number of assets per create request.
        request_chunk_size (int): Maximum number of items per retrieve, update and delete request.
        max_retries (int): Maximum number of retries for a single request.
        debug (bool): Enable debug logging in the underlying Cognite SDK configuration.
    """

    def __init__(
        self,
        client_name: str,
        project: str,
        credentials: CredentialProvider,
        api_subversion: str | None = None,
        base_url: str | None = None,
        headers: dict[str, str] | None = None,
        timeout: int | None = None,
        create_chunk_size: int = DEFAULT_CHUNK_SIZE,
        request_chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_retries: int = DEFAULT_MAX_RETRIES,
        debug: bool = False,
    ) -> None:
        super().__init__(
            client_name=client_name,
            project=project,
            credentials=credentials,
            api_subversion=api_subversion,
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            debug=debug,
        )
        if create_chunk_size < 1 or request_chunk_size < 1:
            raise ValueError("Chunk sizes must be positive integers")
        self.create_chunk_size = create_chunk_size
        self.request_chunk_size = request_chunk_size
        self.max_retries = max_retries

    @classmethod
    def from_client_config(cls, config: ClientConfig, **kwargs: int) -> "CogniteBatchClientConfig":
        return cls(
            client_name=config.client_name,
            project=config.project,
            credentials=config.credentials,
            api_subversion=config.api_subversion,
            base_url=config.base_url,
            headers=config.headers,
            timeout=config.timeout,
            debug=config.debug,
            **kwargs,
        )

    @property
    def base_api_url(self) -> str:
        return f"{self.base_url}/api/v1/projects/{self.project}"

    def create_api_url(self, endpoint: str) -> str:
        """Create a full API URL for the given endpoint.

        Args:
            endpoint (str): The API endpoint to append to the base URL.

        Returns:
            str: The full API URL.

        Examples:
            >>> config = CogniteBatchClientConfig(base_url="https://bluefield.cognitedata.com", project="my_project", ...)
            >>> config.create_api_url("/assets/byids")
            "https://bluefield.cognitedata.com/api/v1/projects/my_project/assets/byids"
        """
        if not endpoint.startswith("/"):
            endpoint = f"/{endpoint}"
        return f"{self.base_api_url}{endpoint}"
