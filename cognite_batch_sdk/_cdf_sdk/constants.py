from typing import Final

# The asset API accepts at most this many items per create, retrieve, update or delete request.
DEFAULT_CHUNK_SIZE: Final[int] = 1_000
DEFAULT_MAX_RETRIES: Final[int] = 10
DEFAULT_SEARCH_LIMIT: Final[int] = 100
LIST_PAGE_LIMIT: Final[int] = 1_000

RETRY_STATUS_CODES: Final[frozenset[int]] = frozenset({408, 429, 502, 503, 504})

MULTI_ERROR_MESSAGE: Final[str] = "The API Failed to process some items."
