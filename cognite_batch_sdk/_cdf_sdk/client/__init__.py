from ._client import CogniteBatchClient
from .config import CogniteBatchClientConfig

__all__ = ["CogniteBatchClient", "CogniteBatchClientConfig"]
