import asyncio
import logging
import random
import sys
from collections.abc import MutableMapping, Set
from typing import Literal

import httpx
from cognite.client import global_config
from rich.console import Console

from cognite_batch_sdk._cdf_sdk.client.config import CogniteBatchClientConfig
from cognite_batch_sdk._cdf_sdk.client.http_client._data_classes import (
    ErrorDetails,
    FailedRequest,
    FailedResponse,
    HTTPResult,
    RequestMessage,
    SuccessResponse,
)
from cognite_batch_sdk._cdf_sdk.constants import RETRY_STATUS_CODES
from cognite_batch_sdk._cdf_sdk.sdk_warnings import HighSeverityWarning, MediumSeverityWarning
from cognite_batch_sdk._cdf_sdk.utils.auxiliary import get_current_sdk_version, get_user_agent

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

logger = logging.getLogger(__name__)


class AsyncHTTPClient:
    """An async HTTP client for the CDF API.

    This class handles retries, rate limiting and turns transport and API errors into
    result messages. It never raises on a failed request, use
    ``HTTPResult.get_success_or_raise`` for that.

    Args:
        config (CogniteBatchClientConfig): Configuration for the client.
        max_retries (int | None): The maximum number of retries for a request. Defaults to
            the value in the config.
        max_connections (int): The maximum number of concurrent connections. Default is 20.
        retry_status_codes (frozenset[int]): HTTP status codes that should trigger a retry.
            Default is {408, 429, 502, 503, 504}.
        console (Console | None): Optional Rich Console for printing warnings.

    """

    def __init__(
        self,
        config: CogniteBatchClientConfig,
        max_retries: int | None = None,
        max_connections: int = 20,
        retry_status_codes: Set[int] = RETRY_STATUS_CODES,
        console: Console | None = None,
    ):
        self.config = config
        self._max_retries = config.max_retries if max_retries is None else max_retries
        self._retry_status_codes = retry_status_codes
        self._console = console
        self.session = httpx.AsyncClient(
            limits=httpx.Limits(max_connections=max_connections),
            timeout=config.timeout,
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self, exc_type: type[BaseException] | None, exc_value: BaseException | None, traceback: object | None
    ) -> Literal[False]:
        """Close the session when exiting the context."""
        await self.aclose()
        return False  # Do not suppress exceptions

    async def aclose(self) -> None:
        await self.session.aclose()

    def _create_headers(self, use_gzip: bool) -> MutableMapping[str, str]:
        headers: MutableMapping[str, str] = {}
        headers["User-Agent"] = f"httpx/{httpx.__version__} {get_user_agent()}"
        auth_name, auth_value = self.config.credentials.authorization_header()
        headers[auth_name] = auth_value
        headers["Content-Type"] = "application/json"
        headers["accept"] = "application/json"
        headers["x-cdp-sdk"] = f"CogniteBatchSDK:{get_current_sdk_version()}"
        headers["x-cdp-app"] = self.config.client_name
        headers["cdf-version"] = self.config.api_subversion
        if self.config.headers:
            headers.update(self.config.headers)
        if use_gzip:
            headers["Content-Encoding"] = "gzip"
        return headers

    @staticmethod
    def _get_retry_after_in_header(response: httpx.Response) -> float | None:
        if "Retry-After" not in response.headers:
            return None
        try:
            return float(response.headers["Retry-After"])
        except ValueError:
            # Ignore invalid Retry-After header
            return None

    @staticmethod
    def _backoff_time(attempts: int) -> float:
        backoff_time = 0.5 * (2**attempts)
        return min(backoff_time, global_config.max_retry_backoff) * random.uniform(0, 1.0)

    async def request(self, message: RequestMessage) -> RequestMessage | HTTPResult:
        """Send a single HTTP request.

        Args:
            message (RequestMessage): The request message to send.
        Returns:
            RequestMessage | HTTPResult: The same message, with an increased attempt count, if the
                request should be retried. Otherwise, the final result.
        """
        try:
            response = await self._make_request(message)
            result = await self._handle_response(response, message)
        except Exception as e:
            result = await self._handle_error(e, message)
        return result

    async def request_with_retries(self, message: RequestMessage) -> HTTPResult:
        """Send an HTTP request and handle retries.

        This method will keep retrying the request until it either succeeds or
        exhausts the maximum number of retries.

        Args:
            message (RequestMessage): The request message to send.
        Returns:
            HTTPResult: The final response message, which can be either successful response or failed request.
        """
        if message.total_attempts > 0:
            raise RuntimeError(f"RequestMessage has already been attempted {message.total_attempts} times.")
        current_request = message
        while True:
            result = await self.request(current_request)
            if isinstance(result, RequestMessage):
                current_request = result
            elif isinstance(result, HTTPResult):
                return result
            else:
                raise TypeError(f"Unexpected result type: {type(result)}")

    async def _make_request(self, message: RequestMessage) -> httpx.Response:
        logger.debug("%s %s (attempt %d)", message.method, message.endpoint_url, message.total_attempts + 1)
        return await self.session.request(
            method=message.method,
            url=message.endpoint_url,
            content=message.content,
            headers=self._create_headers(message.use_gzip),
            params=message.parameters,
            timeout=self.config.timeout,
            follow_redirects=False,
        )

    async def _handle_response(self, response: httpx.Response, request: RequestMessage) -> RequestMessage | HTTPResult:
        request_id = response.headers.get("X-Request-ID")
        if 200 <= response.status_code < 300:
            return SuccessResponse(status_code=response.status_code, body=response.text, request_id=request_id)
        if retry_request := await self._retry_request(response, request):
            return retry_request
        # Permanent failure
        logger.debug("%s %s failed with status %d", request.method, request.endpoint_url, response.status_code)
        return FailedResponse(
            status_code=response.status_code,
            body=response.text,
            error=ErrorDetails.from_response(response),
            request_id=request_id,
        )

    async def _retry_request(self, response: httpx.Response, request: RequestMessage) -> RequestMessage | None:
        retry_after = self._get_retry_after_in_header(response)
        if retry_after is not None and response.status_code == 429 and request.status_attempt < self._max_retries:
            if self._console is not None:
                short_url = request.endpoint_url.removeprefix(self.config.base_api_url)
                HighSeverityWarning(
                    f"Rate limit exceeded for the {short_url!r} endpoint. Retrying after {retry_after} seconds."
                ).print_warning(console=self._console)
            request.status_attempt += 1
            await asyncio.sleep(retry_after)
            return request

        if request.status_attempt < self._max_retries and response.status_code in self._retry_status_codes:
            request.status_attempt += 1
            logger.debug("Retrying %s after status %d", request.endpoint_url, response.status_code)
            await asyncio.sleep(self._backoff_time(request.total_attempts))
            return request
        return None

    async def _handle_error(self, e: Exception, request: RequestMessage) -> RequestMessage | HTTPResult:
        if isinstance(e, httpx.ReadTimeout | httpx.TimeoutException):
            error_type = "read"
            request.read_attempt += 1
            attempts = request.read_attempt
        elif isinstance(e, ConnectionError | httpx.ConnectError | httpx.ConnectTimeout):
            error_type = "connect"
            request.connect_attempt += 1
            attempts = request.connect_attempt
        else:
            error_msg = f"Unexpected exception: {e!s}"
            return FailedRequest(error=error_msg)

        if attempts <= self._max_retries:
            logger.debug("Retrying %s after %s error: %s", request.endpoint_url, error_type, e)
            await asyncio.sleep(self._backoff_time(request.total_attempts))
            return request
        # We have already incremented the attempt count, so we subtract 1 here
        error_msg = f"RequestException after {request.total_attempts - 1} attempts ({error_type} error): {e!s}"
        if self._console is not None:
            MediumSeverityWarning(error_msg).print_warning(console=self._console)
        return FailedRequest(error=error_msg)
