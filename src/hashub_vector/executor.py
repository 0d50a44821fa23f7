"""HTTP request executor with bounded retry."""

import asyncio
import logging
from typing import Any, Optional

import httpx

from .classifier import classify
from .config import VERSION, ClientConfig
from .errors import ErrorKind, HashubVectorError
from .models import OperationRequest
from .retry import RetryConfig, SleepFunc, with_retry

logger = logging.getLogger(__name__)

USER_AGENT = f"hashub-vector-python/{VERSION}"


class RequestExecutor:
    """
    Issues API requests and turns every failure into a ``HashubVectorError``.

    Each call runs one sequential attempt loop. Client errors (401, 402, 400)
    are raised on the first attempt; rate limits, server errors, network
    failures and timeouts are retried with exponential backoff until
    ``config.max_retries`` attempts have been made. Concurrent calls share
    only the read-only config and a pooled ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        """
        Initialize the executor.

        Args:
            config: Client configuration
            transport: Optional httpx transport, e.g. ``httpx.MockTransport``
            sleep: Coroutine used for backoff delays
        """
        self._config = config
        self._transport = transport
        self._sleep = sleep
        self._retry_config = RetryConfig(max_attempts=config.max_retries)
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def config(self) -> ClientConfig:
        return self._config

    def _headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._config.api_key}",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
        headers.update(self._config.extra_headers)
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client with connection pooling."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url.rstrip("/"),
                headers=self._headers(),
                timeout=self._config.timeout,
                follow_redirects=True,
                transport=self._transport,
                limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def execute(
        self,
        request: OperationRequest,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Any:
        """
        Run a request to completion and return its decoded JSON body.

        Args:
            request: The HTTP call to make
            cancel_event: Optional event that aborts the call when set

        Returns:
            The decoded JSON body of the first 2xx response

        Raises:
            HashubVectorError: The classified error of the failing attempt
            asyncio.CancelledError: If ``cancel_event`` is set
        """
        attempt = 0

        async def attempt_once() -> httpx.Response:
            nonlocal attempt
            attempt += 1
            logger.debug(f"{request.method} {request.path} (attempt {attempt})")
            return await self._send(request)

        response = await with_retry(
            attempt_once, self._retry_config, sleep=self._sleep, cancel_event=cancel_event
        )

        try:
            return response.json()
        except ValueError as e:
            raise HashubVectorError(
                ErrorKind.UNCLASSIFIED,
                "Invalid JSON response",
                status=response.status_code,
            ) from e

    async def _send(self, request: OperationRequest) -> httpx.Response:
        """
        Make a single HTTP call.

        Raises:
            HashubVectorError: For non-2xx responses and transport failures
        """
        client = await self._get_client()
        body = (
            {k: v for k, v in request.body.items() if v is not None}
            if request.body is not None
            else None
        )
        try:
            response = await client.request(
                request.method,
                request.path,
                json=body,
                params=request.params or None,
            )
        except httpx.HTTPError as e:
            raise classify(e) from e

        if response.is_success:
            return response
        raise classify(response)
