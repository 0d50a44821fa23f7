"""Hashub Vector API client."""

import asyncio
import logging
from datetime import date
from pathlib import Path
from typing import Any, Optional, Union

import httpx

from .config import ClientConfig, load_config
from .executor import RequestExecutor
from .models import (
    EmbeddingRequest,
    EmbeddingResponse,
    ModelInfo,
    ModelName,
    OperationRequest,
    SimilarityRequest,
    SimilarityResponse,
    UsageResponse,
    UsageStats,
    VectorizeBatchRequest,
    VectorizeBatchResponse,
    VectorizeRequest,
    VectorizeResponse,
)
from .response_parser import (
    parse_embedding_response,
    parse_models_response,
    parse_similarity_response,
    parse_usage_response,
    parse_usage_stats,
    parse_vectorize_batch_response,
    parse_vectorize_response,
)
from .retry import SleepFunc

logger = logging.getLogger(__name__)

DateLike = Union[str, date]


class HashubVector:
    """
    Async client for the Hashub Vector embedding API.

    Every operation returns a typed result or raises ``HashubVectorError``.
    Transient failures (rate limits, 5xx, network errors, timeouts) are
    retried with exponential backoff; authentication, quota and validation
    failures are raised immediately.

    Use as an async context manager so the pooled HTTP connections are
    released::

        async with HashubVector(api_key="...") as client:
            response = await client.vectorize("Merhaba dünya!", model="gte_base")
            print(response.dimension)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        extra_headers: Optional[dict[str, str]] = None,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        """
        Initialize the client.

        Either pass a ready ``config`` or the individual settings; settings
        left as ``None`` take their documented defaults.

        Args:
            api_key: API key for authentication
            base_url: Root URL of the API
            timeout: Per-attempt request timeout in seconds
            max_retries: Total attempts per call, including the first
            extra_headers: Additional headers sent with every request
            config: Complete configuration, used instead of the settings above
            transport: Optional httpx transport (used by tests)
            sleep: Coroutine used for backoff delays

        Raises:
            ValueError: If the configuration is invalid
        """
        if config is None:
            settings: dict[str, Any] = {
                "base_url": base_url,
                "timeout": timeout,
                "max_retries": max_retries,
                "extra_headers": extra_headers,
            }
            config = ClientConfig(
                api_key=api_key or "",
                **{k: v for k, v in settings.items() if v is not None},
            )
        self._config = config
        self._executor = RequestExecutor(config, transport=transport, sleep=sleep)

    @property
    def config(self) -> ClientConfig:
        """Return the client configuration."""
        return self._config

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        await self._executor.close()

    async def __aenter__(self) -> "HashubVector":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def vectorize(
        self,
        text: str,
        model: Optional[ModelName] = None,
        chunk_size: Optional[int] = None,
        chunk_overlap: Optional[float] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> VectorizeResponse:
        """
        Generate an embedding for a single text.

        Args:
            text: Text to vectorize
            model: Model alias (defaults to ``e5_base``)
            chunk_size: Maximum chunk size for long texts
            chunk_overlap: Overlap ratio between chunks (0-1)
            cancel_event: Optional event that aborts the call when set

        Returns:
            The embedding vector with its dimension and token count
        """
        request = VectorizeRequest(
            text=text, model=model, chunk_size=chunk_size, chunk_overlap=chunk_overlap
        )
        data = await self._executor.execute(
            OperationRequest("POST", "/vectorize", body=request.to_payload()),
            cancel_event=cancel_event,
        )
        return parse_vectorize_response(data)

    async def vectorize_batch(
        self,
        texts: list[str],
        model: Optional[ModelName] = None,
        chunk_size: Optional[int] = None,
        chunk_overlap: Optional[float] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> VectorizeBatchResponse:
        """
        Generate embeddings for multiple texts in one request.

        Args:
            texts: Texts to vectorize, in order
            model: Model alias (defaults to ``e5_base``)
            chunk_size: Maximum chunk size for long texts
            chunk_overlap: Overlap ratio between chunks (0-1)
            cancel_event: Optional event that aborts the call when set

        Returns:
            One vector per input text, in input order

        Raises:
            ValueError: If ``texts`` is empty
        """
        if not texts:
            raise ValueError("texts must contain at least one item")

        request = VectorizeBatchRequest(
            texts=list(texts), model=model, chunk_size=chunk_size, chunk_overlap=chunk_overlap
        )
        data = await self._executor.execute(
            OperationRequest("POST", "/vectorize-batch", body=request.to_payload()),
            cancel_event=cancel_event,
        )
        return parse_vectorize_batch_response(data)

    async def similarity(
        self,
        text1: str,
        text2: str,
        model: Optional[ModelName] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> SimilarityResponse:
        """Calculate the cosine similarity between two texts."""
        request = SimilarityRequest(text1=text1, text2=text2, model=model)
        data = await self._executor.execute(
            OperationRequest("POST", "/similarity", body=request.to_payload()),
            cancel_event=cancel_event,
        )
        return parse_similarity_response(data)

    async def get_models(
        self, cancel_event: Optional[asyncio.Event] = None
    ) -> list[ModelInfo]:
        """List the models available to this API key."""
        data = await self._executor.execute(
            OperationRequest("GET", "/models"), cancel_event=cancel_event
        )
        return parse_models_response(data)

    async def get_usage(self, cancel_event: Optional[asyncio.Event] = None) -> UsageStats:
        """Return current token usage for this API key."""
        data = await self._executor.execute(
            OperationRequest("GET", "/usage"), cancel_event=cancel_event
        )
        return parse_usage_stats(data)

    async def get_detailed_usage(
        self,
        from_date: Optional[DateLike] = None,
        to_date: Optional[DateLike] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> UsageResponse:
        """
        Return usage statistics with a daily breakdown.

        Args:
            from_date: Start of the period (``YYYY-MM-DD`` or ``date``)
            to_date: End of the period (``YYYY-MM-DD`` or ``date``)
            cancel_event: Optional event that aborts the call when set

        Raises:
            ValueError: If a date is not in ``YYYY-MM-DD`` form
        """
        params: dict[str, str] = {}
        if from_date:
            params["from"] = format_date(from_date)
        if to_date:
            params["to"] = format_date(to_date)

        data = await self._executor.execute(
            OperationRequest("GET", "/usage", params=params or None),
            cancel_event=cancel_event,
        )
        return parse_usage_response(data)

    async def create_embedding(
        self,
        input: Union[str, list[str]],
        model: ModelName,
        user: Optional[str] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> EmbeddingResponse:
        """
        OpenAI-compatible embedding endpoint.

        Drop-in replacement for ``client.embeddings.create`` style calls::

            response = await client.create_embedding("Your text here", model="e5_base")
            embedding = response.data[0].embedding
        """
        request = EmbeddingRequest(input=input, model=model, user=user)
        data = await self._executor.execute(
            OperationRequest("POST", "/embeddings", body=request.to_payload()),
            cancel_event=cancel_event,
        )
        return parse_embedding_response(data)


def format_date(value: DateLike) -> str:
    """Render a date as ``YYYY-MM-DD``, validating string input."""
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    try:
        return date.fromisoformat(value).strftime("%Y-%m-%d")
    except ValueError as e:
        raise ValueError(f"Invalid date {value!r}, expected YYYY-MM-DD") from e


def create_client(
    api_key: Optional[str] = None,
    config_path: Optional[Path | str] = None,
    apply_env: bool = True,
    **overrides: Any,
) -> HashubVector:
    """
    Factory function to create a client from file, environment and arguments.

    Args:
        api_key: API key; falls back to ``HASHUB_API_KEY``
        config_path: Optional YAML/JSON config file
        apply_env: Whether to read ``.env`` and HASHUB_* variables
        **overrides: Other ``ClientConfig`` fields

    Returns:
        Configured HashubVector instance
    """
    config = load_config(config_path, apply_env=apply_env, api_key=api_key, **overrides)
    return HashubVector(config=config)
