"""Response parsing logic for the Hashub Vector API."""

import logging
from functools import wraps
from typing import Any, Callable, TypeVar

from .errors import ErrorKind, HashubVectorError
from .models import (
    DailyUsage,
    EmbeddingData,
    EmbeddingResponse,
    EmbeddingUsage,
    ModelInfo,
    SimilarityResponse,
    UsagePeriod,
    UsageResponse,
    UsageStats,
    VectorizeBatchResponse,
    VectorizeResponse,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _invalid_format(parser: Callable[[Any], T]) -> Callable[[Any], T]:
    """Turn decoding failures into an unclassified ``HashubVectorError``."""

    @wraps(parser)
    def wrapper(data: Any) -> T:
        try:
            return parser(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise HashubVectorError(
                ErrorKind.UNCLASSIFIED, f"Invalid response format: {e!r}"
            ) from e

    return wrapper


def _vector(values: Any) -> list[float]:
    return [float(v) for v in values]


@_invalid_format
def parse_vectorize_response(data: dict[str, Any]) -> VectorizeResponse:
    """Parse the body of ``POST /vectorize``."""
    vector = _vector(data["vector"])
    dimension = int(data["dimension"])
    if len(vector) != dimension:
        logger.warning(
            f"Embedding dimension mismatch: expected {dimension}, got {len(vector)}"
        )
    chunk_count = data.get("chunkCount")
    return VectorizeResponse(
        vector=vector,
        dimension=dimension,
        model=str(data["model"]),
        tokens=int(data["tokens"]),
        chunk_count=int(chunk_count) if chunk_count is not None else None,
    )


@_invalid_format
def parse_vectorize_batch_response(data: dict[str, Any]) -> VectorizeBatchResponse:
    """Parse the body of ``POST /vectorize-batch``."""
    vectors = [_vector(v) for v in data["vectors"]]
    count = int(data["count"])
    if len(vectors) != count:
        logger.warning(f"Expected {count} embeddings, got {len(vectors)}")
    return VectorizeBatchResponse(
        vectors=vectors,
        dimension=int(data["dimension"]),
        model=str(data["model"]),
        count=count,
        total_tokens=int(data["totalTokens"]),
    )


@_invalid_format
def parse_similarity_response(data: dict[str, Any]) -> SimilarityResponse:
    """Parse the body of ``POST /similarity``."""
    return SimilarityResponse(similarity=float(data["similarity"]), model=str(data["model"]))


@_invalid_format
def parse_models_response(data: dict[str, Any]) -> list[ModelInfo]:
    """Parse the body of ``GET /models``."""
    return [
        ModelInfo(
            alias=str(item["alias"]),
            name=str(item.get("name", item["alias"])),
            description=str(item.get("description", "")),
            dimension=int(item["dimension"]),
            max_tokens=int(item["maxTokens"]),
            price_per_m_tokens=float(item.get("pricePerMTokens", 0.0)),
            turkish_support=int(item.get("turkishSupport", 0)),
        )
        for item in data["models"]
    ]


def _usage_stats(data: dict[str, Any]) -> UsageStats:
    return UsageStats(
        tokens_used=int(data["tokensUsed"]),
        tokens_limit=int(data["tokensLimit"]),
        tokens_percentage_used=float(data["tokensPercentageUsed"]),
        tokens_remaining=int(data["tokensRemaining"]),
    )


@_invalid_format
def parse_usage_stats(data: dict[str, Any]) -> UsageStats:
    """Parse usage statistics, whether bare or wrapped in a ``usage`` key."""
    return _usage_stats(data["usage"] if "usage" in data else data)


@_invalid_format
def parse_usage_response(data: dict[str, Any]) -> UsageResponse:
    """Parse the detailed body of ``GET /usage``."""
    daily = [
        DailyUsage(
            date=str(day["date"]),
            tokens_used=int(day["tokensUsed"]),
            request_count=int(day["requestCount"]),
            model_usage={str(k): int(v) for k, v in (day.get("modelUsage") or {}).items()},
        )
        for day in data.get("dailyUsage") or []
    ]
    period_data = data.get("period")
    period = (
        UsagePeriod(from_date=str(period_data["from"]), to_date=str(period_data["to"]))
        if period_data
        else None
    )
    return UsageResponse(
        usage=_usage_stats(data["usage"] if "usage" in data else data),
        daily_usage=daily,
        period=period,
    )


@_invalid_format
def parse_embedding_response(data: dict[str, Any]) -> EmbeddingResponse:
    """Parse the OpenAI-compatible body of ``POST /embeddings``."""
    items = [
        EmbeddingData(
            embedding=_vector(item["embedding"]),
            index=int(item.get("index", i)),
            object=str(item.get("object", "embedding")),
        )
        for i, item in enumerate(data["data"])
    ]
    usage = data["usage"]
    return EmbeddingResponse(
        data=items,
        model=str(data["model"]),
        usage=EmbeddingUsage(
            prompt_tokens=int(usage["prompt_tokens"]),
            total_tokens=int(usage["total_tokens"]),
        ),
        object=str(data.get("object", "list")),
    )
