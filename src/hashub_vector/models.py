"""Request and response models for the Hashub Vector API."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Optional, Union


class EmbeddingModel(str, Enum):
    """Embedding models served by the API."""

    GTE_BASE = "gte_base"  # 768D, 8192 tokens: long documents, RAG
    NOMIC_BASE = "nomic_base"  # 768D, 2048 tokens: general purpose
    E5_BASE = "e5_base"  # 768D, 512 tokens: search, retrieval
    MPNET_BASE = "mpnet_base"  # 768D, 512 tokens: Q&A, similarity
    E5_SMALL = "e5_small"  # 384D, 512 tokens: high volume
    MINILM_BASE = "minilm_base"  # 384D, 512 tokens: lowest latency


DEFAULT_MODEL = EmbeddingModel.E5_BASE

ModelName = Union[EmbeddingModel, str]


def model_value(model: Optional[ModelName]) -> Optional[str]:
    """Return the wire name of a model, passing ``None`` through."""
    if model is None:
        return None
    if isinstance(model, EmbeddingModel):
        return model.value
    return str(model)


def _drop_none(payload: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in payload.items() if v is not None}


@dataclass
class OperationRequest:
    """A single HTTP call to be issued by the request executor."""

    method: Literal["GET", "POST"]
    path: str
    body: Optional[dict[str, Any]] = None
    params: Optional[dict[str, str]] = None


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


@dataclass
class VectorizeRequest:
    """Single-text vectorization request."""

    text: str
    model: Optional[ModelName] = None
    chunk_size: Optional[int] = None
    chunk_overlap: Optional[float] = None

    def to_payload(self) -> dict[str, Any]:
        return _drop_none(
            {
                "text": self.text,
                "model": model_value(self.model) or DEFAULT_MODEL.value,
                "chunk_size": self.chunk_size,
                "chunk_overlap": self.chunk_overlap,
            }
        )


@dataclass
class VectorizeBatchRequest:
    """Batch vectorization request."""

    texts: list[str]
    model: Optional[ModelName] = None
    chunk_size: Optional[int] = None
    chunk_overlap: Optional[float] = None

    def to_payload(self) -> dict[str, Any]:
        return _drop_none(
            {
                "texts": list(self.texts),
                "model": model_value(self.model) or DEFAULT_MODEL.value,
                "chunk_size": self.chunk_size,
                "chunk_overlap": self.chunk_overlap,
            }
        )


@dataclass
class SimilarityRequest:
    """Similarity request between two texts."""

    text1: str
    text2: str
    model: Optional[ModelName] = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "text1": self.text1,
            "text2": self.text2,
            "model": model_value(self.model) or DEFAULT_MODEL.value,
        }


@dataclass
class EmbeddingRequest:
    """OpenAI-compatible embedding request."""

    input: Union[str, list[str]]
    model: ModelName
    user: Optional[str] = None

    def to_payload(self) -> dict[str, Any]:
        return _drop_none(
            {
                "input": self.input if isinstance(self.input, str) else list(self.input),
                "model": model_value(self.model),
                "user": self.user,
            }
        )


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


@dataclass
class VectorizeResponse:
    vector: list[float]
    dimension: int
    model: str
    tokens: int
    chunk_count: Optional[int] = None


@dataclass
class VectorizeBatchResponse:
    vectors: list[list[float]]
    dimension: int
    model: str
    count: int
    total_tokens: int


@dataclass
class SimilarityResponse:
    similarity: float
    model: str


@dataclass
class ModelInfo:
    """Description of one model as reported by ``GET /models``."""

    alias: str
    name: str
    description: str
    dimension: int
    max_tokens: int
    price_per_m_tokens: float
    turkish_support: int


@dataclass
class UsageStats:
    tokens_used: int
    tokens_limit: int
    tokens_percentage_used: float
    tokens_remaining: int


@dataclass
class DailyUsage:
    date: str
    tokens_used: int
    request_count: int
    model_usage: dict[str, int] = field(default_factory=dict)


@dataclass
class UsagePeriod:
    from_date: str
    to_date: str


@dataclass
class UsageResponse:
    """Usage statistics with a daily breakdown for a reporting period."""

    usage: UsageStats
    daily_usage: list[DailyUsage] = field(default_factory=list)
    period: Optional[UsagePeriod] = None


@dataclass
class EmbeddingData:
    embedding: list[float]
    index: int
    object: str = "embedding"


@dataclass
class EmbeddingUsage:
    prompt_tokens: int
    total_tokens: int


@dataclass
class EmbeddingResponse:
    """OpenAI-compatible embedding response."""

    data: list[EmbeddingData]
    model: str
    usage: EmbeddingUsage
    object: str = "list"

    @property
    def embeddings(self) -> list[list[float]]:
        """Embedding vectors ordered by their input index."""
        return [item.embedding for item in sorted(self.data, key=lambda d: d.index)]
