"""
Hashub Vector client library.

Async HTTP client for the Hashub Vector embedding API: single and batch
vectorization, similarity, model listing, usage reporting and an
OpenAI-compatible embeddings endpoint, with bounded exponential backoff retry.
"""

from .classifier import classify
from .client import HashubVector, create_client
from .config import VERSION, ClientConfig, load_config
from .errors import ErrorKind, HashubVectorError
from .executor import RequestExecutor
from .models import (
    DailyUsage,
    EmbeddingData,
    EmbeddingModel,
    EmbeddingRequest,
    EmbeddingResponse,
    EmbeddingUsage,
    ModelInfo,
    OperationRequest,
    SimilarityRequest,
    SimilarityResponse,
    UsagePeriod,
    UsageResponse,
    UsageStats,
    VectorizeBatchRequest,
    VectorizeBatchResponse,
    VectorizeRequest,
    VectorizeResponse,
)
from .retry import RetryConfig

__version__ = VERSION

__all__ = [
    "HashubVector",
    "create_client",
    "ClientConfig",
    "load_config",
    "RequestExecutor",
    "RetryConfig",
    "classify",
    "ErrorKind",
    "HashubVectorError",
    "EmbeddingModel",
    "OperationRequest",
    "VectorizeRequest",
    "VectorizeBatchRequest",
    "SimilarityRequest",
    "EmbeddingRequest",
    "VectorizeResponse",
    "VectorizeBatchResponse",
    "SimilarityResponse",
    "ModelInfo",
    "UsageStats",
    "DailyUsage",
    "UsagePeriod",
    "UsageResponse",
    "EmbeddingData",
    "EmbeddingUsage",
    "EmbeddingResponse",
    "__version__",
]
