"""Core pipeline components."""

from nft_sales_normalization.core.adapters import (
    SourceAdapter,
    OpenSeaAdapter,
    EtherscanAdapter,
    get_adapter,
)
from nft_sales_normalization.core.normalizer import normalize, normalize_batch
from nft_sales_normalization.core.bucketer import bucket, within_bands
from nft_sales_normalization.core.errors import (
    PipelineError,
    SkippedRecord,
    InvalidRecord,
    EmptyInput,
)

__all__ = [
    "SourceAdapter",
    "OpenSeaAdapter",
    "EtherscanAdapter",
    "get_adapter",
    "normalize",
    "normalize_batch",
    "bucket",
    "within_bands",
    "PipelineError",
    "SkippedRecord",
    "InvalidRecord",
    "EmptyInput",
]
