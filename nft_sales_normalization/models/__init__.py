"""Data models for the sale price pipeline."""

from nft_sales_normalization.models.config import PipelineConfig
from nft_sales_normalization.models.sale_records import (
    AdapterContext,
    IntermediateSaleRecord,
    PricedSaleRecord,
    Band,
    BandSummary,
    PipelineResult,
)

__all__ = [
    "PipelineConfig",
    "AdapterContext",
    "IntermediateSaleRecord",
    "PricedSaleRecord",
    "Band",
    "BandSummary",
    "PipelineResult",
]
