"""
NFT Sale Price Normalization

Turns raw NFT sale records from OpenSea and Etherscan into USD prices and
a banded price distribution for reporting.
"""

__version__ = "1.0.0"
__author__ = "NFT Data Engineering Team"
__description__ = "NFT sale price normalization and distribution pipeline"

from nft_sales_normalization.core.pipeline import SalePricePipeline
from nft_sales_normalization.core.normalizer import normalize
from nft_sales_normalization.core.bucketer import bucket
from nft_sales_normalization.models.config import PipelineConfig

__all__ = [
    "SalePricePipeline",
    "normalize",
    "bucket",
    "PipelineConfig",
]
