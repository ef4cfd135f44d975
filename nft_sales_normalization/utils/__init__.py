"""Utility functions for the sale price pipeline."""

from nft_sales_normalization.utils.logging import setup_logging
from nft_sales_normalization.utils.units import (
    to_major_units,
    parse_int_amount,
)
from nft_sales_normalization.utils.time_utils import to_utc_timestamp, parse_iso_timestamp

__all__ = [
    "setup_logging",
    "to_major_units",
    "parse_int_amount",
    "to_utc_timestamp",
    "parse_iso_timestamp",
]
