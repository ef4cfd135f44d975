"""Reporting: text summaries and charts."""

from nft_sales_normalization.reporting.summary import (
    describe_prices,
    format_band_summary,
    format_pipeline_result,
)
from nft_sales_normalization.reporting.charts import (
    render_histogram,
    render_pie,
    render_waffle,
    render_all,
)

__all__ = [
    "describe_prices",
    "format_band_summary",
    "format_pipeline_result",
    "render_histogram",
    "render_pie",
    "render_waffle",
    "render_all",
]
