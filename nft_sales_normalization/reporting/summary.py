"""Text summaries of a sale price distribution."""

from typing import Any, Dict, Sequence
import numpy as np

from nft_sales_normalization.models.sale_records import BandSummary, PricedSaleRecord, PipelineResult


def describe_prices(records: Sequence[PricedSaleRecord]) -> Dict[str, Any]:
    """
    Calculate basic statistics of USD sale prices.

    Args:
        records: Priced sale records

    Returns:
        Dictionary with count, mean, median, min and max
    """
    if not records:
        return {'count': 0, 'mean': 0.0, 'median': 0.0, 'min': 0.0, 'max': 0.0}

    prices = np.array([r.price_usd for r in records], dtype=float)

    return {
        'count': len(prices),
        'mean': float(np.mean(prices)),
        'median': float(np.median(prices)),
        'min': float(np.min(prices)),
        'max': float(np.max(prices)),
    }


def format_band_summary(summary: BandSummary) -> str:
    """Render a band summary as a fixed-width text table."""
    label_width = max([len("Band (USD)")] + [len(band.label) for band in summary])

    lines = [f"{'Band (USD)':<{label_width}}  {'Count':>7}  {'Percent':>8}"]
    for band in summary:
        lines.append(f"{band.label:<{label_width}}  {band.count:>7}  {band.percent:>7.2f}%")
    lines.append(f"{'Total':<{label_width}}  {summary.total:>7}  {100.0 if summary.total else 0.0:>7.2f}%")

    return "\n".join(lines)


def format_pipeline_result(result: PipelineResult) -> str:
    """Band table followed by filtering counters and price statistics."""
    stats = describe_prices(result.priced_records)

    lines = [
        f"Provider: {result.provider}",
        f"Raw records: {result.total_raw} "
        f"(skipped {result.skipped}, invalid {result.invalid}, out of range {result.out_of_range})",
        "",
        format_band_summary(result.summary),
        "",
        f"Median price: ${stats['median']:,.2f}  "
        f"Mean price: ${stats['mean']:,.2f}  "
        f"Range: ${stats['min']:,.2f} - ${stats['max']:,.2f}",
    ]
    if result.price_source_note:
        lines.append(f"Note: {result.price_source_note}")

    return "\n".join(lines)
