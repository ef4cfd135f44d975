"""Distribution bucketer: USD prices to fixed monetary bands."""

from typing import List, Optional, Sequence
import numpy as np
import structlog

from nft_sales_normalization.core.errors import EmptyInput, InvalidRecord
from nft_sales_normalization.models.config import DEFAULT_BAND_EDGES
from nft_sales_normalization.models.sale_records import Band, BandSummary, PricedSaleRecord

logger = structlog.get_logger(__name__)


def validate_band_edges(band_edges: Sequence[float]) -> List[float]:
    """Return edges as floats, raising ValueError unless strictly ascending."""
    edges = [float(edge) for edge in band_edges]
    if len(edges) < 2:
        raise ValueError("At least two band edges are required")
    for lo, hi in zip(edges, edges[1:]):
        if not lo < hi:
            raise ValueError(f"Band edges must be strictly ascending: {lo} >= {hi}")
    return edges


def format_edge(edge: float) -> str:
    if float(edge).is_integer():
        return str(int(edge))
    return f"{edge:g}"


def band_label(lower: float, upper: float) -> str:
    """Label such as ``"1000-10000"``."""
    return f"{format_edge(lower)}-{format_edge(upper)}"


def within_bands(price_usd: float, band_edges: Optional[Sequence[float]] = None) -> bool:
    """True when a price falls inside ``[first edge, last edge]``."""
    edges = DEFAULT_BAND_EDGES if band_edges is None else band_edges
    return edges[0] <= price_usd <= edges[-1]


def bucket(records: Sequence[PricedSaleRecord],
           band_edges: Optional[Sequence[float]] = None) -> BandSummary:
    """
    Classify priced sales into bands and compute counts and percentages.

    The first band is closed on both ends, every later band is
    ``(edge[i], edge[i+1]]``, so a price equal to an interior edge belongs
    to the lower band.

    Args:
        records: Priced sale records
        band_edges: Ascending band boundaries (default 0 to 1,000,000)

    Returns:
        BandSummary in ascending band order

    Raises:
        EmptyInput: if there are no records
        InvalidRecord: if a price lies outside the outer edges
        ValueError: if the band edges are not strictly ascending
    """
    edges = validate_band_edges(DEFAULT_BAND_EDGES if band_edges is None else band_edges)

    if not records:
        raise EmptyInput("No priced records to bucket")

    prices = np.array([record.price_usd for record in records], dtype=float)

    outside = (prices < edges[0]) | (prices > edges[-1]) | np.isnan(prices)
    if outside.any():
        first_bad = prices[outside][0]
        raise InvalidRecord(
            f"{int(outside.sum())} price(s) outside [{edges[0]}, {edges[-1]}], e.g. {first_bad}"
        )

    # right=True gives edges[i-1] < x <= edges[i]; the lowest edge maps to 0
    indices = np.maximum(np.digitize(prices, edges, right=True) - 1, 0)
    counts = np.bincount(indices, minlength=len(edges) - 1)

    total = len(prices)
    bands = tuple(
        Band(
            label=band_label(edges[i], edges[i + 1]),
            lower_bound_usd=edges[i],
            upper_bound_usd=edges[i + 1],
            count=int(counts[i]),
            percent=float(counts[i]) / total * 100.0,
            lower_inclusive=(i == 0),
        )
        for i in range(len(edges) - 1)
    )

    logger.debug("Bucketed prices", total=total, counts=[band.count for band in bands])
    return BandSummary(bands=bands, total=total)
