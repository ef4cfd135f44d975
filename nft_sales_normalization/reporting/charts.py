"""
Chart rendering for sale price distributions.

Pie and waffle charts list bands from the most to the least expensive;
band summaries themselves stay in ascending order.
"""

from pathlib import Path
from typing import List, Sequence, Union
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.colors import ListedColormap
from matplotlib.patches import Patch
import numpy as np
import structlog

from nft_sales_normalization.models.sale_records import Band, BandSummary, PricedSaleRecord

logger = structlog.get_logger(__name__)

PathLike = Union[str, Path]

BAND_COLORS = ["#d62728", "#ff7f0e", "#bcbd22", "#2ca02c", "#17becf", "#1f77b4", "#9467bd", "#8c564b"]


def _display_bands(summary: BandSummary) -> List[Band]:
    return list(reversed(summary.bands))


def _save(fig, path: PathLike) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(path)
    plt.close(fig)
    logger.info("Chart saved", path=str(path))
    return path


def render_histogram(records: Sequence[PricedSaleRecord], path: PathLike,
                     title: str = "NFT Sale Prices (USD)") -> Path:
    """Histogram of USD prices on logarithmic bins."""
    prices = np.array([r.price_usd for r in records], dtype=float)
    positive = prices[prices > 0]

    fig, ax = plt.subplots(figsize=(10, 6))
    if len(positive):
        low, high = np.log10(positive.min()), np.log10(positive.max())
        bins = np.logspace(np.floor(low), np.ceil(high) if high > low else np.floor(low) + 1, 30)
        ax.hist(positive, bins=bins, color="#1f77b4", edgecolor="black")
        ax.set_xscale("log")
    ax.set_title(title)
    ax.set_xlabel("Price per item (USD)")
    ax.set_ylabel("Number of sales")

    return _save(fig, path)


def render_pie(summary: BandSummary, path: PathLike,
               title: str = "Share of Sales by Price Band") -> Path:
    """Pie chart of non-empty bands."""
    bands = [band for band in _display_bands(summary) if band.count > 0]
    colors = [BAND_COLORS[i % len(BAND_COLORS)] for i in range(len(bands))]

    fig, ax = plt.subplots(figsize=(8, 8))
    ax.pie(
        [band.count for band in bands],
        labels=[f"${band.label}" for band in bands],
        colors=colors,
        autopct="%1.1f%%",
        startangle=90,
        counterclock=False,
    )
    ax.set_title(title)
    ax.axis("equal")

    return _save(fig, path)


def waffle_cells(summary: BandSummary, cells: int = 100) -> List[int]:
    """
    Split ``cells`` waffle squares across bands in display order.

    Uses largest-remainder rounding so the squares always add up to
    ``cells`` when there is at least one record.
    """
    bands = _display_bands(summary)
    if summary.total == 0:
        return [0] * len(bands)

    exact = [band.count / summary.total * cells for band in bands]
    allotted = [int(x) for x in exact]
    remainders = sorted(range(len(bands)), key=lambda i: exact[i] - allotted[i], reverse=True)
    for i in remainders[:cells - sum(allotted)]:
        allotted[i] += 1

    return allotted


def render_waffle(summary: BandSummary, path: PathLike,
                  title: str = "Sales per Price Band (each square = 1%)",
                  rows: int = 10, columns: int = 10) -> Path:
    """Waffle chart: a rows x columns grid of squares colored by band."""
    bands = _display_bands(summary)
    allotted = waffle_cells(summary, rows * columns)

    grid = np.full(rows * columns, -1)
    position = 0
    for index, cell_count in enumerate(allotted):
        grid[position:position + cell_count] = index
        position += cell_count
    grid = grid.reshape(rows, columns)

    colors = ["#ffffff"] + [BAND_COLORS[i % len(BAND_COLORS)] for i in range(len(bands))]

    fig, ax = plt.subplots(figsize=(9, 7))
    ax.imshow(grid + 1, cmap=ListedColormap(colors), vmin=0, vmax=len(bands))
    ax.set_xticks(np.arange(-0.5, columns, 1), minor=True)
    ax.set_yticks(np.arange(-0.5, rows, 1), minor=True)
    ax.grid(which="minor", color="white", linewidth=2)
    ax.tick_params(which="both", bottom=False, left=False, labelbottom=False, labelleft=False)
    ax.legend(
        handles=[
            Patch(color=colors[i + 1], label=f"${band.label} ({band.count})")
            for i, band in enumerate(bands) if band.count > 0
        ],
        loc="upper left",
        bbox_to_anchor=(1.02, 1.0),
    )
    ax.set_title(title)

    return _save(fig, path)


def render_all(summary: BandSummary, records: Sequence[PricedSaleRecord],
               chart_dir: PathLike, prefix: str = "sales") -> List[Path]:
    """Render histogram, pie and waffle charts into ``chart_dir``."""
    chart_dir = Path(chart_dir)
    return [
        render_histogram(records, chart_dir / f"{prefix}_histogram.png"),
        render_pie(summary, chart_dir / f"{prefix}_pie.png"),
        render_waffle(summary, chart_dir / f"{prefix}_waffle.png"),
    ]
