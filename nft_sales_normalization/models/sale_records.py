"""Record types flowing through the sale price pipeline."""

from datetime import datetime
from typing import FrozenSet, List, Optional, Tuple
from dataclasses import dataclass, field


@dataclass(frozen=True)
class AdapterContext:
    """Per-run values shared read-only by every adapter call.

    ``unit_price_usd`` is the single current exchange rate used by sources
    whose payload carries no per-record price. Applying it to historically
    dated sales is a known approximation.
    """
    unit_price_usd: Optional[float] = None
    currency_decimals: int = 18
    included_currencies: FrozenSet[str] = frozenset({"Ether", "Wrapped Ether"})
    sale_functions: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class IntermediateSaleRecord:
    """Provider-agnostic sale produced by a source adapter."""
    raw_amount: int
    currency_decimals: int
    unit_price_usd: float
    timestamp: datetime
    currency_name: str
    quantity: int = 1

    # Provenance
    source: Optional[str] = None
    record_id: Optional[str] = None


@dataclass(frozen=True)
class PricedSaleRecord:
    """Sale priced in USD per item."""
    price_usd: float
    timestamp: datetime

    source: Optional[str] = None
    record_id: Optional[str] = None


@dataclass(frozen=True)
class Band:
    """One USD price band of a distribution."""
    label: str
    lower_bound_usd: float
    upper_bound_usd: float
    count: int
    percent: float
    lower_inclusive: bool = False


@dataclass(frozen=True)
class BandSummary:
    """Ascending sequence of bands covering every bucketed record."""
    bands: Tuple[Band, ...]
    total: int

    def __iter__(self):
        return iter(self.bands)

    def __len__(self) -> int:
        return len(self.bands)

    def get(self, label: str) -> Optional[Band]:
        """Look up a band by label."""
        for band in self.bands:
            if band.label == label:
                return band
        return None

    def counts(self) -> List[int]:
        return [band.count for band in self.bands]


@dataclass
class PipelineResult:
    """Outcome of one pipeline run over a batch of raw records."""
    provider: str
    summary: BandSummary
    priced_records: List[PricedSaleRecord] = field(default_factory=list)

    # Filtering counters
    total_raw: int = 0
    skipped: int = 0
    invalid: int = 0
    out_of_range: int = 0

    price_source_note: Optional[str] = None
