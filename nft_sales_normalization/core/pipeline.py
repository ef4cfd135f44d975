"""Sale price pipeline orchestrator."""

from typing import Any, Iterable, Mapping, Optional
import structlog

from nft_sales_normalization.core.adapters import get_adapter, EtherscanAdapter
from nft_sales_normalization.core.bucketer import bucket, validate_band_edges, within_bands
from nft_sales_normalization.core.errors import EmptyInput
from nft_sales_normalization.core.normalizer import normalize_batch
from nft_sales_normalization.models.config import PipelineConfig
from nft_sales_normalization.models.sale_records import AdapterContext, PipelineResult

logger = structlog.get_logger(__name__)

UNIFORM_RATE_NOTE = (
    "Prices use one current exchange rate for every sale; "
    "historical rates at sale time are not applied."
)


def build_context(config: PipelineConfig,
                  unit_price_usd: Optional[float] = None) -> AdapterContext:
    """Create the per-run adapter context from configuration."""
    return AdapterContext(
        unit_price_usd=unit_price_usd,
        currency_decimals=config.currency_decimals,
        included_currencies=frozenset(config.included_currencies),
        sale_functions=frozenset(config.sale_functions),
    )


class SalePricePipeline:
    """Raw provider records to a banded USD price distribution."""

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or PipelineConfig()
        self.band_edges = validate_band_edges(self.config.band_edges)
        self.logger = logger.bind(component="sale_price_pipeline")

    def run(self, raw_records: Iterable[Mapping[str, Any]],
            provider: str,
            context: Optional[AdapterContext] = None) -> PipelineResult:
        """
        Run one batch of raw records through the pipeline.

        Skipped and invalid records are counted and logged; the summary
        covers the valid subset.

        Args:
            raw_records: Raw records of a single provider
            provider: Provider name ("opensea" or "etherscan")
            context: Adapter context (built from config when omitted)

        Returns:
            PipelineResult

        Raises:
            EmptyInput: if no record survives filtering
        """
        raw_records = list(raw_records)
        adapter = get_adapter(provider)
        context = context or build_context(self.config)

        self.logger.info("Running sale price pipeline",
                         provider=adapter.provider,
                         raw_records=len(raw_records))

        intermediate, skipped, adapt_invalid = adapter.adapt_batch(raw_records, context)
        priced, normalize_invalid = normalize_batch(intermediate)

        in_range = [r for r in priced if within_bands(r.price_usd, self.band_edges)]
        out_of_range = len(priced) - len(in_range)
        if out_of_range:
            self.logger.warning("Prices outside band range rejected",
                                count=out_of_range,
                                min_edge=self.band_edges[0],
                                max_edge=self.band_edges[-1])

        if not in_range:
            self.logger.error("No records left after filtering",
                              provider=adapter.provider,
                              raw_records=len(raw_records),
                              skipped=skipped)
            raise EmptyInput(f"No {adapter.provider} sale records left after filtering")

        summary = bucket(in_range, self.band_edges)

        result = PipelineResult(
            provider=adapter.provider,
            summary=summary,
            priced_records=in_range,
            total_raw=len(raw_records),
            skipped=skipped,
            invalid=adapt_invalid + normalize_invalid,
            out_of_range=out_of_range,
            price_source_note=UNIFORM_RATE_NOTE if isinstance(adapter, EtherscanAdapter) else None,
        )

        self.logger.info("Sale price pipeline completed",
                         provider=result.provider,
                         bucketed=summary.total,
                         skipped=result.skipped,
                         invalid=result.invalid,
                         out_of_range=result.out_of_range)
        return result
