"""
Integration tests for the sale price pipeline.

Runs raw provider payloads through adapters, normalizer and bucketer.
"""

import pytest


class TestSalePricePipeline:
    """Tests for SalePricePipeline.run()."""

    @pytest.fixture
    def pipeline(self, pipeline_config):
        """Create pipeline with default configuration."""
        from nft_sales_normalization.core.pipeline import SalePricePipeline
        return SalePricePipeline(pipeline_config)

    def test_opensea_batch(self, pipeline, pipeline_config, sample_opensea_event):
        """Test an OpenSea batch with mixed currencies and event types."""
        from nft_sales_normalization.core.pipeline import build_context

        cheap = dict(sample_opensea_event, total_price="2500000000000000")       # $5
        usdc = dict(sample_opensea_event,
                    payment_token=dict(sample_opensea_event["payment_token"], name="USD Coin"))
        transfer = dict(sample_opensea_event, event_type="transfer")

        result = pipeline.run([sample_opensea_event, cheap, usdc, transfer], "opensea",
                              build_context(pipeline_config))

        assert result.provider == "opensea"
        assert result.total_raw == 4
        assert result.skipped == 2
        assert result.invalid == 0
        assert result.summary.get("0-10").count == 1
        assert result.summary.get("1000-10000").count == 1
        assert result.price_source_note is None

    def test_oversized_etherscan_value_counted_invalid(self, pipeline, adapter_context, sample_etherscan_tx):
        """Test a 400-digit Wei value is invalid while the paid call is priced."""
        huge = dict(sample_etherscan_tx, value="1" + "0" * 400, hash="0xhuge")

        result = pipeline.run([huge, sample_etherscan_tx], "etherscan", adapter_context)

        assert result.invalid == 1
        assert result.summary.total == 1

    def test_etherscan_batch_uses_uniform_rate(self, pipeline, pipeline_config, sample_etherscan_tx):
        """Test Etherscan records are priced with the uniform rate and flagged."""
        from nft_sales_normalization.core.pipeline import build_context, UNIFORM_RATE_NOTE

        context = build_context(pipeline_config, unit_price_usd=2500.0)
        result = pipeline.run([sample_etherscan_tx, dict(sample_etherscan_tx, value="0")],
                              "etherscan", context)

        assert [r.price_usd for r in result.priced_records] == [0.08 * 2500.0]
        assert result.skipped == 1
        assert result.summary.get("100-1000").count == 1
        assert result.price_source_note == UNIFORM_RATE_NOTE

    def test_out_of_range_prices_rejected(self, pipeline, adapter_context, sample_etherscan_tx):
        """Test prices above the top edge are counted, not clamped."""
        whale = dict(sample_etherscan_tx, value=str(1000 * 10 ** 18))   # $2,000,000

        result = pipeline.run([sample_etherscan_tx, whale], "etherscan", adapter_context)

        assert result.out_of_range == 1
        assert result.summary.total == 1

    def test_invalid_records_counted(self, pipeline, adapter_context, sample_opensea_event):
        """Test malformed records are counted and the run continues."""
        bad_quantity = dict(sample_opensea_event, quantity="0")
        bad_amount = dict(sample_opensea_event, total_price="abc")

        result = pipeline.run([sample_opensea_event, bad_quantity, bad_amount], "opensea",
                              adapter_context)

        assert result.invalid == 2
        assert result.summary.total == 1

    def test_oversized_amounts_counted_invalid(self, pipeline, adapter_context, sample_opensea_event):
        """Test amounts beyond float or uint256 range never abort the run."""
        token = sample_opensea_event["payment_token"]
        long_digits = dict(sample_opensea_event, total_price="1" + "0" * 400)
        huge_exponent = dict(sample_opensea_event, total_price="1e400")
        huge_decimals = dict(sample_opensea_event, payment_token=dict(token, decimals=10 ** 8))
        inf_price = dict(sample_opensea_event, total_price=str(10 ** 77),
                         payment_token=dict(token, decimals=0, usd_price="1e300"))

        result = pipeline.run(
            [sample_opensea_event, long_digits, huge_exponent, huge_decimals, inf_price],
            "opensea", adapter_context)

        assert result.invalid == 4
        assert result.summary.total == 1
        assert result.summary.get("1000-10000").count == 1

    def test_empty_after_filtering(self, pipeline, adapter_context, sample_etherscan_tx):
        """Test EmptyInput when nothing survives filtering."""
        from nft_sales_normalization.core.errors import EmptyInput

        with pytest.raises(EmptyInput):
            pipeline.run([dict(sample_etherscan_tx, value="0")], "etherscan", adapter_context)

    def test_empty_batch(self, pipeline, adapter_context):
        """Test EmptyInput for an empty batch."""
        from nft_sales_normalization.core.errors import EmptyInput

        with pytest.raises(EmptyInput):
            pipeline.run([], "opensea", adapter_context)

    def test_invalid_band_edges_rejected(self):
        """Test misconfigured band edges fail at construction."""
        from nft_sales_normalization.core.pipeline import SalePricePipeline
        from nft_sales_normalization.models.config import PipelineConfig

        with pytest.raises(ValueError):
            SalePricePipeline(PipelineConfig(_env_file=None, band_edges=[0, 100, 10]))


class TestBuildContext:
    """Tests for build_context()."""

    def test_from_config(self, pipeline_config):
        """Test context mirrors configuration."""
        from nft_sales_normalization.core.pipeline import build_context

        context = build_context(pipeline_config, unit_price_usd=1800.0)

        assert context.unit_price_usd == 1800.0
        assert context.currency_decimals == 18
        assert context.included_currencies == frozenset({"Ether", "Wrapped Ether"})
        assert context.sale_functions == frozenset()
