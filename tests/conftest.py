"""Pytest configuration and fixtures for sale price pipeline tests."""

import pytest
from datetime import datetime, timezone
from typing import Dict, Any


# ============================================================================
# CONFIGURATION FIXTURES
# ============================================================================

@pytest.fixture
def pipeline_config():
    """Pipeline configuration that ignores any local .env file."""
    from nft_sales_normalization.models.config import PipelineConfig
    return PipelineConfig(_env_file=None)


@pytest.fixture
def adapter_context():
    """Adapter context with a uniform Ether price of $2000."""
    from nft_sales_normalization.models.sale_records import AdapterContext
    return AdapterContext(unit_price_usd=2000.0)


@pytest.fixture
def sample_timestamp():
    """Sample timestamp for testing."""
    return datetime(2022, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


# ============================================================================
# RAW RECORD FIXTURES
# ============================================================================

@pytest.fixture
def sample_opensea_event() -> Dict[str, Any]:
    """OpenSea successful sale of 2.5 ETH at $2000/ETH."""
    return {
        "event_type": "successful",
        "total_price": "2500000000000000000",
        "quantity": "1",
        "created_date": "2022-01-15T12:00:05.123456",
        "payment_token": {
            "symbol": "ETH",
            "name": "Ether",
            "decimals": 18,
            "usd_price": "2000.000000000000000",
        },
        "transaction": {
            "transaction_hash": "0xabc123",
            "timestamp": "2022-01-15T12:00:00",
        },
    }


@pytest.fixture
def sample_etherscan_tx() -> Dict[str, Any]:
    """Etherscan txlist entry paying 0.08 ETH into a mint call."""
    return {
        "blockNumber": "14000000",
        "timeStamp": "1642248000",
        "hash": "0xdef456",
        "from": "0x1111111111111111111111111111111111111111",
        "to": "0x2222222222222222222222222222222222222222",
        "value": "80000000000000000",
        "isError": "0",
        "txreceipt_status": "1",
        "input": "0xa0712d68",
        "functionName": "mint(uint256 numberOfTokens)",
    }


# ============================================================================
# PRICED RECORD FIXTURES
# ============================================================================

@pytest.fixture
def make_priced(sample_timestamp):
    """Factory for priced records from a list of USD prices."""
    from nft_sales_normalization.models.sale_records import PricedSaleRecord

    def _make(prices):
        return [PricedSaleRecord(price_usd=float(p), timestamp=sample_timestamp) for p in prices]

    return _make


@pytest.fixture
def make_intermediate(sample_timestamp):
    """Factory for intermediate records with overridable fields."""
    from nft_sales_normalization.models.sale_records import IntermediateSaleRecord

    def _make(**overrides):
        fields = {
            "raw_amount": 2_500_000_000_000_000_000,
            "currency_decimals": 18,
            "unit_price_usd": 2000.0,
            "timestamp": sample_timestamp,
            "currency_name": "Ether",
            "quantity": 1,
        }
        fields.update(overrides)
        return IntermediateSaleRecord(**fields)

    return _make
