"""
Unit tests for provider API clients.

HTTP sessions are mocked; no network access.
"""

import pytest
from unittest.mock import Mock, patch


def _response(payload, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.headers = {}
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


class TestOpenSeaClient:
    """Tests for OpenSeaClient."""

    @pytest.fixture
    def client(self):
        """Create OpenSea client without rate limiting."""
        from nft_sales_normalization.core.api_clients import OpenSeaClient
        return OpenSeaClient(api_key="test-key", rate_limit_delay=0)

    def test_get_sale_events(self, client, sample_opensea_event):
        """Test events are requested with sale filter and returned."""
        client.session.get = Mock(return_value=_response({"asset_events": [sample_opensea_event]}))

        events = client.get_sale_events("0xcontract", limit=50)

        assert events == [sample_opensea_event]
        url = client.session.get.call_args[0][0]
        params = client.session.get.call_args[1]["params"]
        assert url == "https://api.opensea.io/api/v1/events"
        assert params["event_type"] == "successful"
        assert params["asset_contract_address"] == "0xcontract"
        assert params["limit"] == 50
        assert client.session.headers["X-API-KEY"] == "test-key"

    def test_limit_capped(self, client):
        """Test the provider limit of 300 events is enforced."""
        client.session.get = Mock(return_value=_response({"asset_events": []}))

        client.get_sale_events("0xcontract", limit=1000)

        assert client.session.get.call_args[1]["params"]["limit"] == 300

    def test_retries_then_raises(self, client):
        """Test request failures raise APIError after retries."""
        import requests
        from nft_sales_normalization.core.api_clients import APIError

        client.session.get = Mock(side_effect=requests.ConnectionError("down"))

        with patch("nft_sales_normalization.core.api_clients.time.sleep"):
            with pytest.raises(APIError):
                client.get_sale_events("0xcontract")

        assert client.session.get.call_count == client.max_retries


class TestEtherscanClient:
    """Tests for EtherscanClient."""

    @pytest.fixture
    def client(self):
        """Create Etherscan client without rate limiting."""
        from nft_sales_normalization.core.api_clients import EtherscanClient
        return EtherscanClient(api_key="test-key", rate_limit_delay=0)

    def test_get_transactions(self, client, sample_etherscan_tx):
        """Test txlist query parameters."""
        client.session.get = Mock(return_value=_response(
            {"status": "1", "message": "OK", "result": [sample_etherscan_tx]}
        ))

        transactions = client.get_transactions("0xcontract", limit=20000)

        assert transactions == [sample_etherscan_tx]
        params = client.session.get.call_args[1]["params"]
        assert params["action"] == "txlist"
        assert params["offset"] == 10000
        assert params["sort"] == "desc"
        assert params["apikey"] == "test-key"

    def test_no_transactions(self, client):
        """Test an empty result is not an error."""
        client.session.get = Mock(return_value=_response(
            {"status": "0", "message": "No transactions found", "result": []}
        ))

        assert client.get_transactions("0xcontract") == []

    def test_error_status(self, client):
        """Test provider errors raise APIError."""
        from nft_sales_normalization.core.api_clients import APIError

        client.session.get = Mock(return_value=_response(
            {"status": "0", "message": "NOTOK", "result": "Invalid API Key"}
        ))

        with pytest.raises(APIError):
            client.get_transactions("0xcontract")

    def test_get_ether_price(self, client):
        """Test current Ether price parsing."""
        client.session.get = Mock(return_value=_response(
            {"status": "1", "message": "OK",
             "result": {"ethbtc": "0.07", "ethusd": "1834.56", "ethusd_timestamp": "1642248000"}}
        ))

        assert client.get_ether_price_usd() == 1834.56
        assert client.session.get.call_args[1]["params"]["action"] == "ethprice"

    def test_rate_limited_then_ok(self, client):
        """Test a 429 response waits and retries."""
        limited = _response({}, status_code=429)
        limited.headers = {"Retry-After": "1"}
        ok = _response({"status": "1", "message": "OK", "result": {"ethusd": "2000"}})
        client.session.get = Mock(side_effect=[limited, ok])

        with patch("nft_sales_normalization.core.api_clients.time.sleep") as sleep:
            assert client.get_ether_price_usd() == 2000.0

        sleep.assert_any_call(1)
