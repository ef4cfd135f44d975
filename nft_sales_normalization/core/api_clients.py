"""
HTTP clients for the raw sale record providers.

OpenSea returns sale events with a per-record USD rate of the payment
token. Etherscan returns plain transactions of a contract plus a separate
endpoint for the current Ether price.

Each client fetches one bounded batch; there is no pagination:
- OpenSea: last 300 sale events (provider maximum per call)
- Etherscan: last 10000 transactions (provider maximum window)
"""

import time
import requests
from typing import Dict, Any, Optional, List
import structlog

logger = structlog.get_logger(__name__)


class APIError(Exception):
    """Provider API specific error."""
    pass


class _BaseAPIClient:
    """Session, rate limiting and retry logic shared by provider clients."""

    BASE_URL = ""

    def __init__(self,
                 base_url: Optional[str] = None,
                 rate_limit_delay: float = 0.25,
                 max_retries: int = 3,
                 timeout: int = 30):
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.rate_limit_delay = rate_limit_delay
        self.max_retries = max_retries
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': 'NFT-Sales-Normalization/1.0.0',
            'Accept': 'application/json'
        })

        self._last_request_time = 0

    def _rate_limit(self):
        """Apply rate limiting between requests."""
        elapsed = time.time() - self._last_request_time
        if elapsed < self.rate_limit_delay:
            time.sleep(self.rate_limit_delay - elapsed)
        self._last_request_time = time.time()

    def _make_request(self, endpoint: str, params: Optional[Dict] = None) -> Dict[str, Any]:
        """Make API request with retry logic."""
        url = f"{self.base_url}{endpoint}"
        params = dict(params or {})

        for attempt in range(self.max_retries):
            try:
                self._rate_limit()

                response = self.session.get(url, params=params, timeout=self.timeout)

                if response.status_code == 429:
                    wait_time = int(response.headers.get('Retry-After', 30))
                    logger.warning("Rate limited, waiting", url=url, wait_time=wait_time)
                    time.sleep(wait_time)
                    continue

                response.raise_for_status()

                return response.json()

            except requests.exceptions.JSONDecodeError as e:
                raise APIError(f"Invalid JSON from {url}: {e}")

            except requests.RequestException as e:
                logger.warning("API request failed",
                               url=url,
                               attempt=attempt + 1,
                               error=str(e))

                if attempt == self.max_retries - 1:
                    raise APIError(f"Request failed after {self.max_retries} attempts: {e}")

                time.sleep(2 ** attempt)  # Exponential backoff

        raise APIError(f"Request to {url} still rate limited after {self.max_retries} attempts")


class OpenSeaClient(_BaseAPIClient):
    """OpenSea events API client."""

    BASE_URL = "https://api.opensea.io/api/v1"
    MAX_EVENTS = 300

    def __init__(self, api_key: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        if api_key:
            self.session.headers['X-API-KEY'] = api_key

        logger.info("OpenSea API client initialized",
                    base_url=self.base_url,
                    has_api_key=bool(api_key))

    def get_sale_events(self, contract_address: str,
                        limit: int = MAX_EVENTS) -> List[Dict[str, Any]]:
        """
        Get the most recent successful sale events of a contract.

        Args:
            contract_address: NFT contract address
            limit: Max events, capped at 300

        Returns:
            Raw ``asset_events`` entries
        """
        if limit > self.MAX_EVENTS:
            logger.warning("OpenSea event limit capped",
                           requested=limit,
                           limit=self.MAX_EVENTS)
            limit = self.MAX_EVENTS

        data = self._make_request("/events", {
            "asset_contract_address": contract_address,
            "event_type": "successful",
            "only_opensea": "false",
            "limit": limit,
        })

        events = data.get("asset_events", [])
        logger.info("Fetched OpenSea sale events",
                    contract=contract_address,
                    count=len(events))
        return events


class EtherscanClient(_BaseAPIClient):
    """Etherscan account and stats API client."""

    BASE_URL = "https://api.etherscan.io/api"
    MAX_TRANSACTIONS = 10000

    def __init__(self, api_key: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.api_key = api_key

        logger.info("Etherscan API client initialized",
                    base_url=self.base_url,
                    has_api_key=bool(api_key))

    def _query(self, params: Dict[str, Any]) -> Any:
        if self.api_key:
            params['apikey'] = self.api_key

        data = self._make_request("", params)

        # status "0" also covers an empty result set
        if str(data.get("status")) == "0":
            message = data.get("message", "")
            if message.startswith("No transactions found"):
                return []
            raise APIError(f"Etherscan error: {message}: {data.get('result')}")

        return data.get("result")

    def get_transactions(self, contract_address: str,
                         limit: int = MAX_TRANSACTIONS,
                         sort: str = "desc") -> List[Dict[str, Any]]:
        """
        Get the most recent normal transactions sent to a contract.

        Args:
            contract_address: NFT contract address
            limit: Max transactions, capped at 10000
            sort: "asc" or "desc" by block number

        Returns:
            Raw ``txlist`` entries
        """
        if limit > self.MAX_TRANSACTIONS:
            logger.warning("Etherscan transaction limit capped",
                           requested=limit,
                           limit=self.MAX_TRANSACTIONS)
            limit = self.MAX_TRANSACTIONS

        transactions = self._query({
            "module": "account",
            "action": "txlist",
            "address": contract_address,
            "startblock": 0,
            "endblock": 99999999,
            "page": 1,
            "offset": limit,
            "sort": sort,
        })

        logger.info("Fetched Etherscan transactions",
                    contract=contract_address,
                    count=len(transactions))
        return transactions

    def get_ether_price_usd(self) -> float:
        """Get the current Ether price in USD."""
        result = self._query({"module": "stats", "action": "ethprice"})

        try:
            price = float(result["ethusd"])
        except (TypeError, KeyError, ValueError):
            raise APIError(f"Unexpected ethprice result: {result!r}")

        logger.info("Fetched current Ether price", ethusd=price)
        return price
