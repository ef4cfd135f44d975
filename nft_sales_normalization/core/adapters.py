"""
Source adapters for raw NFT sale records.

Each provider gets its own adapter that maps a raw payload onto an
IntermediateSaleRecord, or skips it when the payload is not a
currency-bearing sale. Providers differ in where the USD rate comes from:
OpenSea events carry a per-record ``usd_price``, Etherscan transactions do
not and rely on the uniform rate supplied through the adapter context.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
import structlog

from nft_sales_normalization.core.errors import SkippedRecord, InvalidRecord
from nft_sales_normalization.models.sale_records import AdapterContext, IntermediateSaleRecord
from nft_sales_normalization.utils.time_utils import to_utc_timestamp
from nft_sales_normalization.utils.units import parse_int_amount, ETHER_DECIMALS, MAX_CURRENCY_DECIMALS

logger = structlog.get_logger(__name__)


class SourceAdapter(ABC):
    """Base class for provider-specific sale adapters."""

    provider: str = ""

    def __init__(self):
        self.logger = logger.bind(component=f"{self.provider}_adapter")

    @abstractmethod
    def parse(self, raw_record: Mapping[str, Any],
              context: AdapterContext) -> IntermediateSaleRecord:
        """Map a raw record, raising SkippedRecord for non-sales."""
        ...

    def adapt(self, raw_record: Mapping[str, Any],
              context: AdapterContext) -> Optional[IntermediateSaleRecord]:
        """
        Adapt a single raw record.

        Returns:
            IntermediateSaleRecord, or None when the record was skipped
        """
        try:
            return self.parse(raw_record, context)
        except SkippedRecord as e:
            self.logger.debug("Skipped raw record", reason=e.reason)
            return None

    def validate_context(self, context: AdapterContext) -> None:
        """Reject a context this adapter cannot work with."""
        pass

    def adapt_batch(self, raw_records: Iterable[Mapping[str, Any]],
                    context: AdapterContext) -> Tuple[List[IntermediateSaleRecord], int, int]:
        """
        Adapt a batch of raw records.

        Malformed records are logged and counted, never abort the batch.

        Returns:
            Tuple of (kept records, skipped count, invalid count)
        """
        self.validate_context(context)

        kept = []
        skipped = 0
        invalid = 0

        for raw_record in raw_records:
            try:
                record = self.adapt(raw_record, context)
            except InvalidRecord as e:
                self.logger.warning("Invalid raw record", reason=e.reason)
                invalid += 1
                continue

            if record is None:
                skipped += 1
            else:
                kept.append(record)

        self.logger.info("Adapted raw records",
                         kept=len(kept),
                         skipped=skipped,
                         invalid=invalid)
        return kept, skipped, invalid


class OpenSeaAdapter(SourceAdapter):
    """Adapter for OpenSea sale events (``asset_events`` entries)."""

    provider = "opensea"
    SALE_EVENT_TYPES = {"successful", "sale"}

    def parse(self, raw_record: Mapping[str, Any],
              context: AdapterContext) -> IntermediateSaleRecord:
        event_type = raw_record.get("event_type")
        if event_type not in self.SALE_EVENT_TYPES:
            raise SkippedRecord(f"not a sale event: {event_type}")

        payment_token = raw_record.get("payment_token") or {}
        currency_name = payment_token.get("name")
        if currency_name not in context.included_currencies:
            raise SkippedRecord(f"currency not included: {currency_name}")

        raw_amount = _parse_amount(raw_record.get("total_price"))
        if raw_amount == 0:
            raise SkippedRecord("zero-value sale")

        usd_price = payment_token.get("usd_price")
        if usd_price is None:
            raise InvalidRecord("payment token has no usd_price")
        try:
            unit_price_usd = float(usd_price)
        except (TypeError, ValueError):
            raise InvalidRecord(f"unparseable usd_price: {usd_price!r}")

        decimals = payment_token.get("decimals")
        currency_decimals = context.currency_decimals if decimals is None else _parse_int(decimals, "decimals")
        if not 0 <= currency_decimals <= MAX_CURRENCY_DECIMALS:
            raise InvalidRecord(f"decimals out of range: {currency_decimals}")

        quantity = raw_record.get("quantity")
        quantity = 1 if quantity in (None, "") else _parse_int(quantity, "quantity")

        transaction = raw_record.get("transaction") or {}

        return IntermediateSaleRecord(
            raw_amount=raw_amount,
            currency_decimals=currency_decimals,
            unit_price_usd=unit_price_usd,
            timestamp=self._event_time(raw_record, transaction),
            currency_name=currency_name,
            quantity=quantity,
            source=self.provider,
            record_id=transaction.get("transaction_hash"),
        )

    @staticmethod
    def _event_time(raw_record: Mapping[str, Any], transaction: Mapping[str, Any]):
        # transaction.timestamp is null for some older events
        for value in (transaction.get("timestamp"),
                      raw_record.get("created_date"),
                      raw_record.get("event_timestamp")):
            if value not in (None, ""):
                return _parse_time(value)
        raise InvalidRecord("sale event has no timestamp")


class EtherscanAdapter(SourceAdapter):
    """
    Adapter for Etherscan ``txlist`` transactions.

    Transactions carry no price field, so every record is priced with the
    single current Ether rate from the context.
    """

    provider = "etherscan"
    CURRENCY_NAME = "Ether"

    def validate_context(self, context: AdapterContext) -> None:
        if context.unit_price_usd is None:
            raise ValueError("Etherscan records need a uniform unit_price_usd in the context")

    def parse(self, raw_record: Mapping[str, Any],
              context: AdapterContext) -> IntermediateSaleRecord:
        if raw_record.get("isError") == "1" or raw_record.get("txreceipt_status") == "0":
            raise SkippedRecord("failed transaction")

        if not raw_record.get("to"):
            raise SkippedRecord("contract creation")

        raw_amount = _parse_amount(raw_record.get("value"))
        if raw_amount == 0:
            raise SkippedRecord("zero-value transaction")

        if context.sale_functions:
            method = _method_name(raw_record.get("functionName", ""))
            if method not in context.sale_functions:
                raise SkippedRecord(f"not a sale call: {method or 'unknown'}")

        if context.unit_price_usd is None:
            raise InvalidRecord("no uniform unit_price_usd supplied for etherscan records")

        if raw_record.get("timeStamp") in (None, ""):
            raise InvalidRecord("transaction has no timeStamp")

        return IntermediateSaleRecord(
            raw_amount=raw_amount,
            currency_decimals=ETHER_DECIMALS,
            unit_price_usd=context.unit_price_usd,
            timestamp=_parse_time(raw_record["timeStamp"]),
            currency_name=self.CURRENCY_NAME,
            quantity=1,
            source=self.provider,
            record_id=raw_record.get("hash"),
        )


def _parse_amount(value) -> int:
    if value in (None, ""):
        raise SkippedRecord("no amount")
    try:
        return parse_int_amount(value)
    except ValueError as e:
        raise InvalidRecord(str(e))


def _parse_int(value, name: str) -> int:
    try:
        return parse_int_amount(value)
    except ValueError:
        raise InvalidRecord(f"invalid {name}: {value!r}")


def _parse_time(value):
    try:
        return to_utc_timestamp(value)
    except (TypeError, ValueError, OverflowError, OSError):
        raise InvalidRecord(f"invalid timestamp: {value!r}")


def _method_name(function_name: str) -> str:
    """Strip the signature: ``mint(uint256 amount)`` -> ``mint``."""
    return function_name.split("(", 1)[0].strip()


_ADAPTERS: Dict[str, type] = {
    OpenSeaAdapter.provider: OpenSeaAdapter,
    EtherscanAdapter.provider: EtherscanAdapter,
}


def get_adapter(provider: str) -> SourceAdapter:
    """Create the adapter registered for a provider."""
    try:
        adapter_cls = _ADAPTERS[provider.lower()]
    except KeyError:
        raise ValueError(f"Unknown provider: {provider}")
    return adapter_cls()
