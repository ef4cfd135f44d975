"""Price normalizer: intermediate sale records to USD prices per item."""

import math
from typing import Iterable, List, Tuple
import structlog

from nft_sales_normalization.core.errors import InvalidRecord
from nft_sales_normalization.models.sale_records import IntermediateSaleRecord, PricedSaleRecord
from nft_sales_normalization.utils.units import to_major_units, MAX_CURRENCY_DECIMALS

logger = structlog.get_logger(__name__)


def _require_int(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRecord(f"{name} must be an integer, got {value!r}")
    return value


def validate_record(record: IntermediateSaleRecord) -> None:
    """
    Check the invariants a record must satisfy before pricing.

    Raises:
        InvalidRecord: if any field is missing or out of range
    """
    currency_decimals = _require_int("currency_decimals", record.currency_decimals)
    raw_amount = _require_int("raw_amount", record.raw_amount)
    quantity = _require_int("quantity", record.quantity)

    if not 0 <= currency_decimals <= MAX_CURRENCY_DECIMALS:
        raise InvalidRecord(
            f"currency_decimals must be in [0, {MAX_CURRENCY_DECIMALS}], got {currency_decimals}"
        )
    if raw_amount < 0:
        raise InvalidRecord(f"raw_amount must be >= 0, got {raw_amount}")
    if quantity < 1:
        raise InvalidRecord(f"quantity must be >= 1, got {quantity}")

    unit_price_usd = record.unit_price_usd
    if isinstance(unit_price_usd, bool) or not isinstance(unit_price_usd, (int, float)):
        raise InvalidRecord(f"unit_price_usd must be a number, got {unit_price_usd!r}")
    if not math.isfinite(unit_price_usd) or unit_price_usd <= 0:
        raise InvalidRecord(f"unit_price_usd must be > 0, got {unit_price_usd}")

    if record.timestamp is None:
        raise InvalidRecord("timestamp is missing")


def normalize(record: IntermediateSaleRecord) -> PricedSaleRecord:
    """
    Price one sale in USD per item.

    The amount is converted to major units first and only then multiplied
    by the exchange rate and split across the quantity:
    ``price_usd = (raw_amount / 10**decimals) * unit_price_usd / quantity``.
    No rounding is applied.

    Args:
        record: Intermediate sale record

    Returns:
        PricedSaleRecord

    Raises:
        InvalidRecord: if the record violates its invariants
    """
    validate_record(record)

    try:
        major_amount = to_major_units(record.raw_amount, record.currency_decimals)
    except OverflowError:
        raise InvalidRecord(f"raw_amount too large for a float price: {record.raw_amount:.3e}")

    price_usd = major_amount * record.unit_price_usd / record.quantity
    if not math.isfinite(price_usd):
        raise InvalidRecord(f"price_usd is not finite: {price_usd}")

    return PricedSaleRecord(
        price_usd=price_usd,
        timestamp=record.timestamp,
        source=record.source,
        record_id=record.record_id,
    )


def normalize_batch(records: Iterable[IntermediateSaleRecord]) -> Tuple[List[PricedSaleRecord], int]:
    """
    Normalize a batch, logging and counting invalid records.

    Returns:
        Tuple of (priced records, invalid count)
    """
    priced = []
    invalid = 0

    for record in records:
        try:
            priced.append(normalize(record))
        except InvalidRecord as e:
            invalid += 1
            logger.warning("Invalid sale record",
                           record_id=record.record_id,
                           source=record.source,
                           reason=e.reason)

    logger.info("Normalized sale records", priced=len(priced), invalid=invalid)
    return priced, invalid
