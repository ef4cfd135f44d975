"""Currency unit conversion helpers."""

from decimal import Decimal, InvalidOperation

ETHER_DECIMALS = 18

# On-chain amounts are uint256: at most 78 decimal digits
MAX_UINT256 = 2 ** 256 - 1
MAX_AMOUNT_DIGITS = 78
MAX_CURRENCY_DECIMALS = 77


def to_major_units(raw_amount: int, decimals: int) -> float:
    """
    Convert an amount in the smallest currency unit to major units.

    ``int / int`` is a correctly rounded true division, so large amounts
    (around 10**21 Wei) lose no precision before the float result.

    Raises:
        OverflowError: if the result does not fit in a float
    """
    return raw_amount / 10 ** decimals


def parse_int_amount(value) -> int:
    """Parse an integer amount delivered as int or decimal string."""
    if isinstance(value, bool):
        raise ValueError(f"Unsupported amount type: {type(value)}")
    if isinstance(value, int):
        return _check_range(value, value)
    if isinstance(value, str):
        text = value.strip()
        digits = text[1:] if text.startswith("-") else text
        if digits.isdigit():
            if len(digits.lstrip("0")) > MAX_AMOUNT_DIGITS:
                raise ValueError(f"Amount exceeds uint256: {value[:20]}...")
            return _check_range(int(text), value)
        # Some payloads send Wei as "1.5e+18"-style strings
        try:
            amount = Decimal(text)
        except InvalidOperation:
            raise ValueError(f"Invalid amount: {value}")
        if not amount.is_finite():
            raise ValueError(f"Amount is not finite: {value}")
        if amount.adjusted() >= MAX_AMOUNT_DIGITS:
            raise ValueError(f"Amount exceeds uint256: {value}")
        if amount != amount.to_integral_value():
            raise ValueError(f"Amount is not integral: {value}")
        return _check_range(int(amount), value)
    raise ValueError(f"Unsupported amount type: {type(value)}")


def _check_range(amount: int, value) -> int:
    if abs(amount) > MAX_UINT256:
        raise ValueError(f"Amount exceeds uint256: {str(value)[:20]}...")
    return amount
