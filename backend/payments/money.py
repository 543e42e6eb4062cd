"""
Monetary precision helpers.

Pricing is computed with unrounded Decimals; amounts are rounded to the
currency's minor unit only when a transaction is persisted or displayed.
Rounding is ROUND_HALF_EVEN (banker's rounding) to avoid systematic bias.
"""

from decimal import Decimal, ROUND_HALF_EVEN, getcontext
from typing import Union

# High precision for intermediate calculations
getcontext().prec = 28

# Currency minor unit exponents (how many decimal places)
CURRENCY_EXPONENT = {
    "IDR": 2,  # Indonesian Rupiah (sen)
    "USD": 2,
    "EUR": 2,
    "GBP": 2,
    "SGD": 2,
    "MYR": 2,
    "AUD": 2,
    # Zero-decimal currencies
    "JPY": 0,
    "KRW": 0,
    "VND": 0,
    # 3-decimal currencies
    "KWD": 3,
    "BHD": 3,
}

CURRENCY_SYMBOLS = {
    "IDR": "Rp",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "KRW": "₩",
}


def currency_exponent(currency: str) -> int:
    """
    Number of decimal places for a currency; unknown currencies use 2.

        >>> currency_exponent("IDR")
        2
        >>> currency_exponent("JPY")
        0
    """
    return CURRENCY_EXPONENT.get(currency.upper(), 2)


def quantize_decimal(currency: str) -> Decimal:
    """Smallest unit of a currency, e.g. Decimal('0.01') for IDR."""
    return Decimal(10) ** -currency_exponent(currency)


def quantize(currency: str, amount: Union[Decimal, str, int, float]) -> Decimal:
    """
    Round to currency decimals using banker's rounding.

        >>> quantize("USD", "10.125")
        Decimal('10.12')
        >>> quantize("JPY", "1234.56")
        Decimal('1235')
    """
    if isinstance(amount, float):
        amount = str(amount)

    return Decimal(amount).quantize(quantize_decimal(currency), rounding=ROUND_HALF_EVEN)


def to_minor(currency: str, amount: Union[Decimal, str, int, float]) -> int:
    """Convert to integer minor units after quantization."""
    quantized = quantize(currency, amount)
    return int(quantized * (Decimal(10) ** currency_exponent(currency)))


def from_minor(currency: str, minor: int) -> Decimal:
    """Convert integer minor units back to a Decimal amount."""
    exponent = currency_exponent(currency)
    return (Decimal(minor) / (Decimal(10) ** exponent)).quantize(quantize_decimal(currency))


def format_money(currency: str, amount: Union[Decimal, str, int, float]) -> str:
    """
    Format an amount for receipts.

        >>> format_money("IDR", Decimal("97.2"))
        'Rp97.20'
    """
    amount = quantize(currency, amount)
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), currency.upper() + " ")
    exponent = currency_exponent(currency)
    return f"{symbol}{amount:,.{exponent}f}"
