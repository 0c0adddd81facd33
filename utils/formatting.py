"""
Formatting utilities.
"""

from decimal import Decimal
from typing import Union

Number = Union[int, float, Decimal]

# Currencies rendered with pt-BR separators (1.234,56)
COMMA_DECIMAL_CURRENCIES = {"BRL", "EUR"}


def format_currency(amount: Number, currency: str = "BRL", decimals: int = 2) -> str:
    """
    Format an amount as currency.

    Args:
        amount: The amount in whole units (e.g., reais, not centavos).
        currency: Currency code (default BRL).
        decimals: Number of decimal places.

    Returns:
        Formatted currency string, e.g. "R$ 1.234,56".
    """
    symbols = {
        "BRL": "R$ ",
        "USD": "$",
        "EUR": "€ ",
        "GBP": "£",
    }
    symbol = symbols.get(currency, currency + " ")
    text = f"{amount:,.{decimals}f}"
    if currency in COMMA_DECIMAL_CURRENCIES:
        text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{symbol}{text}"


def format_percent(value: float, decimals: int = 1) -> str:
    """
    Format a number as a percentage.

    Args:
        value: The percentage value.
        decimals: Number of decimal places.

    Returns:
        Formatted percentage string.
    """
    return f"{value:.{decimals}f}%"


def format_area(square_meters: float) -> str:
    """Format an area in square meters, e.g. "85.00 m²"."""
    return f"{square_meters:.2f} m²"
