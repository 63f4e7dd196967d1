"""Formatting utilities for currency and percentage display."""

from __future__ import annotations

from typing import Union

Number = Union[float, int]


def format_amount(amount: Number) -> str:
    """Format a number with comma separators and at most two decimals.

    Whole numbers drop the decimal part entirely.

    Example:
        >>> format_amount(5000)
        '5,000'
        >>> format_amount(1234.5)
        '1,234.5'
    """
    formatted = f"{amount:,.2f}"
    if "." in formatted:
        formatted = formatted.rstrip("0").rstrip(".")
    if formatted in ("-0", ""):
        formatted = "0"
    return formatted


def format_currency(amount: Number, include_sign: bool = True) -> str:
    """Format a currency amount with proper formatting.

    Args:
        amount: The amount to format
        include_sign: Whether to include the dollar sign

    Returns:
        Formatted currency string (e.g., "$1,234.56" or "1,234.56").
        Negative amounts keep the minus sign in front of the dollar sign.

    Example:
        >>> format_currency(1234.56)
        '$1,234.56'
        >>> format_currency(-20)
        '-$20.00'
    """
    formatted = f"{abs(amount):,.2f}"
    sign = "-" if amount < 0 and formatted != "0.00" else ""
    return f"{sign}${formatted}" if include_sign else f"{sign}{formatted}"


def escape_dollar_for_markdown(amount: Number) -> str:
    """Format a dollar amount and escape the dollar sign for markdown rendering.

    Streamlit markdown treats ``$`` as a LaTeX delimiter.

    Example:
        >>> escape_dollar_for_markdown(1234.56)
        '\\\\$1,234.56'
    """
    return format_currency(amount).replace("$", "\\$")


def format_percent(value: Number, decimals: int = 1) -> str:
    """Format a percentage value such as savings progress (``42.0`` -> ``'42.0%'``)."""
    return f"{value:.{decimals}f}%"
