"""Decimal money helpers: parsing, cent rounding and currency formatting."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Dict

DEFAULT_LOCALE = "en-US"
DEFAULT_CURRENCY = "USD"

ZERO = Decimal("0")
_CENT = Decimal("0.01")
_NBSP = "\u00a0"


@dataclass(frozen=True)
class _LocaleFormat:
    group_separator: str
    decimal_separator: str
    symbol_first: bool
    symbol_spaced: bool


_EN = _LocaleFormat(",", ".", symbol_first=True, symbol_spaced=False)

_LOCALE_FORMATS: Dict[str, _LocaleFormat] = {
    "en-US": _EN,
    "en-CA": _EN,
    "en-GB": _EN,
    "en-AU": _EN,
    "en-IE": _EN,
    "de-DE": _LocaleFormat(".", ",", symbol_first=False, symbol_spaced=True),
    "es-ES": _LocaleFormat(".", ",", symbol_first=False, symbol_spaced=True),
    "fr-FR": _LocaleFormat("\u202f", ",", symbol_first=False, symbol_spaced=True),
}

_CURRENCY_SYMBOLS: Dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
    "CAD": "CA$",
    "AUD": "A$",
}


def parse_amount(value: object) -> Decimal:
    """Coerce ``value`` into a finite :class:`Decimal`, falling back to zero."""

    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return ZERO
    if not amount.is_finite():
        return ZERO
    return amount


def round_cents(value: object) -> Decimal:
    """Round to two decimal places, half-up on the cent boundary."""

    return parse_amount(value).quantize(_CENT, rounding=ROUND_HALF_UP)


def _locale_format(locale: str) -> _LocaleFormat:
    normalized = (locale or DEFAULT_LOCALE).replace("_", "-")
    return _LOCALE_FORMATS.get(normalized, _EN)


def format_currency(
    amount: object,
    *,
    locale: str = DEFAULT_LOCALE,
    currency: str = DEFAULT_CURRENCY,
) -> str:
    """Render ``amount`` as a currency string with exactly two fraction digits."""

    fmt = _locale_format(locale)
    value = round_cents(amount)
    integer_part, _, fraction = f"{abs(value):.2f}".partition(".")
    grouped = f"{int(integer_part):,}".replace(",", fmt.group_separator)
    number = f"{grouped}{fmt.decimal_separator}{fraction}"

    code = (currency or DEFAULT_CURRENCY).upper()
    symbol = _CURRENCY_SYMBOLS.get(code)
    spaced = fmt.symbol_spaced
    if symbol is None:
        symbol, spaced = code, True
    separator = _NBSP if spaced else ""

    if fmt.symbol_first:
        body = f"{symbol}{separator}{number}"
    else:
        body = f"{number}{separator}{symbol}"
    return f"-{body}" if value < 0 else body


def parse_currency(text: str, *, locale: str = DEFAULT_LOCALE) -> Decimal:
    """Parse text produced by :func:`format_currency` back into a Decimal."""

    fmt = _locale_format(locale)
    stripped = (text or "").strip()
    digits = "".join(ch for ch in stripped if ch.isdigit() or ch == fmt.decimal_separator)
    amount = parse_amount(digits.replace(fmt.decimal_separator, "."))
    return -amount if stripped.startswith("-") else amount
