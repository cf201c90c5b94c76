"""Currency reference table and display formatting.

Amounts are only ever formatted, never converted. Whole-unit display uses
no decimals, precise display uses two.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Tuple, Union


@dataclass(frozen=True)
class Currency:
    code: str
    symbol: str
    name: str
    locale: str


CURRENCIES: Tuple[Currency, ...] = (
    Currency("USD", "$", "US Dollar", "en-US"),
    Currency("EUR", "€", "Euro", "de-DE"),
    Currency("INR", "₹", "Indian Rupee", "en-IN"),
    Currency("GBP", "£", "British Pound", "en-GB"),
    Currency("JPY", "¥", "Japanese Yen", "ja-JP"),
    Currency("CAD", "C$", "Canadian Dollar", "en-CA"),
    Currency("AUD", "A$", "Australian Dollar", "en-AU"),
    Currency("CHF", "CHF", "Swiss Franc", "de-CH"),
    Currency("CNY", "¥", "Chinese Yuan", "zh-CN"),
    Currency("SGD", "S$", "Singapore Dollar", "en-SG"),
    Currency("HKD", "HK$", "Hong Kong Dollar", "en-HK"),
    Currency("SEK", "kr", "Swedish Krona", "sv-SE"),
    Currency("NOK", "kr", "Norwegian Krone", "nb-NO"),
    Currency("DKK", "kr", "Danish Krone", "da-DK"),
    Currency("PLN", "zł", "Polish Złoty", "pl-PL"),
    Currency("CZK", "Kč", "Czech Koruna", "cs-CZ"),
    Currency("HUF", "Ft", "Hungarian Forint", "hu-HU"),
    Currency("BRL", "R$", "Brazilian Real", "pt-BR"),
    Currency("MXN", "$", "Mexican Peso", "es-MX"),
    Currency("ZAR", "R", "South African Rand", "en-ZA"),
    Currency("KRW", "₩", "South Korean Won", "ko-KR"),
    Currency("THB", "฿", "Thai Baht", "th-TH"),
    Currency("MYR", "RM", "Malaysian Ringgit", "ms-MY"),
    Currency("IDR", "Rp", "Indonesian Rupiah", "id-ID"),
    Currency("PHP", "₱", "Philippine Peso", "en-PH"),
    Currency("AED", "د.إ", "UAE Dirham", "ar-AE"),
    Currency("TRY", "₺", "Turkish Lira", "tr-TR"),
    Currency("ILS", "₪", "Israeli Shekel", "he-IL"),
    Currency("RON", "lei", "Romanian Leu", "ro-RO"),
    Currency("UAH", "₴", "Ukrainian Hryvnia", "uk-UA"),
)

CURRENCIES_BY_CODE: Dict[str, Currency] = {c.code: c for c in CURRENCIES}

DEFAULT_CURRENCY = CURRENCIES_BY_CODE["USD"]

Number = Union[Decimal, float, int]


def get_currency(code: str) -> Currency:
    """Look up a currency by ISO code, falling back to US dollars."""
    return CURRENCIES_BY_CODE.get((code or "").upper(), DEFAULT_CURRENCY)


def _format(value: Number, currency: Currency, places: int) -> str:
    quantum = Decimal(1).scaleb(-places)
    amount = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    return f"{sign}{currency.symbol}{abs(amount):,.{places}f}"


def format_currency(value: Number, currency: Currency = DEFAULT_CURRENCY) -> str:
    """Format ``value`` in whole currency units, e.g. ``$1,896``."""
    return _format(value, currency, 0)


def format_currency_precise(value: Number, currency: Currency = DEFAULT_CURRENCY) -> str:
    """Format ``value`` with two decimals, e.g. ``$1,896.20``."""
    return _format(value, currency, 2)
