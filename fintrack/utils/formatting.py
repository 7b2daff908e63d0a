from typing import Dict, NamedTuple


class CurrencyInfo(NamedTuple):
    code: str
    symbol: str
    name: str


CURRENCIES: Dict[str, CurrencyInfo] = {
    currency.code: currency
    for currency in [
        CurrencyInfo("USD", "$", "US Dollar"),
        CurrencyInfo("EUR", "€", "Euro"),
        CurrencyInfo("GBP", "£", "British Pound"),
        CurrencyInfo("INR", "₹", "Indian Rupee"),
        CurrencyInfo("JPY", "¥", "Japanese Yen"),
        CurrencyInfo("CAD", "C$", "Canadian Dollar"),
        CurrencyInfo("AUD", "A$", "Australian Dollar"),
        CurrencyInfo("CHF", "CHF", "Swiss Franc"),
        CurrencyInfo("CNY", "¥", "Chinese Yuan"),
        CurrencyInfo("IDR", "Rp", "Indonesian Rupiah"),
    ]
}


def get_currency_info(code: str) -> CurrencyInfo:
    """Look up a currency, falling back to the bare code as its symbol."""
    code = code.upper()
    return CURRENCIES.get(code, CurrencyInfo(code, code, code))


def format_currency(
    amount: float,
    currency: CurrencyInfo,
    decimals: int = 2,
    show_symbol: bool = False,
) -> str:
    formatted = f"{amount:,.{decimals}f}"
    return f"{currency.symbol}{formatted}" if show_symbol else formatted


def format_large_number(number: float, currency: CurrencyInfo, show_symbol: bool = True) -> str:
    """Abbreviate thousands, millions and billions (``$1.5K``)."""
    prefix = currency.symbol if show_symbol else ""
    if number >= 1_000_000_000:
        return f"{prefix}{number / 1_000_000_000:.1f}B"
    if number >= 1_000_000:
        return f"{prefix}{number / 1_000_000:.1f}M"
    if number >= 1_000:
        return f"{prefix}{number / 1_000:.1f}K"
    return format_currency(number, currency, show_symbol=show_symbol)


def format_percentage_change(change: float) -> Dict:
    is_positive = change > 0
    is_negative = change < 0
    return {
        "value": f"{'+' if is_positive else ''}{change:.1f}%",
        "is_positive": is_positive,
        "is_negative": is_negative,
    }
