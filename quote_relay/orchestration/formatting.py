"""Telegram (Markdown) rendering of quotes and error alerts."""
from datetime import datetime, timezone
from typing import Optional

from quote_relay.app.schemas import Quote

NA = "N/A"
UP = "🟢"
DOWN = "🔴"
FLAT = "⚪"
SEPARATOR = "────────────────────"


def fmt_price(value: Optional[float]) -> str:
    return NA if value is None else f"${value:.2f}"


def fmt_percent(value: Optional[float]) -> str:
    if value is None:
        return NA
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.2f}%"


def fmt_timestamp(ts: Optional[int], now: Optional[datetime] = None) -> str:
    # Finnhub sends t=0 when it has nothing; fall back to processing time.
    if ts:
        moment = datetime.fromtimestamp(ts, tz=timezone.utc)
    else:
        moment = now or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def change_line(quote: Quote) -> str:
    if quote.percent_change is None:
        indicator = FLAT
    else:
        indicator = UP if quote.percent_change >= 0 else DOWN
    if quote.previous_close is None:
        delta = NA
    else:
        delta = f"{quote.current_price - quote.previous_close:+.2f}"
    return f"• *Change*: {indicator} {delta} ({fmt_percent(quote.percent_change)})"


def market_looks_closed(quote: Quote) -> bool:
    # Heuristic only; an unchanged price can also happen during trading.
    return quote.previous_close is not None and quote.current_price == quote.previous_close


def format_quote_message(symbol: str, quote: Quote, now: Optional[datetime] = None) -> str:
    lines = [
        f"📊 *{symbol} Stock Update*",
        SEPARATOR,
        f"• *Price*: {fmt_price(quote.current_price)}",
        change_line(quote),
        f"• *Open*: {fmt_price(quote.open)}",
        f"• *High*: {fmt_price(quote.high)}",
        f"• *Low*: {fmt_price(quote.low)}",
        f"• *Prev Close*: {fmt_price(quote.previous_close)}",
        f"• *Time*: {fmt_timestamp(quote.timestamp, now)}",
    ]
    if market_looks_closed(quote):
        lines.append("_Market appears closed (price unchanged from previous close)_")
    return "\n".join(lines)


def format_error_alert(symbol: Optional[str], error: BaseException) -> str:
    lines = ["❌ *Quote relay error*"]
    if symbol:
        lines.append(f"• *Symbol*: {symbol}")
    lines.append(f"• *Error*: {type(error).__name__}: {error}")
    return "\n".join(lines)
