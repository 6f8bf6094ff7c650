from datetime import datetime, timezone

from quote_relay.app.schemas import Quote
from quote_relay.orchestration.formatting import (
    DOWN,
    FLAT,
    UP,
    change_line,
    fmt_percent,
    fmt_timestamp,
    format_error_alert,
    format_quote_message,
)

NOW = datetime(2024, 3, 1, 15, 30, tzinfo=timezone.utc)


def test_change_line_rounds_and_marks_gains():
    quote = Quote(c=150.1234, pc=148.00, dp=1.5)

    line = change_line(quote)

    assert UP in line
    assert "+2.12" in line
    assert "(+1.50%)" in line
    assert "$150.12" in format_quote_message("AAPL", quote, now=NOW)


def test_change_line_marks_losses_without_plus_sign():
    quote = Quote(c=95.0, pc=100.0, dp=-5.0)

    line = change_line(quote)

    assert DOWN in line
    assert "-5.00" in line
    assert "(-5.00%)" in line
    assert "+" not in line


def test_missing_fields_render_placeholder():
    quote = Quote(c=10.0, h=None, dp=None)

    text = format_quote_message("XYZ", quote, now=NOW)

    assert "• *High*: N/A" in text
    assert "• *Prev Close*: N/A" in text
    assert f"{FLAT} N/A (N/A)" in text


def test_zero_percent_change_counts_as_up():
    assert fmt_percent(0.0) == "+0.00%"
    assert UP in change_line(Quote(c=1.0, pc=1.0, dp=0.0))


def test_closed_market_note_when_price_equals_previous_close():
    closed = format_quote_message("AAPL", Quote(c=148.0, pc=148.0, dp=0.0), now=NOW)
    open_ = format_quote_message("AAPL", Quote(c=149.0, pc=148.0, dp=0.68), now=NOW)

    assert "Market appears closed" in closed
    assert "Market appears closed" not in open_


def test_timestamp_rendered_in_utc_with_fallback():
    assert fmt_timestamp(1709306400) == "2024-03-01 15:20:00 UTC"
    assert fmt_timestamp(None, now=NOW) == "2024-03-01 15:30:00 UTC"
    assert fmt_timestamp(0, now=NOW) == "2024-03-01 15:30:00 UTC"


def test_error_alert_names_symbol_and_error():
    text = format_error_alert("AAPL", ValueError("boom"))

    assert text.splitlines()[0] == "❌ *Quote relay error*"
    assert "AAPL" in text
    assert "ValueError: boom" in text
