import logging
import re
import time
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from quote_relay.app.logging import event
from quote_relay.app.schemas import QuoteData, RelayResponse, RelayResult
from quote_relay.app.settings import Settings
from quote_relay.orchestration.cache import TTLCache
from quote_relay.orchestration.errors import (
    ConfigurationError,
    InvalidSymbolError,
    MessagingError,
    NotificationDeliveryError,
    SymbolNotFoundError,
    policy_for,
    public_message,
)
from quote_relay.orchestration.formatting import format_error_alert, format_quote_message
from quote_relay.tools.finnhub_client import FinnhubClient
from quote_relay.tools.retry import RetryExhaustedError, linear_backoff, retry_with_backoff
from quote_relay.tools.telegram_client import TelegramClient

logger = logging.getLogger(__name__)

SYMBOL_RE = re.compile(r"[A-Z]{1,5}")


def normalize_symbol(raw: Any) -> str:
    if not isinstance(raw, str):
        raise InvalidSymbolError(raw)
    # non-ASCII first: "ß".upper() == "SS"
    if not raw.isascii():
        raise InvalidSymbolError(raw)
    symbol = raw.strip().upper()
    if not SYMBOL_RE.fullmatch(symbol):
        raise InvalidSymbolError(raw)
    return symbol


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QuoteRelayHandler:
    """Validate, fetch a quote, send it to Telegram, answer the caller.

    The cache and both provider clients are owned by the handler instance;
    pass them in to share or fake them.
    """

    def __init__(
        self,
        config: Settings,
        cache: Optional[TTLCache[RelayResponse]] = None,
        quotes: Optional[FinnhubClient] = None,
        messenger: Optional[TelegramClient] = None,
        sleep: Callable[[float], None] = time.sleep,
        now: Callable[[], datetime] = _utcnow,
    ):
        self.config = config
        self.cache = cache if cache is not None else TTLCache(ttl_seconds=config.cache_ttl_seconds)
        self.quotes = quotes or FinnhubClient(
            api_key=config.finnhub_api_key or "",
            base_url=config.finnhub_base_url,
            timeout=config.quote_timeout,
        )
        self.messenger = messenger or TelegramClient(
            token=config.telegram_bot_token or "",
            base_url=config.telegram_api_base,
            timeout=config.notify_timeout,
        )
        self._now = now
        self._deliver = retry_with_backoff(
            max_attempts=config.notify_max_attempts,
            delay=linear_backoff(config.notify_backoff_seconds),
            retry_on=(MessagingError,),
            sleep=sleep,
        )(self.messenger.send_message)

    def handle(self, raw_symbol: Any) -> RelayResult:
        event("quote relay invoked", {"symbol": raw_symbol})
        symbol: Optional[str] = None
        try:
            self._validate_config()
            symbol = normalize_symbol(raw_symbol)

            cached = self.cache.get(symbol)
            if cached is not None:
                logger.info("Serving cached quote for %s", symbol)
                return RelayResult(status_code=200, response=cached)

            quote = self.quotes.get_quote(symbol)
            if quote.is_empty:
                raise SymbolNotFoundError(symbol)

            processed_at = self._now()
            text = format_quote_message(symbol, quote, now=processed_at)
            self._notify(text)

            response = RelayResponse(
                success=True,
                message=f"Quote for {symbol} sent to Telegram",
                data=QuoteData(
                    symbol=symbol,
                    current_price=quote.current_price,
                    percent_change=quote.percent_change,
                    timestamp=quote.timestamp or int(processed_at.timestamp()),
                ),
            )
            self.cache.set(symbol, response)
            logger.info("Relayed %s at %s", symbol, quote.current_price)
            return RelayResult(status_code=200, response=response)
        except Exception as exc:  # noqa: BLE001
            return self._fail(symbol, exc)

    def _validate_config(self) -> None:
        missing = self.config.missing_credentials()
        if missing:
            raise ConfigurationError(missing)

    def _notify(self, text: str) -> None:
        try:
            self._deliver(self.config.telegram_chat_id, text)
        except RetryExhaustedError as exc:
            raise NotificationDeliveryError(exc.attempts, exc.last_exception) from exc

    def _fail(self, symbol: Optional[str], exc: Exception) -> RelayResult:
        policy = policy_for(exc)
        if policy.status_code >= 500:
            logger.error("Quote relay failed (%d): %s", policy.status_code, exc, exc_info=exc)
        else:
            logger.warning("Quote relay rejected request (%d): %s", policy.status_code, exc)

        if policy.alert and self.config.error_alerts:
            self._send_alert(symbol, exc)

        detail = None if self.config.is_production else str(exc)
        return RelayResult(
            status_code=policy.status_code,
            response=RelayResponse.failure(public_message(exc), error=detail),
        )

    def _send_alert(self, symbol: Optional[str], exc: Exception) -> None:
        if not self.config.can_alert:
            logger.warning("Skipping error alert: Telegram credentials not configured")
            return
        try:
            self.messenger.send_message(self.config.telegram_chat_id, format_error_alert(symbol, exc))
        except Exception as alert_exc:  # noqa: BLE001
            logger.error("Failed to send error notification: %s", alert_exc)


def build_handler(config: Settings) -> QuoteRelayHandler:
    return QuoteRelayHandler(config=config)
