import logging
from typing import Any, Dict, Optional

import httpx

from quote_relay.orchestration.errors import MessagingError

logger = logging.getLogger(__name__)


class TelegramClient:
    """Minimal Telegram Bot API client: sendMessage only, no polling."""

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.telegram.org",
        timeout: float = 3.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def send_message(self, chat_id: str, text: str, parse_mode: str = "Markdown") -> Dict[str, Any]:
        url = f"{self.base_url}/bot{self.token}/sendMessage"
        payload = {"chat_id": chat_id, "text": text, "parse_mode": parse_mode}
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                resp = client.post(url, json=payload)
                resp.raise_for_status()
                result = resp.json()
        except httpx.HTTPStatusError as exc:
            # exc.request.url carries the bot token, keep it out of logs
            raise MessagingError(f"Telegram returned HTTP {exc.response.status_code}") from exc
        except httpx.TimeoutException as exc:
            raise MessagingError(f"Telegram timed out after {self.timeout}s") from exc
        except httpx.HTTPError as exc:
            raise MessagingError(f"Telegram request failed: {type(exc).__name__}") from exc
        except ValueError as exc:
            raise MessagingError("Telegram response is not valid JSON") from exc

        if not isinstance(result, dict) or not result.get("ok"):
            description = result.get("description") if isinstance(result, dict) else None
            raise MessagingError(f"Telegram rejected message: {description or 'unknown error'}")
        logger.info("Telegram message delivered to chat %s", chat_id)
        return result
