"""Client for the Finnhub quote endpoint."""
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from quote_relay.app.schemas import Quote
from quote_relay.orchestration.errors import (
    RateLimitedError,
    UpstreamError,
    UpstreamFormatError,
    UpstreamTimeoutError,
)

logger = logging.getLogger(__name__)


class FinnhubClient:
    """Fetches a single quote. Never retries; the caller decides what a failure means."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://finnhub.io/api/v1",
        timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _get(self, path: str, params: Dict[str, Any]) -> httpx.Response:
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                return client.get(f"{self.base_url}{path}", params=params)
        except httpx.TimeoutException as exc:
            logger.error("Finnhub request timed out after %.1fs: %s", self.timeout, exc)
            raise UpstreamTimeoutError(f"Finnhub timed out after {self.timeout}s") from exc
        except httpx.HTTPError as exc:
            logger.error("Finnhub request failed: %s", exc)
            raise UpstreamError(f"Finnhub request failed: {exc}") from exc

    def get_quote(self, symbol: str) -> Quote:
        resp = self._get("/quote", {"symbol": symbol, "token": self.api_key})

        if resp.status_code == 429:
            logger.warning("Finnhub rate limit hit for %s", symbol)
            raise RateLimitedError("Finnhub returned 429 Too Many Requests")
        if resp.is_error:
            logger.error("Finnhub returned HTTP %d for %s", resp.status_code, symbol)
            raise UpstreamError(f"Finnhub returned HTTP {resp.status_code}")

        try:
            raw = resp.json()
        except ValueError as exc:
            logger.error("Finnhub response not valid JSON: %s", exc)
            raise UpstreamFormatError("Finnhub response is not valid JSON") from exc

        if not isinstance(raw, dict):
            raise UpstreamFormatError(f"Finnhub response is a {type(raw).__name__}, expected an object")

        try:
            return Quote(**raw)
        except ValidationError as exc:
            logger.error("Finnhub quote for %s failed validation: %s", symbol, exc)
            raise UpstreamFormatError(f"Malformed quote for {symbol}") from exc
