import json
from datetime import datetime, timezone
from typing import Any, List

import httpx
import pytest

from quote_relay.app.settings import Settings
from quote_relay.orchestration.cache import TTLCache
from quote_relay.orchestration.handler import QuoteRelayHandler
from quote_relay.tools.finnhub_client import FinnhubClient
from quote_relay.tools.telegram_client import TelegramClient

FIXED_NOW = datetime(2024, 3, 1, 15, 30, tzinfo=timezone.utc)

AAPL_QUOTE = {
    "c": 150.1234,
    "d": 2.1234,
    "dp": 1.5,
    "h": 151.0,
    "l": 147.5,
    "o": 148.25,
    "pc": 148.0,
    "t": 1709306400,
}


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeUpstreams:
    """Records outbound calls and answers them from queued responses."""

    def __init__(self):
        self.quote_requests: List[httpx.Request] = []
        self.message_requests: List[httpx.Request] = []
        self.quote_response: Any = httpx.Response(200, json=AAPL_QUOTE)
        self.message_responses: List[Any] = []

    def _finnhub(self, request: httpx.Request) -> httpx.Response:
        self.quote_requests.append(request)
        if isinstance(self.quote_response, Exception):
            raise self.quote_response
        return self.quote_response

    def _telegram(self, request: httpx.Request) -> httpx.Response:
        self.message_requests.append(request)
        if self.message_responses:
            outcome = self.message_responses.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome
        return httpx.Response(200, json={"ok": True, "result": {"message_id": 1}})

    @property
    def finnhub_transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._finnhub)

    @property
    def telegram_transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._telegram)

    @property
    def outbound_calls(self) -> int:
        return len(self.quote_requests) + len(self.message_requests)

    def sent_texts(self) -> List[str]:
        return [json.loads(r.content)["text"] for r in self.message_requests]


def make_settings(**overrides: Any) -> Settings:
    values = {
        "finnhub_api_key": "finnhub-key",
        "telegram_bot_token": "123:bot-token",
        "telegram_chat_id": "42",
        "environment": "development",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def upstreams() -> FakeUpstreams:
    return FakeUpstreams()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleeps() -> List[float]:
    return []


@pytest.fixture
def make_handler(upstreams, clock, sleeps):
    def factory(**overrides) -> QuoteRelayHandler:
        config = make_settings(**overrides)
        return QuoteRelayHandler(
            config=config,
            cache=TTLCache(ttl_seconds=config.cache_ttl_seconds, clock=clock),
            quotes=FinnhubClient(
                api_key=config.finnhub_api_key or "",
                timeout=config.quote_timeout,
                transport=upstreams.finnhub_transport,
            ),
            messenger=TelegramClient(
                token=config.telegram_bot_token or "",
                timeout=config.notify_timeout,
                transport=upstreams.telegram_transport,
            ),
            sleep=sleeps.append,
            now=lambda: FIXED_NOW,
        )

    return factory


@pytest.fixture
def handler(make_handler) -> QuoteRelayHandler:
    return make_handler()
