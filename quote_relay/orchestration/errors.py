"""Error taxonomy for the quote relay and the table that maps it to HTTP statuses."""
from typing import Dict, NamedTuple, Type


class RelayError(Exception):
    """Base class for every failure the relay knows how to report."""

    public_message = "Internal server error"

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.public_message)
        self.detail = detail or self.public_message


class ConfigurationError(RelayError):
    public_message = "Server configuration error"

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(f"Missing env vars: {', '.join(self.missing)}")


class InvalidSymbolError(RelayError):
    public_message = "Invalid symbol. Use 1-5 letters, e.g. AAPL"

    def __init__(self, symbol: str | None):
        self.symbol = symbol
        super().__init__(f"Invalid symbol: {symbol!r}")


class SymbolNotFoundError(RelayError):
    public_message = "Symbol not found"

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"No quote data for {symbol}")


class UpstreamError(RelayError):
    public_message = "Market data provider error"


class UpstreamFormatError(UpstreamError):
    public_message = "Market data provider returned an unexpected response"


class RateLimitedError(UpstreamError):
    public_message = "Market data rate limit reached, try again later"


class UpstreamTimeoutError(UpstreamError):
    public_message = "Upstream request timed out"


class MessagingError(RelayError):
    """A single failed call to the messaging provider."""

    public_message = "Messaging provider error"


class NotificationDeliveryError(RelayError):
    public_message = "Failed to deliver notification"

    def __init__(self, attempts: int, cause: BaseException | None = None):
        self.attempts = attempts
        self.cause = cause
        super().__init__(f"Notification failed after {attempts} attempt(s): {cause}")


class ErrorPolicy(NamedTuple):
    status_code: int
    alert: bool


ERROR_POLICIES: Dict[Type[BaseException], ErrorPolicy] = {
    ConfigurationError: ErrorPolicy(500, True),
    InvalidSymbolError: ErrorPolicy(400, False),
    SymbolNotFoundError: ErrorPolicy(404, False),
    RateLimitedError: ErrorPolicy(429, True),
    UpstreamTimeoutError: ErrorPolicy(504, True),
    UpstreamFormatError: ErrorPolicy(502, True),
    UpstreamError: ErrorPolicy(502, True),
    # the alert would go through the channel that just failed
    NotificationDeliveryError: ErrorPolicy(502, False),
    MessagingError: ErrorPolicy(502, False),
}

DEFAULT_POLICY = ErrorPolicy(500, True)


def policy_for(exc: BaseException) -> ErrorPolicy:
    for cls in type(exc).__mro__:
        if cls in ERROR_POLICIES:
            return ERROR_POLICIES[cls]
    return DEFAULT_POLICY


def public_message(exc: BaseException) -> str:
    if isinstance(exc, RelayError):
        return exc.public_message
    return RelayError.public_message
