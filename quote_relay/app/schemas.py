from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class Quote(BaseModel):
    """Finnhub /quote payload. Only the current price is mandatory."""

    # strict: numeric strings and booleans are format errors, not numbers
    model_config = {"extra": "ignore", "populate_by_name": True, "strict": True}

    current_price: float = Field(..., alias="c")
    high: Optional[float] = Field(None, alias="h")
    low: Optional[float] = Field(None, alias="l")
    open: Optional[float] = Field(None, alias="o")
    previous_close: Optional[float] = Field(None, alias="pc")
    change: Optional[float] = Field(None, alias="d")
    percent_change: Optional[float] = Field(None, alias="dp")
    timestamp: Optional[int] = Field(None, alias="t")

    @property
    def is_empty(self) -> bool:
        # Finnhub answers unknown symbols with zeros and null percent change.
        return self.current_price == 0 and self.percent_change is None


class QuoteData(BaseModel):
    model_config = {"populate_by_name": True}

    symbol: str
    current_price: float = Field(..., alias="currentPrice")
    percent_change: Optional[float] = Field(None, alias="percentChange")
    timestamp: int


class RelayResponse(BaseModel):
    success: bool
    message: str
    data: Optional[QuoteData] = None
    error: Optional[str] = None

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": self.success, "message": self.message}
        if self.data is not None:
            body["data"] = self.data.model_dump(by_alias=True)
        if self.error is not None:
            body["error"] = self.error
        return body

    @classmethod
    def failure(cls, message: str, error: Optional[str] = None) -> "RelayResponse":
        return cls(success=False, message=message, error=error)


class RelayResult(BaseModel):
    status_code: int
    response: RelayResponse
