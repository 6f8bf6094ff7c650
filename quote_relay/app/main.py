import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse

from quote_relay.app.logging import configure_logging
from quote_relay.app.settings import settings
from quote_relay.orchestration.handler import QuoteRelayHandler, build_handler

configure_logging(settings.log_level)

app = FastAPI(title="Quote Relay")

# One handler per process so the quote cache lives as long as the worker.
handler = build_handler(settings)
logger = logging.getLogger(__name__)


@app.middleware("http")
async def cors(request: Request, call_next):
    """Answer every OPTIONS (bare or browser preflight) with an empty 200 and tag all responses."""
    headers = settings.cors_headers(request.headers.get("origin"))
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=headers)
    response = await call_next(request)
    response.headers.update(headers)
    return response


def get_handler() -> QuoteRelayHandler:
    return handler


@app.api_route("/api/send", methods=["GET", "POST"])
def send_quote(symbol: Optional[str] = None, relay: QuoteRelayHandler = Depends(get_handler)):
    result = relay.handle(symbol)
    return JSONResponse(status_code=result.status_code, content=result.response.to_body())


@app.get("/health")
def health():
    return {"status": "ok", "service": "quote-relay"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
