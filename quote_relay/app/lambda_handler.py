"""API Gateway (proxy integration) entry point for serverless deployments."""
import json
import logging
from typing import Any, Dict

from quote_relay.app.logging import configure_logging
from quote_relay.app.settings import settings
from quote_relay.orchestration.handler import QuoteRelayHandler, build_handler

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

# Module scope: warm invocations reuse the handler and its cache.
_handler = build_handler(settings)


def handle_event(event: Dict[str, Any], relay: QuoteRelayHandler) -> Dict[str, Any]:
    method = (
        event.get("httpMethod")
        or event.get("requestContext", {}).get("http", {}).get("method")
        or "GET"
    ).upper()

    # header names are not case-normalized by API Gateway
    request_headers = {k.lower(): v for k, v in (event.get("headers") or {}).items()}
    cors_headers = relay.config.cors_headers(request_headers.get("origin"))

    if method == "OPTIONS":
        return {"statusCode": 200, "headers": cors_headers, "body": ""}
    if method not in ("GET", "POST"):
        return {
            "statusCode": 405,
            "headers": {**cors_headers, "Content-Type": "application/json"},
            "body": json.dumps({"success": False, "message": "Method not allowed"}),
        }

    # queryStringParameters is null, not {}, when the URL has no query string
    query_params = event.get("queryStringParameters") or {}
    result = relay.handle(query_params.get("symbol"))
    return {
        "statusCode": result.status_code,
        "headers": {**cors_headers, "Content-Type": "application/json"},
        "body": json.dumps(result.response.to_body()),
    }


def lambda_handler(event, context):
    logger.info("Function started for request %s", getattr(context, "aws_request_id", "local"))
    return handle_event(event, _handler)
