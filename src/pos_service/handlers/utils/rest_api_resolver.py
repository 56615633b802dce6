"""
REST API resolver utility for the POS Lambda handlers.

Each deployed function owns one API Gateway REST resolver built here, so that
every function shares the same resolver configuration.
"""

import json
from typing import Any, Dict, Optional

from aws_lambda_powertools.event_handler import APIGatewayRestResolver, content_types
from aws_lambda_powertools.utilities.typing import LambdaContext

from pos_service.handlers.utils.errors import GENERIC_ERROR_MESSAGE
from pos_service.handlers.utils.observability import add_count_metric, logger
from pos_service.models.output import ErrorOutput

# API path constants
LOGOUT_PATH = '/auth/logout'
INIT_DB_PATH = '/init-db'
PARKED_ORDERS_PATH = '/parked-orders'
PARKED_ORDER_PATH = '/parked-orders/<order_id>'

# Every verb API Gateway can forward to a proxy integration
ALL_METHODS = ['GET', 'HEAD', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS']


def create_resolver() -> APIGatewayRestResolver:
    """Create an API Gateway REST resolver with the POS defaults."""
    return APIGatewayRestResolver(debug=False)


def get_request_id(app: APIGatewayRestResolver) -> str:
    """Return the API Gateway request id of the event being resolved."""
    request_context = app.current_event.raw_event.get("requestContext") or {}
    return request_context.get("requestId") or "unknown"


def methods_except(*allowed: str) -> list:
    """List every HTTP method other than ``allowed``, for 405 routes."""
    return [method for method in ALL_METHODS if method not in allowed]


def current_method(app: APIGatewayRestResolver) -> str:
    """HTTP method of the event being resolved."""
    return app.current_event.http_method.upper()



def resolve_event(
    app: APIGatewayRestResolver,
    event: Dict[str, Any],
    context: LambdaContext,
    fallback_headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """
    Route an API Gateway event through ``app``.

    Errors raised inside routes are already converted by the route decorators;
    anything escaping the resolver itself (a malformed event, for instance)
    becomes a generic 500 here.
    """
    add_count_metric("RequestCount")

    try:
        return app.resolve(event, context)
    except Exception as e:
        add_count_metric("RequestError")
        logger.exception("Unhandled error in lambda handler", extra={"error": str(e)})

        headers = {"Content-Type": content_types.APPLICATION_JSON}
        headers.update(fallback_headers or {})
        return {
            "statusCode": 500,
            "headers": headers,
            "body": json.dumps(ErrorOutput(error=GENERIC_ERROR_MESSAGE).model_dump()),
        }
