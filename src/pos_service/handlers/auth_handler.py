"""
Auth Handler - Lambda function for user logout.

POST /auth/logout deletes the session named by the ``session_id`` cookie and
tells the browser to drop that cookie. Every response of this function,
errors and 405s included, carries the expiring ``Set-Cookie`` directive.
"""

import functools
from typing import Any, Callable, Dict

from aws_lambda_powertools.event_handler import Response
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.typing import LambdaContext

from pos_service.dal import get_dal_handler
from pos_service.dal.schema import ensure_db_initialized
from pos_service.handlers.models.env_vars import get_handler_env_vars
from pos_service.handlers.utils.cookies import expire_cookie, expired_cookie_header, get_session_id
from pos_service.handlers.utils.errors import handle_service_errors
from pos_service.handlers.utils.observability import logger, metrics, tracer
from pos_service.handlers.utils.responses import create_api_response, method_not_allowed_response
from pos_service.handlers.utils.rest_api_resolver import (
    LOGOUT_PATH,
    create_resolver,
    current_method,
    get_request_id,
    methods_except,
    resolve_event,
)
from pos_service.logic.session_service import SessionService
from pos_service.models.output import SuccessOutput

app = create_resolver()


def with_expired_session_cookie(func: Callable[..., Response]) -> Callable[..., Response]:
    """Decorator adding the session-expiry Set-Cookie header to a route's response."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Response:
        response = func(*args, **kwargs)
        return expire_cookie(response, get_handler_env_vars().SESSION_COOKIE_NAME)

    return wrapper


@app.post(LOGOUT_PATH)
@tracer.capture_method
@with_expired_session_cookie
@handle_service_errors
def logout() -> Response:
    """
    Log the caller out.

    Returns:
        200 ``{"success": true}`` whether or not a session existed
    """
    logger.info("Logout request received", extra={"request_id": get_request_id(app)})

    ensure_db_initialized()

    session_id = get_session_id(app.current_event, get_handler_env_vars().SESSION_COOKIE_NAME)
    SessionService(get_dal_handler()).logout(session_id)

    return create_api_response(status_code=200, body=SuccessOutput().model_dump())


@app.route(LOGOUT_PATH, method=methods_except("POST"))
@with_expired_session_cookie
def logout_method_not_allowed() -> Response:
    """Reject every verb other than POST."""
    return method_not_allowed_response(current_method(app), ["POST"])


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Main Lambda handler function.

    Args:
        event: API Gateway REST proxy event
        context: Lambda context object

    Returns:
        API Gateway response
    """
    return resolve_event(
        app,
        event,
        context,
        fallback_headers={"Set-Cookie": expired_cookie_header(get_handler_env_vars().SESSION_COOKIE_NAME)},
    )
