"""
Init DB Handler - Lambda function bootstrapping the POS store.

/init-db applies the schema and seed data if this process has not done so
yet. It is an operational endpoint: it answers every HTTP method and echoes
the underlying error message on failure.
"""

from typing import Any, Dict

from aws_lambda_powertools.event_handler import Response
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.typing import LambdaContext

from pos_service.dal.schema import ensure_db_initialized
from pos_service.handlers.utils.errors import handle_service_errors
from pos_service.handlers.utils.observability import logger, metrics, tracer
from pos_service.handlers.utils.responses import create_api_response
from pos_service.handlers.utils.rest_api_resolver import (
    ALL_METHODS,
    INIT_DB_PATH,
    create_resolver,
    current_method,
    resolve_event,
)
from pos_service.models.output import MessageOutput

INIT_DB_COMPLETE_MESSAGE = 'Database initialization check complete.'

app = create_resolver()


@app.route(INIT_DB_PATH, method=ALL_METHODS)
@tracer.capture_method
@handle_service_errors(expose_internal_errors=True)
def init_db() -> Response:
    """
    Ensure the schema and seed data exist.

    Returns:
        200 with a confirmation message
    """
    performed = ensure_db_initialized()

    logger.info("Database initialization check complete", extra={
        "http_method": current_method(app),
        "initialized_now": performed,
    })

    return create_api_response(
        status_code=200,
        body=MessageOutput(message=INIT_DB_COMPLETE_MESSAGE).model_dump(),
    )


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """Lambda entry point for /init-db."""
    return resolve_event(app, event, context)
