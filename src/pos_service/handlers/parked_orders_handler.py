"""
Parked Orders Handler - Lambda function for parked order management.

Routes:
    POST   /parked-orders        park a cart
    DELETE /parked-orders/{id}   discard a parked cart (404 when already gone)

Store failures are answered with the underlying error message.
"""

import json
from typing import Any, Dict, Optional

from aws_lambda_powertools.event_handler import Response
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from pos_service.dal import get_dal_handler
from pos_service.dal.schema import ensure_db_initialized
from pos_service.handlers.utils.errors import ValidationError, create_error_context, handle_service_errors
from pos_service.handlers.utils.observability import logger, metrics, tracer
from pos_service.handlers.utils.responses import create_api_response, method_not_allowed_response
from pos_service.handlers.utils.rest_api_resolver import (
    PARKED_ORDER_PATH,
    PARKED_ORDERS_PATH,
    create_resolver,
    current_method,
    get_request_id,
    methods_except,
    resolve_event,
)
from pos_service.logic.parked_order_service import DeleteOutcome, ParkedOrderService, parse_parked_order_id
from pos_service.models.input import ParkOrderRequest
from pos_service.models.output import ErrorOutput, SuccessOutput

MISSING_FIELDS_MESSAGE = 'Missing required fields'
NOT_FOUND_MESSAGE = 'Parked order not found'

app = create_resolver()


def _delete_parked_order(raw_order_id: Optional[Any]) -> Response:
    context = create_error_context(
        request_id=get_request_id(app),
        operation="delete_parked_order",
        resource_id=raw_order_id if isinstance(raw_order_id, str) else None,
    )

    ensure_db_initialized()

    order_id = parse_parked_order_id(raw_order_id, context=context)
    outcome = ParkedOrderService(get_dal_handler()).delete_parked_order(order_id)

    if outcome is DeleteOutcome.NOT_FOUND:
        return create_api_response(status_code=404, body=ErrorOutput(error=NOT_FOUND_MESSAGE).model_dump())

    return create_api_response(status_code=200, body=SuccessOutput().model_dump())


@app.delete(PARKED_ORDER_PATH)
@tracer.capture_method
@handle_service_errors(expose_internal_errors=True)
def delete_parked_order(order_id: str) -> Response:
    """
    Delete a parked order.

    Args:
        order_id: Parked order identifier from the path

    Returns:
        200 when deleted, 404 when no such parked order exists
    """
    logger.info("Delete parked order request received", extra={"order_id": order_id})
    return _delete_parked_order(order_id)


@app.delete(PARKED_ORDERS_PATH)
@tracer.capture_method
@handle_service_errors(expose_internal_errors=True)
def delete_parked_order_without_id() -> Response:
    """A delete addressed to the collection carries no id: always 400."""
    logger.info("Delete parked order request received without id")
    return _delete_parked_order(None)


@app.post(PARKED_ORDERS_PATH)
@tracer.capture_method
@handle_service_errors(expose_internal_errors=True)
def park_order() -> Response:
    """
    Park a cart for later completion.

    Returns:
        201 with the stored parked order
    """
    logger.info("Park order request received", extra={"request_id": get_request_id(app)})

    ensure_db_initialized()

    context = create_error_context(request_id=get_request_id(app), operation="park_order")
    try:
        request_body = json.loads(app.current_event.body or "{}")
        park_request = ParkOrderRequest.model_validate(request_body)
    except json.JSONDecodeError:
        raise ValidationError(message="Invalid JSON in request body", context=context)
    except PydanticValidationError as e:
        logger.warning("Park order validation failed", extra={
            "validation_errors": str(e),
            "error_count": e.error_count(),
        })
        raise ValidationError(message=MISSING_FIELDS_MESSAGE, context=context)

    order = ParkedOrderService(get_dal_handler()).park_order(park_request)

    logger.info("Order parked", extra={"order_id": order.id, "item_count": len(order.items)})

    return create_api_response(
        status_code=201,
        body=order.model_dump_json(by_alias=True),
        headers={"Location": f"{PARKED_ORDERS_PATH}/{order.id}"},
    )


@app.route(PARKED_ORDER_PATH, method=methods_except("DELETE"))
def parked_order_method_not_allowed(order_id: str) -> Response:
    """Reject every verb other than DELETE on a single parked order."""
    return method_not_allowed_response(current_method(app), ["DELETE"])


@app.route(PARKED_ORDERS_PATH, method=methods_except("DELETE", "POST"))
def parked_orders_method_not_allowed() -> Response:
    """Reject verbs the collection does not handle."""
    return method_not_allowed_response(current_method(app), ["DELETE", "POST"])


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
    return resolve_event(app, event, context)
