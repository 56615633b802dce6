"""
Parked orders Lambda Function - Entry point for /parked-orders.

Delegates to ``pos_service.handlers.parked_orders_handler``, which owns routing,
validation and error handling for this function.
"""

import os
import sys
from typing import Any, Dict

# Add the service package to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from aws_lambda_powertools.utilities.typing import LambdaContext  # noqa: E402
from pos_service.handlers.parked_orders_handler import lambda_handler as parked_orders_handler  # noqa: E402


def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Lambda function entry point.

    Args:
        event: API Gateway REST proxy event
        context: Lambda context object

    Returns:
        API Gateway response dictionary
    """
    return parked_orders_handler(event, context)
