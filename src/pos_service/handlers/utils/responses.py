"""
Response builders shared by the POS route handlers.
"""

import json
from typing import Any, Dict, Iterable, Optional

from aws_lambda_powertools.event_handler import Response, content_types


def create_api_response(
    status_code: int,
    body: Any,
    headers: Optional[Dict[str, str]] = None,
) -> Response:
    """Create a JSON API Gateway response."""
    return Response(
        status_code=status_code,
        content_type=content_types.APPLICATION_JSON,
        body=body if isinstance(body, str) else json.dumps(body),
        headers=headers,
    )


def method_not_allowed_response(method: str, allowed_methods: Iterable[str]) -> Response:
    """
    Create a 405 response naming the permitted methods.

    Args:
        method: HTTP method the client used
        allowed_methods: Methods the resource accepts

    Returns:
        Plain-text response with an ``Allow`` header
    """
    return Response(
        status_code=405,
        content_type=content_types.TEXT_PLAIN,
        body=f"Method {method} Not Allowed",
        headers={"Allow": ", ".join(allowed_methods)},
    )
