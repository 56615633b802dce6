"""
Session cookie helpers.

The handlers never parse or format cookies themselves: they ask this module
for the session id carried by a request, and for the ``Set-Cookie`` directive
that makes the browser drop the session cookie.
"""

from typing import Dict, Optional

from aws_lambda_powertools.event_handler import Response
from aws_lambda_powertools.utilities.data_classes import APIGatewayProxyEvent


def parse_cookie_header(header: str) -> Dict[str, str]:
    """
    Map cookie names to values from a ``Cookie`` request header.

    Parsing is lenient: each ``;``-separated pair is split on its first ``=``,
    so a value that is not a valid RFC 6265 token (JSON, spaces) does not hide
    the cookies after it. Pairs without ``=`` are skipped, and the first
    occurrence of a repeated name wins.
    """
    cookies: Dict[str, str] = {}
    for pair in header.split(';'):
        name, separator, value = pair.partition('=')
        name = name.strip()
        if not separator or not name or name in cookies:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] == '"':
            value = value[1:-1]
        cookies[name] = value
    return cookies


def get_session_id(event: APIGatewayProxyEvent, cookie_name: str) -> Optional[str]:
    """
    Extract the session id from the request ``Cookie`` header.

    Returns None when the header or the cookie is absent or empty.
    """
    header = event.headers.get("cookie")
    if not header:
        return None

    return parse_cookie_header(header).get(cookie_name) or None


def expired_cookie_header(cookie_name: str) -> str:
    """Set-Cookie value instructing the client to delete ``cookie_name`` now."""
    return f"{cookie_name}=; HttpOnly; Path=/; Max-Age=0; SameSite=Lax; Secure"


def expire_cookie(response: Response, cookie_name: str) -> Response:
    """Attach the expiring Set-Cookie directive to ``response``."""
    response.headers["Set-Cookie"] = expired_cookie_header(cookie_name)
    return response
