"""
Pytest configuration and shared fixtures for the POS Lambda API.

Common fixtures used by unit and integration tests: test environment, an
isolated in-memory SQLite store per test, API Gateway events and Lambda
contexts.
"""

import json
import os
from typing import Any, Callable, Dict, Optional
from unittest.mock import Mock

import httpx
import pytest

# Must be in place before any pos_service module builds its Powertools objects
os.environ.update({
    "AWS_DEFAULT_REGION": "us-east-1",
    "DATABASE_URL": "sqlite+pysqlite:///:memory:",
    "ENVIRONMENT": "test",
    "POWERTOOLS_SERVICE_NAME": "test-pos-api",
    "POWERTOOLS_METRICS_NAMESPACE": "TestPosApi",
    "LOG_LEVEL": "DEBUG",
    "POWERTOOLS_TRACE_DISABLED": "true",
})

from sqlalchemy import create_engine, text  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from pos_service.dal import set_dal_handler  # noqa: E402
from pos_service.dal.db_handler import SqlHandler  # noqa: E402
from pos_service.dal.schema import get_schema_initializer, set_schema_initializer  # noqa: E402
from pos_service.handlers.utils.observability import metrics  # noqa: E402


# Database fixtures
@pytest.fixture
def db_engine() -> Engine:
    """Fresh in-memory SQLite database shared by every connection of the test."""
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    yield engine
    engine.dispose()


@pytest.fixture
def sql_handler(db_engine) -> SqlHandler:
    return SqlHandler(db_engine)


@pytest.fixture(autouse=True)
def reset_singletons(sql_handler):
    """Point the process-wide store at the test database and forget schema state."""
    set_dal_handler(sql_handler)
    set_schema_initializer(None)
    yield
    set_dal_handler(None)
    set_schema_initializer(None)
    metrics.clear_metrics()


@pytest.fixture
def initialized_db(sql_handler) -> SqlHandler:
    """Store with schema and seed data applied."""
    get_schema_initializer().ensure_initialized()
    return sql_handler


@pytest.fixture
def count_rows(db_engine) -> Callable[..., int]:
    """Count rows of a table, optionally filtered by id."""

    def _count(table: str, row_id: Optional[Any] = None) -> int:
        query = f"SELECT COUNT(*) FROM {table}"
        params = {}
        if row_id is not None:
            query += " WHERE id = :id"
            params["id"] = row_id
        with db_engine.connect() as connection:
            return connection.execute(text(query), params).scalar_one()

    return _count


# Sample data fixtures
@pytest.fixture
def sample_items() -> list:
    return [
        {
            "id": 1,
            "name": "Espresso",
            "price": {"USD": 2.5, "MXN": 45.0},
            "category": "Coffee",
            "sellBy": "unit",
            "quantity": 2,
        },
        {
            "id": 15,
            "name": "Colombian Coffee Beans",
            "price": {"USD": 22.0},
            "category": "Coffee Beans",
            "sellBy": "weight",
            "quantity": 0.5,
            "imageUrl": "https://picsum.photos/id/225/400/300",
        },
    ]


@pytest.fixture
def insert_parked_order(sql_handler) -> Callable[[str], None]:
    def _insert(order_id: str, name: str = "Table 5") -> None:
        sql_handler.execute(
            'INSERT INTO parked_orders (id, name, items, "parkedAt") VALUES (:id, :name, :items, :parked_at)',
            {"id": order_id, "name": name, "items": "[]", "parked_at": "2024-01-01T12:00:00+00:00"},
        )

    return _insert


@pytest.fixture
def insert_session(sql_handler) -> Callable[[str], None]:
    def _insert(session_id: str, user_id: int = 1) -> None:
        sql_handler.execute(
            "INSERT INTO auth_sessions (id, user_id, expires_at) VALUES (:id, :user_id, :expires_at)",
            {"id": session_id, "user_id": user_id, "expires_at": "2099-01-01T00:00:00+00:00"},
        )

    return _insert


# API Gateway fixtures
@pytest.fixture
def api_gateway_event() -> Callable[..., Dict[str, Any]]:
    """Build an API Gateway REST proxy event."""

    def _build(
        method: str,
        path: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[Any] = None,
        path_parameters: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        if body is not None and not isinstance(body, str):
            body = json.dumps(body)
        return {
            "httpMethod": method,
            "path": path,
            "resource": path,
            "headers": {"Content-Type": "application/json", **(headers or {})},
            "multiValueHeaders": {},
            "body": body,
            "requestContext": {
                "requestId": "test-request-id-123",
                "accountId": "123456789012",
                "stage": "test",
                "httpMethod": method,
                "path": path,
                "resourcePath": path,
                "protocol": "HTTP/1.1",
                "identity": {
                    "sourceIp": "127.0.0.1",
                    "userAgent": "test-agent/1.0",
                },
            },
            "pathParameters": path_parameters,
            "queryStringParameters": None,
            "multiValueQueryStringParameters": None,
            "stageVariables": None,
            "isBase64Encoded": False,
        }

    return _build


@pytest.fixture
def lambda_context():
    """Create a mock Lambda context for testing."""
    context = Mock()
    context.function_name = "test-pos-function"
    context.function_version = "1"
    context.invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:test-pos-function"
    context.memory_limit_in_mb = "512"
    context.get_remaining_time_in_millis = lambda: 30000
    context.aws_request_id = "test-request-id-123"
    context.log_group_name = "/aws/lambda/test-pos-function"
    context.log_stream_name = "2024/01/01/[$LATEST]test123"
    return context


@pytest.fixture
def response_header() -> Callable[[Dict[str, Any], str], Optional[str]]:
    """Read a header from a resolver response, single- or multi-value."""

    def _get(response: Dict[str, Any], name: str) -> Optional[str]:
        for key, value in (response.get("headers") or {}).items():
            if key.lower() == name.lower():
                return value
        for key, values in (response.get("multiValueHeaders") or {}).items():
            if key.lower() == name.lower() and values:
                return values[0]
        return None

    return _get


@pytest.fixture
def integration_client():
    """HTTP client for a deployed stage; skips when API_BASE_URL is unset."""
    base_url = os.environ.get("API_BASE_URL")
    if not base_url:
        pytest.skip("API_BASE_URL not set")
    with httpx.Client(base_url=base_url, timeout=30.0) as client:
        yield client


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "e2e" in str(item.fspath):
            item.add_marker(pytest.mark.e2e)
