"""
Environment variable models for type-safe configuration.

The POS functions are configured entirely through Lambda environment
variables. They are parsed once per process into a validated Pydantic model.
"""

from typing import Annotated

from aws_lambda_env_modeler import get_environment_variables
from pydantic import BaseModel, Field


class PosHandlerEnvVars(BaseModel):
    """Environment variables for the POS Lambda handlers."""

    # SQLAlchemy URL of the relational store, e.g. postgresql+psycopg2://...
    DATABASE_URL: Annotated[str, Field(
        description='SQLAlchemy database URL for the POS store',
        min_length=1
    )]

    # Echo every SQL statement to the log
    DB_ECHO: Annotated[str, Field(
        default='false',
        description='Log SQL statements issued by SQLAlchemy (true/false)',
        pattern=r'^(true|false)$'
    )] = 'false'

    DB_CONNECTION_TIMEOUT: Annotated[int, Field(
        default=10,
        description='Database connection timeout in seconds',
        ge=1,
        le=300
    )] = 10

    # Name of the cookie carrying the session id
    SESSION_COOKIE_NAME: Annotated[str, Field(
        default='session_id',
        description='Cookie name holding the authenticated session id',
        min_length=1
    )] = 'session_id'

    ENVIRONMENT: Annotated[str, Field(
        default='dev',
        description='Deployment environment name',
        pattern=r'^(dev|test|staging|prod)$'
    )] = 'dev'

    POWERTOOLS_SERVICE_NAME: Annotated[str, Field(
        default='pos-api',
        description='Service name for AWS Powertools'
    )] = 'pos-api'

    POWERTOOLS_METRICS_NAMESPACE: Annotated[str, Field(
        default='PosApi',
        description='Namespace for CloudWatch metrics'
    )] = 'PosApi'

    LOG_LEVEL: Annotated[str, Field(
        default='INFO',
        description='Log level for application logging',
        pattern=r'^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$'
    )] = 'INFO'

    POWERTOOLS_TRACE_DISABLED: Annotated[str, Field(
        default='false',
        description='Disable X-Ray tracing (true/false)',
        pattern=r'^(true|false)$'
    )] = 'false'

    @property
    def echo_sql(self) -> bool:
        """Check if SQL statement logging is enabled."""
        return self.DB_ECHO.lower() == 'true'


def get_handler_env_vars() -> PosHandlerEnvVars:
    """
    Get typed environment variables for the POS handlers.

    Returns:
        Validated environment variables model instance
    """
    return get_environment_variables(model=PosHandlerEnvVars)
