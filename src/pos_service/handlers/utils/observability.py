"""
Shared Powertools instances for the POS handlers.

Every handler, service and DAL module logs, traces and emits metrics through
the objects defined here so that a single Lambda invocation produces one
correlated stream of structured logs and one EMF metrics blob.
"""

import os

from aws_lambda_powertools.logging import Logger
from aws_lambda_powertools.metrics import MetricUnit, Metrics
from aws_lambda_powertools.tracing import Tracer

# Used when POWERTOOLS_METRICS_NAMESPACE is unset
METRICS_NAMESPACE = 'PosApi'

# Service name and level come from POWERTOOLS_SERVICE_NAME / LOG_LEVEL
logger: Logger = Logger()

# No-op when POWERTOOLS_TRACE_DISABLED is "true"
tracer: Tracer = Tracer()

metrics: Metrics = Metrics(namespace=os.getenv("POWERTOOLS_METRICS_NAMESPACE", METRICS_NAMESPACE))


def add_count_metric(name: str, value: int = 1) -> None:
    """Record a Count metric on the current invocation."""
    metrics.add_metric(name=name, unit=MetricUnit.Count, value=value)
