"""
Adapters package for the frontend gateway.

HTTP clients for the upstream services the gateway depends on:

- EvaluationClient: resolves toggles for an identity and context
- MetricsClient: registers SDK metrics

Adapters do not retry; failures surface as ExternalServiceError.
"""

from .evaluation_client import EvaluationClient
from .metrics_client import MetricsClient

__all__ = [
    "EvaluationClient",
    "MetricsClient",
]
