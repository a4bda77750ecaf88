"""
Shared utilities for the flag-edge services.

This package aggregates common building blocks consumed by all services:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- base_service: FastAPI application shell (middleware, health, errors)

Any cross-service logic should live here to avoid import cycles across
service packages. Do not import from service_* packages into edge_shared/.
"""
