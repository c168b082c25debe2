"""
Shared utilities for the ACL service.

This package aggregates common building blocks consumed by the engine and
its HTTP surface:

- config: Service configuration via pydantic-settings
- logging: Structured logging with correlation context
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- base_service: FastAPI service skeleton

Do not import from service_* packages into shared/.
"""
