"""ASGI middleware."""

from caseflow.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
