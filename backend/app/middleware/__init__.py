"""
Back Office API - Middleware Package
=====================================

What:  Cross-cutting concerns applied to every request.

Execution order (outermost first):
    Request → [Rate Limit] → [Request ID] → [Access Log] → [GZip] → [CORS] → Route

    Responses travel back through the same chain in reverse, so the access
    log sees the final status code and the request ID header is set on
    every response, errors included.
"""
