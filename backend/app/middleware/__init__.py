"""
Product API: Middleware Package
==================================

Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

The request ID is set first so the access log line and any error handler
output carry it.
"""
