"""
Singers API — Middleware Package
==================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID: correlation id in a ContextVar and the X-Request-ID header
    - Logging:    one access-log line per request with status and duration
"""
