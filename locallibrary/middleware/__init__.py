"""
Local Library: Middleware
==========================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → Route Handler

    1. Request ID: assign the correlation ID first so every later log line
       (including the access line) can carry it
    2. Logging: one access line per request with status and duration

    Responses travel back through the same chain in reverse, which is where
    the X-Request-ID header is attached.
"""
