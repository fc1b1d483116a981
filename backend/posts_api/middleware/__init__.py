# Middleware package init
"""
Posts & Comments API — Middleware Package
===========================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    Responses travel the chain in reverse, so the logging middleware sees the
    final status code and the request ID header is added last.
"""
