# Middleware package init
"""
ParcelTrack Backend — Middleware Package
=========================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID runs first so the access log line carries the ID
    - Logging measures the full handler duration and the final status

    Responses travel the chain in reverse, so X-Request-ID is set on every
    response, including error responses from the exception handlers.
"""
