# Middleware package init
"""
Inventory API - Middleware Package
===================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID: correlation ID stored in a ContextVar, echoed as X-Request-ID
    - Logging: one access line per request with status and duration
    - GZip: compresses larger JSON responses (product lists)
    - CORS: cross-origin access for browser clients, preflight handling
"""
