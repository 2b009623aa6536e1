"""
Setups API - Middleware Package
=================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

Request ID runs first so the access log line and any error body for the
request share the same correlation id.
"""
