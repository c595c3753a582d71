"""
Geoturismo Backend — Middleware Package
=========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation ID for logs and error bodies
    2. Logging: method, path, status and duration, tagged with the request ID
"""
