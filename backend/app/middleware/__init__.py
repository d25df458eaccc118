# Middleware package init
"""
FitLog Backend - Middleware Package
=====================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    RequestIDMiddleware runs first so the access log line and any error body
    carry the same correlation ID.
"""
