"""
Notes API — Middleware Package
================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    The request ID is set before the access log line is written, so every
    line carries it.
"""
