"""
NoteKeeper Backend: Middleware Package
=======================================

Middleware Chain:
    Request → [Request ID] → [Access Log] → [Rate Limit] → [GZip] → [CORS] → Route

    1. Request ID first: every later step, including a 429, carries the ID
    2. Access log: sees the final status of everything below it, 429s included
    3. Rate limit: rejects throttled clients before any database work

The order is reversed for responses, so the access log sees the final
status code and the request ID header is added last.
"""
