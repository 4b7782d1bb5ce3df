"""
API server package: HTTP/JSON interface.

Thin routes: validate input, call the check-in handler, event cache or
transfer guard, and map results to status codes.
"""
