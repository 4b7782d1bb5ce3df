"""
Core utilities: domain exceptions and cross-cutting helpers used by the
database layer, check-in handler, chain clients and API server.
"""
