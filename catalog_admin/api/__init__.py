"""API layer module.

FastAPI routers, request/response schemas, dependencies and middleware.
"""
