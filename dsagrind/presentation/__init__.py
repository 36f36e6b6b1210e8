"""Presentation layer: FastAPI routers, HTTP dependencies and error mapping."""
