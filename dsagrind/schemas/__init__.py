"""HTTP request/response schemas (pydantic).

Kept separate from domain entities and DTOs: these are HTTP-layer concerns.
"""
