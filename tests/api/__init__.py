"""HTTP tests through the FastAPI app.

Handlers are replaced with stubs via ``app.dependency_overrides``; the
integration tests cover the real adapters.
"""
