"""HTTP routers.

- system: root and health endpoints
- api: /api/auth and /api/oauth resource routers
"""
