"""Application environment types.

Environments:
- DEVELOPMENT: Local development, console log renderer
- TESTING: Automated test execution
- CI: Continuous integration
- PRODUCTION: Production deployment, JSON log renderer
"""

from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"
