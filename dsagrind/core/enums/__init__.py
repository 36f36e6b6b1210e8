"""Core enums package.

Usage:
    from dsagrind.core.enums import ErrorCode, Environment
"""

from dsagrind.core.enums.environment import Environment
from dsagrind.core.enums.error_code import ErrorCode

__all__ = ["ErrorCode", "Environment"]
