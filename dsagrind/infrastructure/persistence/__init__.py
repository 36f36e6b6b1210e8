"""SQLAlchemy persistence: models, database manager, repositories."""

from dsagrind.infrastructure.persistence.base import BaseModel, BaseMutableModel
from dsagrind.infrastructure.persistence.database import Database

__all__ = ["BaseModel", "BaseMutableModel", "Database"]
