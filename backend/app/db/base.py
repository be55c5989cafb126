"""SQLAlchemy metadata registry import for Alembic."""

from app.models import FieldMapping
from app.models.base import Base

__all__ = ["Base", "FieldMapping"]
