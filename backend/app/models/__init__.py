"""ORM models package exports."""

from app.models.field_mapping import FieldMapping

__all__ = [
    "FieldMapping",
]
