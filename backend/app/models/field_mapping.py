"""Field mapping ORM model."""

import uuid

from sqlalchemy import Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin


def new_mapping_id() -> str:
    return str(uuid.uuid4())


class FieldMapping(Base, TimestampMixin):
    """Learned association between a DOM input on a site and a profile field, per user."""

    __tablename__ = "field_mappings"
    __table_args__ = (
        UniqueConstraint("user_id", "domain", "selector", name="uq_field_mappings_user_domain_selector"),
        Index("ix_field_mappings_user_domain", "user_id", "domain"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_mapping_id)
    user_id: Mapped[str] = mapped_column(Text, nullable=False)
    domain: Mapped[str] = mapped_column(Text, nullable=False)
    selector: Mapped[str] = mapped_column(Text, nullable=False)
    profile_field: Mapped[str] = mapped_column(Text, nullable=False)
    dom_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    dom_name: Mapped[str | None] = mapped_column(Text, nullable=True)
