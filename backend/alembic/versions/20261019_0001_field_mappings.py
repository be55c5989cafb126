"""field mappings

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:01
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261019_0001"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "field_mappings",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("domain", sa.Text(), nullable=False),
        sa.Column("selector", sa.Text(), nullable=False),
        sa.Column("profile_field", sa.Text(), nullable=False),
        sa.Column("dom_id", sa.Text(), nullable=True),
        sa.Column("dom_name", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "domain", "selector", name="uq_field_mappings_user_domain_selector"),
    )
    op.create_index("ix_field_mappings_user_domain", "field_mappings", ["user_id", "domain"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_field_mappings_user_domain", table_name="field_mappings")
    op.drop_table("field_mappings")
