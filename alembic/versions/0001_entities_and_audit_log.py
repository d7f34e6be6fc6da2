"""Entities and audit log.

Revision ID: 0001_entities_and_audit_log
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

revision = "0001_entities_and_audit_log"
down_revision = None
branch_labels = None
depends_on = None

object_id_type = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def upgrade() -> None:
    """Create the entities table and its append-only audit log."""
    op.create_table(
        "entities",
        sa.Column("object_id", object_id_type, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("valid_from", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.PrimaryKeyConstraint("object_id", name=op.f("pk_entities")),
    )
    op.create_table(
        "audit_log",
        sa.Column("tid", object_id_type, nullable=False),
        sa.Column("object_id", sa.BigInteger(), nullable=False),
        sa.Column("action", sa.String(length=16), nullable=False),
        sa.Column("valid_from", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.PrimaryKeyConstraint("tid", name=op.f("pk_audit_log")),
    )
    op.create_index(op.f("ix_audit_log_object_id"), "audit_log", ["object_id"])


def downgrade() -> None:
    """Drop the audit log and entities tables."""
    op.drop_index(op.f("ix_audit_log_object_id"), table_name="audit_log")
    op.drop_table("audit_log")
    op.drop_table("entities")
