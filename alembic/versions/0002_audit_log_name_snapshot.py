"""Audit log name snapshot.

Revision ID: 0002_audit_log_name_snapshot
Revises: 0001_entities_and_audit_log
Create Date: 2026-10-19 00:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

revision = "0002_audit_log_name_snapshot"
down_revision = "0001_entities_and_audit_log"
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Record the entity's name on every audit row."""
    op.add_column("audit_log", sa.Column("name", sa.String(length=200), nullable=True))


def downgrade() -> None:
    with op.batch_alter_table("audit_log") as batch_op:
        batch_op.drop_column("name")
