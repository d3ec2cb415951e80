"""revoked bearer tokens

Revision ID: 0002_jwt_blocklist
Revises: 0001_initial
Create Date: 2026-10-18
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0002_jwt_blocklist"
down_revision = "0001_initial"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "jwt_blocklist",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("jti", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("revoked_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("jti", name="uq_jwt_blocklist_jti"),
    )


def downgrade():
    op.drop_table("jwt_blocklist")
