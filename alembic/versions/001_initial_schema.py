"""Initial schema - document, document_version, quota_account.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "document",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("owner_id", sa.String(255), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("content", postgresql.JSONB(), nullable=False),
        sa.Column("derived_text", sa.Text(), nullable=False, server_default=""),
        sa.Column("word_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("character_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("page_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("size_bytes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("archived", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("external_index_id", sa.String(255), nullable=True),
        sa.Column("external_index_fingerprint", sa.String(32), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_edited_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_document_owner_live_updated",
        "document",
        ["owner_id", "updated_at"],
        postgresql_where=sa.text("archived = false"),
    )

    op.create_table(
        "document_version",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column(
            "document_id",
            sa.UUID(),
            sa.ForeignKey("document.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("content", postgresql.JSONB(), nullable=False),
        sa.Column("derived_text", sa.Text(), nullable=False),
        sa.Column("word_count", sa.Integer(), nullable=False),
        sa.Column("character_count", sa.Integer(), nullable=False),
        sa.Column("page_count", sa.Integer(), nullable=False),
        sa.Column("size_bytes", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_autosave", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("change_description", sa.Text(), nullable=True),
    )
    op.create_index(
        "ix_document_version_document_created",
        "document_version",
        ["document_id", "created_at"],
    )

    op.create_table(
        "quota_account",
        sa.Column("owner_id", sa.String(255), primary_key=True),
        sa.Column("max_documents", sa.Integer(), nullable=False),
        sa.Column("max_document_size_bytes", sa.BigInteger(), nullable=False),
        sa.Column("max_document_pages", sa.Integer(), nullable=False),
        sa.Column("current_document_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "total_storage_used_bytes", sa.BigInteger(), nullable=False, server_default="0"
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("current_document_count >= 0", name="ck_quota_count_non_negative"),
        sa.CheckConstraint("total_storage_used_bytes >= 0", name="ck_quota_bytes_non_negative"),
    )


def downgrade() -> None:
    op.drop_table("quota_account")
    op.drop_index("ix_document_version_document_created", table_name="document_version")
    op.drop_table("document_version")
    op.drop_index("ix_document_owner_live_updated", table_name="document")
    op.drop_table("document")
