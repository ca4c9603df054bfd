"""create_delivery_tables

Revision ID: 8f3c2a1d4b7e
Revises:
Create Date: 2026-01-10 10:12:41.503218

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "8f3c2a1d4b7e"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _policy_columns() -> list[sa.Column]:
    return [
        sa.Column(
            "is_public", sa.Boolean(), nullable=False, server_default="true"
        ),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=True),
        sa.Column(
            "allowed_emails", postgresql.ARRAY(sa.String()), nullable=True
        ),
        sa.Column(
            "view_count", sa.Integer(), nullable=False, server_default="0"
        ),
    ]


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def upgrade() -> None:
    """업그레이드 마이그레이션"""
    op.create_table(
        "pagelink_documents",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("workspace_id", sa.Uuid(), nullable=False),
        sa.Column("slug", sa.String(length=100), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("html", sa.Text(), nullable=False),
        sa.Column("theme", sa.String(length=50), nullable=True),
        sa.Column(
            "show_badge", sa.Boolean(), nullable=False, server_default="true"
        ),
        *_policy_columns(),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )
    op.create_index(
        "ix_pagelink_documents_workspace_created",
        "pagelink_documents",
        ["workspace_id", "created_at"],
    )

    op.create_table(
        "assets",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("workspace_id", sa.Uuid(), nullable=False),
        sa.Column("filename", sa.String(length=500), nullable=False),
        sa.Column("public_path", sa.Text(), nullable=False),
        sa.Column("storage_path", sa.Text(), nullable=False),
        sa.Column("mime_type", sa.String(length=255), nullable=False),
        sa.Column(
            "size_bytes", sa.BigInteger(), nullable=False, server_default="0"
        ),
        sa.Column(
            "is_archived", sa.Boolean(), nullable=False, server_default="false"
        ),
        *_policy_columns(),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("public_path"),
    )

    op.create_table(
        "collections",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("workspace_id", sa.Uuid(), nullable=False),
        sa.Column("slug", sa.String(length=100), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("branding", postgresql.JSONB(), nullable=True),
        sa.Column(
            "is_archived", sa.Boolean(), nullable=False, server_default="false"
        ),
        *_policy_columns(),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )

    op.create_table(
        "collection_items",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("collection_id", sa.Uuid(), nullable=False),
        sa.Column("asset_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("custom_title", sa.String(length=500), nullable=True),
        sa.ForeignKeyConstraint(
            ["collection_id"], ["collections.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["asset_id"], ["assets.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "collection_id", "asset_id", name="uq_collection_items_asset"
        ),
    )

    op.create_table(
        "short_links",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("workspace_id", sa.Uuid(), nullable=False),
        sa.Column("slug", sa.String(length=100), nullable=False),
        sa.Column("asset_id", sa.Uuid(), nullable=True),
        sa.Column("collection_id", sa.Uuid(), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("max_views", sa.Integer(), nullable=True),
        sa.Column(
            "view_count", sa.Integer(), nullable=False, server_default="0"
        ),
        sa.Column(
            "is_active", sa.Boolean(), nullable=False, server_default="true"
        ),
        _created_at(),
        sa.ForeignKeyConstraint(["asset_id"], ["assets.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["collection_id"], ["collections.id"], ondelete="CASCADE"
        ),
        sa.CheckConstraint(
            "(asset_id IS NULL) <> (collection_id IS NULL)",
            name="ck_short_links_single_target",
        ),
        sa.CheckConstraint("view_count >= 0", name="ck_short_links_view_count"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )

    op.create_table(
        "custom_domains",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("domain", sa.String(length=253), nullable=False),
        sa.Column(
            "status", sa.String(length=20), nullable=False, server_default="pending"
        ),
        sa.Column("document_id", sa.Uuid(), nullable=True),
        sa.Column("workspace_id", sa.Uuid(), nullable=True),
        _created_at(),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["document_id"], ["pagelink_documents.id"], ondelete="CASCADE"
        ),
        sa.CheckConstraint(
            "(document_id IS NULL) <> (workspace_id IS NULL)",
            name="ck_custom_domains_single_target",
        ),
        sa.CheckConstraint(
            "domain = lower(domain)", name="ck_custom_domains_lowercase"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("domain"),
    )

    op.create_table(
        "webhook_endpoints",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("document_id", sa.Uuid(), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("secret", sa.String(length=255), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column(
            "events",
            postgresql.ARRAY(sa.String()),
            nullable=False,
            server_default="{}",
        ),
        sa.Column(
            "failure_count", sa.Integer(), nullable=False, server_default="0"
        ),
        sa.Column(
            "last_triggered_at", sa.DateTime(timezone=True), nullable=True
        ),
        _created_at(),
        sa.ForeignKeyConstraint(
            ["document_id"], ["pagelink_documents.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_webhook_endpoints_document_id", "webhook_endpoints", ["document_id"]
    )

    op.create_table(
        "pagelink_webhook_logs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("endpoint_id", sa.Uuid(), nullable=False),
        sa.Column("document_id", sa.Uuid(), nullable=False),
        sa.Column("event_type", sa.String(length=100), nullable=False),
        sa.Column("success", sa.Boolean(), nullable=False),
        sa.Column("status_code", sa.Integer(), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_pagelink_webhook_logs_document_created",
        "pagelink_webhook_logs",
        ["document_id", "created_at"],
    )

    op.create_table(
        "analytics_events",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("workspace_id", sa.Uuid(), nullable=True),
        sa.Column("target_type", sa.String(length=20), nullable=False),
        sa.Column("target_id", sa.Uuid(), nullable=False),
        sa.Column("event_type", sa.String(length=50), nullable=False),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("referrer", sa.Text(), nullable=True),
        sa.Column("utm_source", sa.String(length=255), nullable=True),
        sa.Column("utm_medium", sa.String(length=255), nullable=True),
        sa.Column("utm_campaign", sa.String(length=255), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_analytics_events_target",
        "analytics_events",
        ["target_type", "target_id"],
    )


def downgrade() -> None:
    """다운그레이드 마이그레이션"""
    op.drop_index("ix_analytics_events_target", table_name="analytics_events")
    op.drop_table("analytics_events")
    op.drop_index(
        "ix_pagelink_webhook_logs_document_created",
        table_name="pagelink_webhook_logs",
    )
    op.drop_table("pagelink_webhook_logs")
    op.drop_index(
        "ix_webhook_endpoints_document_id", table_name="webhook_endpoints"
    )
    op.drop_table("webhook_endpoints")
    op.drop_table("custom_domains")
    op.drop_table("short_links")
    op.drop_table("collection_items")
    op.drop_table("collections")
    op.drop_table("assets")
    op.drop_index(
        "ix_pagelink_documents_workspace_created",
        table_name="pagelink_documents",
    )
    op.drop_table("pagelink_documents")
