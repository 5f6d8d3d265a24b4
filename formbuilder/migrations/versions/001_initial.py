"""Initial form builder schema.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

from formbuilder.config import settings

revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    forms = settings.table_name("forms")
    fields = settings.table_name("form_fields")
    submissions = settings.table_name("form_submissions")

    # Form
    op.create_table(
        forms,
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column(
            "success_message", sa.String(255), nullable=False,
            server_default="Thank you! Your form has been submitted successfully.",
        ),
        sa.Column("submit_button_text", sa.String(255), nullable=False, server_default="Submit"),
        sa.Column("columns", sa.Integer, nullable=False, server_default="1"),
        sa.Column("custom_route", sa.String(255)),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("settings", sa.JSON),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(f"ix_{forms}_slug", forms, ["slug"], unique=True)

    # FormField
    op.create_table(
        fields,
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("form_id", sa.Integer, sa.ForeignKey(f"{forms}.id", ondelete="CASCADE"), nullable=False),
        sa.Column("key", sa.String(255), nullable=False),
        sa.Column("label", sa.String(255), nullable=False),
        sa.Column("type", sa.String(20), nullable=False, server_default="text"),
        sa.Column("validation_rules", sa.Text),
        sa.Column("default_value", sa.Text),
        sa.Column("options", sa.JSON),
        sa.Column("placeholder", sa.String(255)),
        sa.Column("help_text", sa.Text),
        sa.Column("column_span", sa.Integer, nullable=False, server_default="1"),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_required", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("is_visible", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("conditional_logic", sa.JSON),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("form_id", "key", name="uq_form_fields_form_key"),
    )
    op.create_index(f"ix_{fields}_form_id", fields, ["form_id"])
    op.create_index(f"ix_{fields}_key", fields, ["key"])

    # FormSubmission
    op.create_table(
        submissions,
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("form_id", sa.Integer, sa.ForeignKey(f"{forms}.id", ondelete="CASCADE"), nullable=False),
        sa.Column("data", sa.JSON, nullable=False),
        sa.Column("ip_address", sa.String(45)),
        sa.Column("user_agent", sa.Text),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(f"ix_{submissions}_form_id", submissions, ["form_id"])
    op.create_index(
        "ix_form_submissions_form_submitted", submissions, ["form_id", "submitted_at"]
    )


def downgrade() -> None:
    op.drop_table(settings.table_name("form_submissions"))
    op.drop_table(settings.table_name("form_fields"))
    op.drop_table(settings.table_name("forms"))
