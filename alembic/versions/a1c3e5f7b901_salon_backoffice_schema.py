"""salon back office schema

Revision ID: a1c3e5f7b901
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from alembic import op
import sqlalchemy as sa


revision = "a1c3e5f7b901"
down_revision = None
branch_labels = None
depends_on = None


def _document_columns() -> list:
    return [
        sa.Column("services_subtotal", sa.Numeric(12, 2), nullable=False),
        sa.Column("products_subtotal", sa.Numeric(12, 2), nullable=False),
        sa.Column("subtotal", sa.Numeric(12, 2), nullable=False),
        sa.Column("discount_type", sa.String(length=30), nullable=True),
        sa.Column("discount_value", sa.Numeric(12, 2), nullable=False),
        sa.Column("discount_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("discount_reason", sa.String(length=255), nullable=True),
        sa.Column("tax_rate", sa.Numeric(5, 4), nullable=False),
        sa.Column("tax_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("total", sa.Numeric(12, 2), nullable=False),
    ]


def _party_columns() -> list:
    return [
        sa.Column("customer_type", sa.String(length=30), nullable=False),
        sa.Column("company_name", sa.String(length=255), nullable=True),
        sa.Column("business_address", sa.String(length=255), nullable=True),
        sa.Column("vat_number", sa.String(length=50), nullable=True),
        sa.Column("company_reg", sa.String(length=50), nullable=True),
        sa.Column("client_notes", sa.Text(), nullable=True),
        sa.Column("internal_notes", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(length=150), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def _line_columns(service: bool) -> list:
    columns = [
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("quantity", sa.Numeric(12, 3), nullable=False),
        sa.Column("discount", sa.Numeric(12, 2), nullable=False),
        sa.Column("total", sa.Numeric(12, 2), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    ]
    if service:
        columns += [
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("duration_minutes", sa.Integer(), nullable=True),
        ]
    else:
        columns.append(sa.Column("product_type", sa.String(length=30), nullable=False))
    return columns


def upgrade() -> None:
    op.create_table(
        "customers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "stylists",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("specialty", sa.String(length=255), nullable=True),
        sa.Column("commission_rate", sa.Numeric(5, 4), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "services",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=True),
        sa.Column("commission_rate", sa.Numeric(5, 4), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("stock", sa.Integer(), nullable=False),
        sa.Column("commission_rate", sa.Numeric(5, 4), nullable=True),
        sa.Column("is_service_product", sa.Boolean(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("stylist_id", sa.Integer(), sa.ForeignKey("stylists.id"), nullable=True),
        sa.Column("service_id", sa.Integer(), sa.ForeignKey("services.id"), nullable=True),
        sa.Column("booking_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=30), nullable=False),
        sa.Column("payment_status", sa.String(length=30), nullable=False),
        sa.Column("payment_date", sa.DateTime(), nullable=True),
        sa.Column("invoice_id", sa.Integer(), nullable=True),
        sa.Column("invoiced", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_bookings_invoice_id", "bookings", ["invoice_id"])
    op.create_index("ix_bookings_invoiced", "bookings", ["invoiced"])

    op.create_table(
        "invoices",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("invoice_number", sa.String(length=50), nullable=True, unique=True),
        sa.Column("booking_id", sa.Integer(), sa.ForeignKey("bookings.id"), nullable=True),
        sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("stylist_id", sa.Integer(), sa.ForeignKey("stylists.id"), nullable=False),
        *_document_columns(),
        sa.Column("payment_status", sa.String(length=30), nullable=False),
        sa.Column("amount_paid", sa.Numeric(12, 2), nullable=False),
        sa.Column("amount_due", sa.Numeric(12, 2), nullable=False),
        sa.Column("commission_total", sa.Numeric(12, 2), nullable=False),
        sa.Column("commission_paid", sa.Boolean(), nullable=False),
        sa.Column("commission_paid_date", sa.DateTime(), nullable=True),
        sa.Column("status", sa.String(length=30), nullable=False),
        sa.Column("service_date", sa.Date(), nullable=False),
        sa.Column("invoice_date", sa.Date(), nullable=True),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("finalized_at", sa.DateTime(), nullable=True),
        sa.Column("sent_at", sa.DateTime(), nullable=True),
        *_party_columns(),
    )
    op.create_index("ix_invoices_customer_id", "invoices", ["customer_id"])
    op.create_index("ix_invoices_stylist_id", "invoices", ["stylist_id"])
    op.create_index("ix_invoices_status", "invoices", ["status"])
    op.create_index("ix_invoices_payment_status", "invoices", ["payment_status"])
    op.create_index("ix_invoices_service_date", "invoices", ["service_date"])

    with op.batch_alter_table("bookings") as batch_op:
        batch_op.create_foreign_key(
            "fk_bookings_invoice_id", "invoices", ["invoice_id"], ["id"]
        )

    op.create_table(
        "invoice_services",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "invoice_id",
            sa.Integer(),
            sa.ForeignKey("invoices.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "service_id",
            sa.Integer(),
            sa.ForeignKey("services.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_line_columns(service=True),
        sa.Column("commission_rate", sa.Numeric(5, 4), nullable=False),
        sa.Column("commission_amount", sa.Numeric(12, 2), nullable=False),
    )
    op.create_index("ix_invoice_services_invoice_id", "invoice_services", ["invoice_id"])
    op.create_table(
        "invoice_products",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "invoice_id",
            sa.Integer(),
            sa.ForeignKey("invoices.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "product_id",
            sa.Integer(),
            sa.ForeignKey("products.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_line_columns(service=False),
        sa.Column("commission_rate", sa.Numeric(5, 4), nullable=False),
        sa.Column("commission_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("deducted_from_stock", sa.Boolean(), nullable=False),
    )
    op.create_index("ix_invoice_products_invoice_id", "invoice_products", ["invoice_id"])
    op.create_table(
        "invoice_payments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "invoice_id",
            sa.Integer(),
            sa.ForeignKey("invoices.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("payment_method", sa.String(length=50), nullable=False),
        sa.Column("payment_reference", sa.String(length=150), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("processed_by", sa.String(length=150), nullable=True),
        sa.Column("paid_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_invoice_payments_invoice_id", "invoice_payments", ["invoice_id"])
    op.create_table(
        "invoice_commissions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "invoice_id",
            sa.Integer(),
            sa.ForeignKey("invoices.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("stylist_id", sa.Integer(), sa.ForeignKey("stylists.id"), nullable=False),
        sa.Column("services_commission", sa.Numeric(12, 2), nullable=False),
        sa.Column("products_commission", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_commission", sa.Numeric(12, 2), nullable=False),
        sa.Column("payment_status", sa.String(length=30), nullable=False),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        sa.Column("payment_date", sa.DateTime(), nullable=True),
        sa.Column("payment_reference", sa.String(length=150), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_invoice_commissions_stylist_id", "invoice_commissions", ["stylist_id"]
    )
    op.create_index(
        "ix_invoice_commissions_payment_status", "invoice_commissions", ["payment_status"]
    )
    op.create_table(
        "invoice_voids",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("invoice_id", sa.Integer(), sa.ForeignKey("invoices.id"), nullable=False),
        sa.Column("reason", sa.String(length=150), nullable=False),
        sa.Column("note", sa.String(length=255), nullable=True),
        sa.Column("voided_at", sa.DateTime(), nullable=False),
        sa.Column("voided_by", sa.String(length=150), nullable=False),
    )
    op.create_table(
        "document_sequences",
        sa.Column("kind", sa.String(length=20), primary_key=True),
        sa.Column("year", sa.Integer(), primary_key=True),
        sa.Column("last_number", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "quotes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("quote_number", sa.String(length=50), nullable=True, unique=True),
        sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customers.id"), nullable=True),
        sa.Column("stylist_id", sa.Integer(), sa.ForeignKey("stylists.id"), nullable=True),
        *_document_columns(),
        sa.Column("status", sa.String(length=30), nullable=False),
        sa.Column("quote_date", sa.Date(), nullable=False),
        sa.Column("valid_until", sa.Date(), nullable=False),
        sa.Column("sent_at", sa.DateTime(), nullable=True),
        sa.Column("accepted_at", sa.DateTime(), nullable=True),
        sa.Column("declined_at", sa.DateTime(), nullable=True),
        sa.Column(
            "converted_invoice_id",
            sa.Integer(),
            sa.ForeignKey("invoices.id"),
            nullable=True,
        ),
        *_party_columns(),
    )
    op.create_index("ix_quotes_status", "quotes", ["status"])
    op.create_index("ix_quotes_customer_id", "quotes", ["customer_id"])
    op.create_index("ix_quotes_stylist_id", "quotes", ["stylist_id"])
    op.create_table(
        "quote_services",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "quote_id",
            sa.Integer(),
            sa.ForeignKey("quotes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "service_id",
            sa.Integer(),
            sa.ForeignKey("services.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_line_columns(service=True),
    )
    op.create_index("ix_quote_services_quote_id", "quote_services", ["quote_id"])
    op.create_table(
        "quote_products",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "quote_id",
            sa.Integer(),
            sa.ForeignKey("quotes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "product_id",
            sa.Integer(),
            sa.ForeignKey("products.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_line_columns(service=False),
    )
    op.create_index("ix_quote_products_quote_id", "quote_products", ["quote_id"])

    op.create_table(
        "invoice_settings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("tax_enabled", sa.Boolean(), nullable=False),
        sa.Column("tax_rate", sa.Numeric(5, 4), nullable=False),
        sa.Column("tax_name", sa.String(length=20), nullable=False),
        sa.Column("default_service_commission_rate", sa.Numeric(5, 4), nullable=False),
        sa.Column("default_product_commission_rate", sa.Numeric(5, 4), nullable=False),
        sa.Column(
            "default_service_product_commission_rate", sa.Numeric(5, 4), nullable=False
        ),
        sa.Column("invoice_number_prefix", sa.String(length=20), nullable=False),
        sa.Column("quote_number_prefix", sa.String(length=20), nullable=False),
        sa.Column("number_format", sa.String(length=50), nullable=False),
        sa.Column("allow_partial_payments", sa.Boolean(), nullable=False),
        sa.Column("payment_due_days", sa.Integer(), nullable=False),
        sa.Column("max_discount_percentage", sa.Numeric(5, 2), nullable=False),
        sa.Column("require_discount_reason", sa.Boolean(), nullable=False),
        sa.Column("deduct_stock_on_finalize", sa.Boolean(), nullable=False),
        sa.Column("allow_negative_stock", sa.Boolean(), nullable=False),
        sa.Column("auto_approve_commission_on_payment", sa.Boolean(), nullable=False),
        sa.Column("updated_by", sa.String(length=150), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("id = 1", name="ck_invoice_settings_singleton"),
        sa.CheckConstraint(
            "tax_rate >= 0 AND tax_rate <= 1", name="ck_invoice_settings_tax_rate"
        ),
    )
    op.create_table(
        "payment_methods",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=True),
        sa.Column(
            "transaction_fee_type", sa.String(length=20), nullable=False, server_default="none"
        ),
        sa.Column(
            "transaction_fee_value", sa.Numeric(12, 2), nullable=False, server_default="0"
        ),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()
        ),
        sa.UniqueConstraint("code", name="uq_payment_methods_code"),
    )
    op.create_index("ix_payment_methods_is_active", "payment_methods", ["is_active"])
    op.create_table(
        "discount_presets",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=True),
        sa.Column("discount_type", sa.String(length=20), nullable=False),
        sa.Column("discount_value", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "requires_approval", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("ix_discount_presets_is_active", "discount_presets", ["is_active"])


def downgrade() -> None:
    op.drop_index("ix_discount_presets_is_active", table_name="discount_presets")
    op.drop_table("discount_presets")
    op.drop_index("ix_payment_methods_is_active", table_name="payment_methods")
    op.drop_table("payment_methods")
    op.drop_table("invoice_settings")
    op.drop_table("quote_products")
    op.drop_table("quote_services")
    op.drop_table("quotes")
    op.drop_table("document_sequences")
    op.drop_table("invoice_voids")
    op.drop_table("invoice_commissions")
    op.drop_table("invoice_payments")
    op.drop_table("invoice_products")
    op.drop_table("invoice_services")
    with op.batch_alter_table("bookings") as batch_op:
        batch_op.drop_constraint("fk_bookings_invoice_id", type_="foreignkey")
    op.drop_table("invoices")
    op.drop_table("bookings")
    op.drop_table("products")
    op.drop_table("services")
    op.drop_table("stylists")
    op.drop_table("customers")
