"""seed billing defaults

Revision ID: b2d4f6a8c013
Revises: a1c3e5f7b901
Create Date: 2026-10-19 09:20:00.000000
"""
from datetime import datetime, timezone

from alembic import op
import sqlalchemy as sa


revision = "b2d4f6a8c013"
down_revision = "a1c3e5f7b901"
branch_labels = None
depends_on = None


PAYMENT_METHODS = [
    ("cash", "Cash", "Cash payment at reception"),
    ("card_on_site", "Card (On Site)", "Card payment at salon using card machine"),
    ("eft", "EFT", "Electronic Funds Transfer"),
    ("payfast", "PayFast", "Online payment via PayFast"),
    ("yoco", "Yoco", "Online payment via Yoco"),
    ("loyalty_points", "Loyalty Points", "Pay using loyalty points"),
]

DISCOUNT_PRESETS = [
    ("VIP Client (10%)", "10% discount for VIP clients", "percentage", 10),
    ("VIP Client (15%)", "15% discount for VIP clients", "percentage", 15),
    ("First Time Client", "R50 off for first-time clients", "fixed", 50),
    ("Staff Discount (20%)", "20% discount for staff members", "percentage", 20),
    ("Loyalty Reward", "Reward for loyal customers", "percentage", 5),
]


def upgrade() -> None:
    conn = op.get_bind()
    now = datetime.now(timezone.utc).replace(tzinfo=None)

    exists = conn.execute(sa.text("SELECT 1 FROM invoice_settings WHERE id = 1")).fetchone()
    if not exists:
        conn.execute(
            sa.text(
                "INSERT INTO invoice_settings (id, tax_enabled, tax_rate, tax_name, "
                "default_service_commission_rate, default_product_commission_rate, "
                "default_service_product_commission_rate, invoice_number_prefix, "
                "quote_number_prefix, number_format, allow_partial_payments, "
                "payment_due_days, max_discount_percentage, require_discount_reason, "
                "deduct_stock_on_finalize, allow_negative_stock, "
                "auto_approve_commission_on_payment, updated_at) VALUES "
                "(1, :true, 0.15, 'VAT', 0.30, 0.10, 0.05, 'INV', 'QTE', "
                "'{PREFIX}-{YEAR}-{NUMBER}', :true, 0, 100, :true, :true, :false, "
                ":true, :now)"
            ),
            {"true": True, "false": False, "now": now},
        )

    for order, (code, name, description) in enumerate(PAYMENT_METHODS, start=1):
        exists = conn.execute(
            sa.text("SELECT 1 FROM payment_methods WHERE code = :code LIMIT 1"),
            {"code": code},
        ).fetchone()
        if exists:
            continue
        conn.execute(
            sa.text(
                "INSERT INTO payment_methods (code, name, description, display_order, "
                "is_active, created_at) "
                "VALUES (:code, :name, :description, :display_order, :is_active, :created_at)"
            ),
            {
                "code": code,
                "name": name,
                "description": description,
                "display_order": order,
                "is_active": True,
                "created_at": now,
            },
        )

    for order, (name, description, discount_type, value) in enumerate(
        DISCOUNT_PRESETS, start=1
    ):
        exists = conn.execute(
            sa.text("SELECT 1 FROM discount_presets WHERE name = :name LIMIT 1"),
            {"name": name},
        ).fetchone()
        if exists:
            continue
        conn.execute(
            sa.text(
                "INSERT INTO discount_presets (name, description, discount_type, "
                "discount_value, requires_approval, display_order, is_active, "
                "created_at, updated_at) VALUES (:name, :description, :discount_type, "
                ":discount_value, :requires_approval, :display_order, :is_active, "
                ":now, :now)"
            ),
            {
                "name": name,
                "description": description,
                "discount_type": discount_type,
                "discount_value": value,
                "requires_approval": False,
                "display_order": order,
                "is_active": True,
                "now": now,
            },
        )


def downgrade() -> None:
    conn = op.get_bind()
    conn.execute(sa.text("DELETE FROM discount_presets"))
    conn.execute(sa.text("DELETE FROM payment_methods"))
    conn.execute(sa.text("DELETE FROM invoice_settings WHERE id = 1"))
