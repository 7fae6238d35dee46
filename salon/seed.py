from sqlalchemy import select
from sqlalchemy.orm import Session

from .db import SessionLocal
from .models import SETTINGS_ROW_ID, DiscountPreset, InvoiceSettings, PaymentMethod


SEED_PAYMENT_METHODS = [
    {"code": "cash", "name": "Cash", "description": "Cash payment at reception"},
    {
        "code": "card_on_site",
        "name": "Card (On Site)",
        "description": "Card payment at salon using card machine",
    },
    {"code": "eft", "name": "EFT", "description": "Electronic Funds Transfer"},
    {"code": "payfast", "name": "PayFast", "description": "Online payment via PayFast"},
    {"code": "yoco", "name": "Yoco", "description": "Online payment via Yoco"},
    {
        "code": "loyalty_points",
        "name": "Loyalty Points",
        "description": "Pay using loyalty points",
    },
]

SEED_DISCOUNT_PRESETS = [
    {
        "name": "VIP Client (10%)",
        "description": "10% discount for VIP clients",
        "discount_type": "percentage",
        "discount_value": 10,
    },
    {
        "name": "VIP Client (15%)",
        "description": "15% discount for VIP clients",
        "discount_type": "percentage",
        "discount_value": 15,
    },
    {
        "name": "First Time Client",
        "description": "R50 off for first-time clients",
        "discount_type": "fixed",
        "discount_value": 50,
    },
    {
        "name": "Staff Discount (20%)",
        "description": "20% discount for staff members",
        "discount_type": "percentage",
        "discount_value": 20,
    },
    {
        "name": "Loyalty Reward",
        "description": "Reward for loyal customers",
        "discount_type": "percentage",
        "discount_value": 5,
    },
]


def seed_defaults(session: Session) -> dict:
    created = {"settings": 0, "payment_methods": 0, "discount_presets": 0}

    if session.get(InvoiceSettings, SETTINGS_ROW_ID) is None:
        session.add(InvoiceSettings(id=SETTINGS_ROW_ID))
        created["settings"] = 1

    for order, entry in enumerate(SEED_PAYMENT_METHODS, start=1):
        exists = session.execute(
            select(PaymentMethod).where(PaymentMethod.code == entry["code"])
        ).scalar_one_or_none()
        if exists:
            continue
        session.add(PaymentMethod(display_order=order, is_active=True, **entry))
        created["payment_methods"] += 1

    for order, entry in enumerate(SEED_DISCOUNT_PRESETS, start=1):
        exists = session.execute(
            select(DiscountPreset).where(DiscountPreset.name == entry["name"])
        ).scalar_one_or_none()
        if exists:
            continue
        session.add(DiscountPreset(display_order=order, is_active=True, **entry))
        created["discount_presets"] += 1

    if any(created.values()):
        session.commit()
    return created


def main() -> None:
    with SessionLocal() as session:
        created = seed_defaults(session)
    print(
        "Seeded settings: {settings}, payment methods: {payment_methods}, "
        "discount presets: {discount_presets}".format(**created)
    )


if __name__ == "__main__":
    main()
