# tests/helpers.py
from decorquote.quotes import create_quote, set_payment_plans, set_quote_items, set_wedding_details


def make_quote(store, number="PRV-2025-0001", client_id=1, **fields):
    return create_quote(store, {"number": number, "client_id": client_id, **fields})


def make_full_quote(store, number="PRV-2025-0001", client_id=1, **fields):
    """Quote with two items, wedding details and a two-row payment plan."""
    q = make_quote(store, number=number, client_id=client_id, **fields)
    set_quote_items(store, q["id"], [
        {"section": "Church", "description": "Bridal bouquet", "quantity": 1, "unit_price": 180, "amount": 180},
        {"section": "Venue", "description": "Centrepiece", "quantity": 10, "unit_price": 45, "amount": 450},
    ])
    set_wedding_details(store, q["id"], {"bride_name": "Anna", "groom_name": "Luca", "flowers": '["peony"]'})
    set_payment_plans(store, q["id"], [
        {"description": "Deposit", "percentage": 30, "amount": 189},
        {"description": "Balance", "percentage": 70, "amount": 441},
    ])
    return q
