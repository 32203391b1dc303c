# tests/test_pdf.py
from decorquote.pdf import OTHER_SECTION, group_by_section, render_quote_pdf, section_subtotal
from decorquote.quotes import get_payment_plans, get_quote, get_quote_items, get_wedding_details
from decorquote.records import CompanySettings
from tests.helpers import make_full_quote, make_quote


def test_group_by_section_keeps_first_appearance_order():
    items = [
        {"section": "Venue", "sort_order": 1},
        {"section": "Church", "sort_order": 0},
        {"section": "", "sort_order": 2},
        {"section": "Church", "sort_order": 3},
    ]
    groups = group_by_section(items)
    assert list(groups) == ["Church", "Venue", OTHER_SECTION]
    assert len(groups["Church"]) == 2


def test_section_subtotal_skips_gifts():
    assert section_subtotal([{"amount": 100}, {"amount": 50, "is_gift": True}]) == 100


def test_render_full_quote(store):
    q = make_full_quote(store, event_date="2025-09-20", subtotal=630, total=630,
                        discount_type="fixed", discount_value=30, client_notes="Fiori & Co <3")
    pdf = render_quote_pdf(
        get_quote(store, q["id"]), get_quote_items(store, q["id"]),
        get_wedding_details(store, q["id"]), get_payment_plans(store, q["id"]),
        CompanySettings(tax_regime="ordinary"),
    )
    assert pdf.startswith(b"%PDF")


def test_render_minimal_template_without_wedding(store):
    q = make_quote(store)
    pdf = render_quote_pdf(get_quote(store, q["id"]), [], None, [], CompanySettings(),
                           accent_color="not-a-colour", template="minimal")
    assert pdf.startswith(b"%PDF")
