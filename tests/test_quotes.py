# tests/test_quotes.py
from datetime import date

import pytest

from decorquote.clients import create_client, delete_client
from decorquote.company import update_settings
from decorquote.quotes import (
    DELETED_CLIENT, delete_quote, duplicate_quote, filter_quotes, get_payment_plans, get_quote,
    get_quote_items, get_wedding_details, list_quotes, next_quote_number, save_quote,
    set_quote_items, set_wedding_details, sort_quotes, update_quote,
)
from decorquote.records import CompanySettings, PAYMENT_PLANS, QUOTE_ITEMS, WEDDING_DETAILS
from tests.helpers import make_full_quote, make_quote

Y2025 = date(2025, 6, 10)


# ---- numbering ---------------------------------------------------------------

def test_first_number_of_the_year_uses_start_number(store):
    settings = CompanySettings(quote_prefix="PRV", quote_start_number=12)
    assert next_quote_number(store, settings, today=Y2025) == "PRV-2025-0012"


def test_next_number_is_max_plus_one_without_filling_gaps(store):
    make_quote(store, "PRV-2025-0001")
    make_quote(store, "PRV-2025-0003")
    assert next_quote_number(store, CompanySettings(), today=Y2025) == "PRV-2025-0004"


def test_sequence_is_per_year(store):
    make_quote(store, "PRV-2024-0057")
    assert next_quote_number(store, CompanySettings(), today=Y2025) == "PRV-2025-0001"


def test_number_reads_settings_from_store_when_not_given(store):
    update_settings(store, {"quote_prefix": "EV", "quote_start_number": 100})
    assert next_quote_number(store, today=Y2025) == "EV-2025-0100"


def test_unparseable_suffix_counts_as_zero(store):
    make_quote(store, "PRV-2025-draft")
    assert next_quote_number(store, CompanySettings(), today=Y2025) == "PRV-2025-0001"


# ---- client name -------------------------------------------------------------

def test_quote_outlives_its_client(store):
    client = create_client(store, {"name": "Anna Rossi"})
    q = make_quote(store, client_id=client["id"])
    assert get_quote(store, q["id"])["client_name"] == "Anna Rossi"
    delete_client(store, client["id"])
    assert list_quotes(store)[0]["client_name"] == DELETED_CLIENT


def test_status_can_jump_anywhere(store):
    q = make_quote(store, status="completed")
    assert update_quote(store, q["id"], {"status": "draft"})["status"] == "draft"
    assert update_quote(store, q["id"], {"status": "rejected"})["status"] == "rejected"


# ---- owned rows ----------------------------------------------------------------

def test_set_quote_items_replaces_wholesale_and_reassigns_sort_order(store):
    q = make_quote(store)
    set_quote_items(store, q["id"], [{"description": "a", "sort_order": 9}, {"description": "b", "sort_order": 3}])
    rows = set_quote_items(store, q["id"], [{"description": "c"}, {"description": "d"}, {"description": "e"}])
    assert [r["sort_order"] for r in rows] == [0, 1, 2]
    assert [r["description"] for r in get_quote_items(store, q["id"])] == ["c", "d", "e"]
    assert len(store.list(QUOTE_ITEMS)) == 3


def test_set_quote_items_leaves_other_quotes_alone(store):
    a = make_full_quote(store, "PRV-2025-0001")
    b = make_quote(store, "PRV-2025-0002")
    set_quote_items(store, b["id"], [{"description": "x"}])
    assert len(get_quote_items(store, a["id"])) == 2
    ids = [r["id"] for r in store.list(QUOTE_ITEMS)]
    assert len(ids) == len(set(ids))


def test_wedding_details_at_most_one_per_quote(store):
    q = make_quote(store)
    set_wedding_details(store, q["id"], {"bride_name": "Anna"})
    set_wedding_details(store, q["id"], {"bride_name": "Giulia"})
    rows = store.list(WEDDING_DETAILS)
    assert len(rows) == 1
    assert get_wedding_details(store, q["id"])["bride_name"] == "Giulia"


# ---- cascade delete ------------------------------------------------------------

def test_delete_quote_cascades_to_owned_rows_only(store):
    a = make_full_quote(store, "PRV-2025-0001")
    b = make_full_quote(store, "PRV-2025-0002")

    assert delete_quote(store, a["id"]) is True

    for name in (QUOTE_ITEMS, WEDDING_DETAILS, PAYMENT_PLANS):
        assert not [r for r in store.list(name) if r["quote_id"] == a["id"]]
    assert len(get_quote_items(store, b["id"])) == 2
    assert get_wedding_details(store, b["id"]) is not None
    assert len(get_payment_plans(store, b["id"])) == 2
    assert [q["id"] for q in list_quotes(store)] == [b["id"]]


def test_delete_quote_twice(store):
    q = make_full_quote(store)
    assert delete_quote(store, q["id"]) is True
    assert delete_quote(store, q["id"]) is False


def test_delete_quote_sweeps_orphaned_children(store):
    store.replace(QUOTE_ITEMS, [{"id": 1, "quote_id": 5, "description": "left behind"}])
    assert delete_quote(store, 5) is False
    assert store.list(QUOTE_ITEMS) == []


# ---- duplication ---------------------------------------------------------------

def test_duplicate_copies_everything_but_identity(store):
    src = make_full_quote(store, "PRV-2025-0001", status="confirmed",
                          confirmed_date="2025-05-01", event_location="Villa Ada",
                          discount_type="percentage", discount_value=10, total=567)
    copy = duplicate_quote(store, src["id"], CompanySettings(), today=Y2025)

    assert copy["id"] != src["id"]
    assert copy["number"] == "PRV-2025-0002"
    assert copy["status"] == "draft"
    assert copy["confirmed_date"] is None
    for field in ("client_id", "event_location", "discount_type", "discount_value", "total"):
        assert copy[field] == src[field]

    src_items = get_quote_items(store, src["id"])
    new_items = get_quote_items(store, copy["id"])
    assert [i["description"] for i in new_items] == [i["description"] for i in src_items]
    assert all(i["quote_id"] == copy["id"] for i in new_items)
    assert get_wedding_details(store, copy["id"])["bride_name"] == "Anna"
    assert [p["percentage"] for p in get_payment_plans(store, copy["id"])] == [30, 70]
    # source untouched
    assert len(get_quote_items(store, src["id"])) == 2


def test_duplicate_without_wedding_details(store):
    src = make_quote(store)
    copy = duplicate_quote(store, src["id"], CompanySettings(), today=Y2025)
    assert get_wedding_details(store, copy["id"]) is None
    assert get_quote_items(store, copy["id"]) == []


def test_duplicate_unknown_quote(store):
    assert duplicate_quote(store, 404) is None


# ---- editor save ---------------------------------------------------------------

def test_save_quote_recomputes_everything(store, ordinary):
    items = [
        {"description": "Arch", "quantity": 2, "unit_price": 100, "amount": 1},  # stale amount
        {"description": "Bouquet", "quantity": 1, "unit_price": 50, "is_gift": True},
    ]
    payments = [{"description": "Deposit", "percentage": 30}, {"description": "Balance", "percentage": 70}]
    fields = {"client_id": 1, "discount_type": "percentage", "discount_value": 10}

    quote, warning = save_quote(store, fields, items, payments, settings=ordinary)

    assert warning is None
    assert quote["subtotal"] == 200.0
    assert quote["total"] == 219.6
    assert quote["tax_rate"] == 22
    assert quote["number"].startswith("PRV-")
    assert [i["amount"] for i in get_quote_items(store, quote["id"])] == [200.0, 50.0]
    assert [p["amount"] for p in get_payment_plans(store, quote["id"])] == [65.88, 153.72]


def test_save_quote_twice_is_stable(store, flat_rate):
    items = [{"description": "Arch", "quantity": 3, "unit_price": 120}]
    fields = {"number": "PRV-2025-0001", "client_id": 1}
    first, _ = save_quote(store, fields, items, [], settings=flat_rate)
    second, _ = save_quote(store, fields, items, [], quote_id=first["id"], settings=flat_rate)
    assert second["id"] == first["id"]
    assert second["total"] == first["total"] == 360.0
    assert len(store.list(QUOTE_ITEMS)) == 1
    assert len(list_quotes(store)) == 1


def test_save_quote_warns_on_bad_split_but_saves(store, flat_rate):
    quote, warning = save_quote(store, {"client_id": 1}, [], [{"percentage": 50}], settings=flat_rate)
    assert "50%" in warning
    assert get_quote(store, quote["id"]) is not None


def test_save_quote_with_wedding(store, flat_rate):
    quote, _ = save_quote(store, {"client_id": 1}, [], [], wedding={"bride_name": "Anna"}, settings=flat_rate)
    assert get_wedding_details(store, quote["id"])["bride_name"] == "Anna"


# ---- list search and ordering ---------------------------------------------------

QUOTES_FOR_LIST = [
    {"number": "PRV-2025-0001", "client_name": "Anna Rossi", "status": "sent",
     "event_type": "wedding", "event_date": "2025-09-20", "total": 4500.0},
    {"number": "PRV-2025-0002", "client_name": "Luca Bianchi", "status": "draft",
     "event_type": "birthday", "event_date": "2025-07-01", "total": 800.0},
    {"number": "PRV-2025-0003", "client_name": "Giulia Verdi", "status": "confirmed",
     "event_type": "wedding", "event_date": "", "total": 2500.0},
    {"number": "PRV-2025-0004", "client_name": "Marco Neri", "status": "bozza",
     "event_type": "baptism", "event_date": "2025-06-01", "total": 0.0},
]


def _numbers(rows):
    return [q["number"][-4:] for q in rows]


@pytest.mark.parametrize("criteria,expected", [
    ({}, ["0001", "0002", "0003", "0004"]),
    ({"search": "rossi"}, ["0001"]),
    ({"search": "0002"}, ["0002"]),
    ({"status": "confirmed"}, ["0003"]),
    ({"event_type": "wedding"}, ["0001", "0003"]),
    ({"date_from": "2025-07-01"}, ["0001", "0002"]),
    ({"date_from": "2025-06-01", "date_to": "2025-07-01"}, ["0002", "0004"]),
    ({"amount_min": 0.0, "amount_max": 800}, ["0002", "0004"]),
    ({"amount_min": 2500}, ["0001", "0003"]),
    ({"search": "a", "event_type": "wedding", "amount_max": 3000}, ["0003"]),
])
def test_filter_quotes(criteria, expected):
    assert _numbers(filter_quotes(QUOTES_FOR_LIST, **criteria)) == expected


def test_sort_by_event_date_keeps_blank_dates_last():
    assert _numbers(sort_quotes(QUOTES_FOR_LIST)) == ["0004", "0002", "0001", "0003"]
    assert _numbers(sort_quotes(QUOTES_FOR_LIST, descending=True)) == ["0001", "0002", "0004", "0003"]


def test_sort_by_total():
    assert _numbers(sort_quotes(QUOTES_FOR_LIST, "total")) == ["0004", "0002", "0003", "0001"]


def test_sort_by_status_workflow_order_unknown_last():
    assert _numbers(sort_quotes(QUOTES_FOR_LIST, "status")) == ["0002", "0001", "0003", "0004"]


def test_sort_by_unknown_field():
    with pytest.raises(ValueError):
        sort_quotes(QUOTES_FOR_LIST, "client")


def test_quote_with_unknown_status_can_be_given_a_valid_one(store):
    # e.g. restored from a backup written by another tool
    store.replace("quotes", [{"id": 1, "number": "PRV-2025-0001", "client_id": 1, "status": "bozza"}])
    assert get_quote(store, 1)["status"] == "bozza"
    assert update_quote(store, 1, {"status": "draft"})["status"] == "draft"
