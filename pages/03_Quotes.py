import streamlit as st
from datetime import date, timedelta
import pandas as pd

from decorquote import pricing
from decorquote.catalog import list_services
from decorquote.clients import list_clients
from decorquote.company import get_settings
from decorquote.formatting import format_currency, format_date, parse_day
from decorquote.pdf import render_quote_pdf
from decorquote.quotes import (
    SORT_FIELDS, delete_quote, duplicate_quote, filter_quotes, get_payment_plans, get_quote,
    get_quote_items, get_wedding_details, list_quotes, next_quote_number, save_quote, sort_quotes,
    update_quote,
)
from decorquote.records import DiscountType, EventType, QuoteStatus
from decorquote.transfer import quotes_to_csv
from decorquote.ui import page_header
from decorquote.wedding import FLOWERS, GREENERY, WEDDING_AREAS, WEDDING_PALETTES, WEDDING_STYLES, WeddingSelections, decode_selections

store = page_header("Quotes", "💼")
settings = get_settings(store)

# ----------------- STATE -----------------
if "editing_quote_id" not in st.session_state:
    st.session_state.editing_quote_id = None
if "quote_items" not in st.session_state:
    st.session_state.quote_items = []  # list of dict rows as stored on QuoteItem


def _load(quote_id):
    st.session_state.editing_quote_id = quote_id
    st.session_state.quote_items = get_quote_items(store, quote_id) if quote_id else []


# ----------------- LIST -----------------
all_quotes = list_quotes(store)
st.subheader("All quotes")

# Filters
with st.expander("Search and filters", expanded=False):
    f1, f2, f3 = st.columns([3, 2, 2])
    with f1:
        search = st.text_input("Search (client or number)")
    with f2:
        status_filter = st.selectbox("Status", ["(all)"] + [x.value for x in QuoteStatus])
    with f3:
        type_filter = st.selectbox("Event type", ["(all)"] + [x.value for x in EventType])
    r1, r2, r3, r4 = st.columns(4)
    with r1:
        date_from = st.date_input("Event from", value=None)
    with r2:
        date_to = st.date_input("Event to", value=None)
    with r3:
        amount_min = st.number_input("Total from", min_value=0.0, value=None)
    with r4:
        amount_max = st.number_input("Total to", min_value=0.0, value=None)
    o1, o2 = st.columns(2)
    with o1:
        sort_field = st.selectbox("Sort by", SORT_FIELDS, format_func=lambda f: f.replace("_", " ").capitalize())
    with o2:
        descending = st.checkbox("Descending")

quotes = sort_quotes(filter_quotes(
    all_quotes,
    search=search,
    status=None if status_filter == "(all)" else status_filter,
    event_type=None if type_filter == "(all)" else type_filter,
    date_from=date_from.isoformat() if date_from else None,
    date_to=date_to.isoformat() if date_to else None,
    amount_min=amount_min,
    amount_max=amount_max,
), sort_field, descending)

if all_quotes and not quotes:
    st.info("No quotes match the filters.")
if quotes:
    df = pd.DataFrame([{
        "id": q["id"], "Number": q["number"], "Client": q["client_name"],
        "Event date": format_date(q.get("event_date")), "Total": format_currency(q.get("total")),
        "Status": q.get("status"),
    } for q in quotes])
    st.dataframe(df, use_container_width=True, hide_index=True)
    st.download_button("Export quotes to CSV", quotes_to_csv(quotes).encode("utf-8"),
                       file_name=f"quotes_{date.today().isoformat()}.csv", mime="text/csv")

    by_id = {q["id"]: q for q in quotes}
    c1, c2, c3, c4 = st.columns([3, 1, 1, 1])
    with c1:
        picked = st.selectbox("Quote", list(by_id), format_func=lambda i: f"{by_id[i]['number']} · {by_id[i]['client_name']}")
    with c2:
        if st.button("✏️ Edit"):
            _load(picked)
    with c3:
        if st.button("📄 Duplicate"):
            dup = duplicate_quote(store, picked, settings)
            st.success(f"Created {dup['number']}")
            st.rerun()
    with c4:
        if st.button("🗑️ Delete"):
            delete_quote(store, picked)
            if st.session_state.editing_quote_id == picked:
                _load(None)
            st.rerun()

    statuses = [s.value for s in QuoteStatus]
    s1, s2 = st.columns([3, 1])
    with s1:
        current_status = by_id[picked].get("status")
        new_status = st.selectbox("Set status", statuses,
                                  index=statuses.index(current_status) if current_status in statuses else 0)
    with s2:
        if st.button("Apply status"):
            changes = {"status": new_status}
            if new_status == QuoteStatus.CONFIRMED.value:
                changes["confirmed_date"] = date.today().isoformat()
            update_quote(store, picked, changes)
            st.rerun()

    picked_quote = get_quote(store, picked)
    pdf_bytes = render_quote_pdf(
        picked_quote, get_quote_items(store, picked), get_wedding_details(store, picked),
        get_payment_plans(store, picked), settings,
    )
    st.download_button("⬇️ Download PDF", pdf_bytes, file_name=f"{picked_quote['number']}.pdf",
                       mime="application/pdf")
elif not all_quotes:
    st.info("No quotes yet.")

st.markdown("---")

# ----------------- EDITOR -----------------
editing_id = st.session_state.editing_quote_id
existing = get_quote(store, editing_id) if editing_id else None
st.subheader(f"Edit {existing['number']}" if existing else "New quote")
if existing and st.button("Start a new quote instead"):
    _load(None)
    st.rerun()

clients = list_clients(store)
if not clients:
    st.info("Add a client first.")
    st.stop()

# Add catalogue services to the item list
services = list_services(store)
svc_by_id = {s["id"]: s for s in services}
with st.form("add_item"):
    a1, a2, a3 = st.columns([4, 1, 1])
    with a1:
        svc_id = st.selectbox("Service", [None] + list(svc_by_id),
                              format_func=lambda i: "(custom row)" if i is None else
                              f"{svc_by_id[i]['category_name']} • {svc_by_id[i]['name']} ({format_currency(svc_by_id[i]['base_price'])})")
        custom = st.text_input("Custom description (for custom rows)")
    with a2:
        qty = st.number_input("Qty", min_value=1, step=1, value=1)
    with a3:
        price = st.number_input("Unit price (override)", min_value=0.0, value=0.0)
    gift = st.checkbox("Gift")
    if st.form_submit_button("Add row"):
        svc = svc_by_id.get(svc_id)
        unit_price = price or (svc["base_price"] if svc else 0.0)
        st.session_state.quote_items.append({
            "service_id": svc_id,
            "section": svc["category_name"] if svc else "",
            "description": svc["name"] if svc else custom,
            "quantity": int(qty),
            "unit_price": float(unit_price),
            "amount": pricing.item_amount(qty, unit_price),
            "is_gift": gift,
        })

items = st.session_state.quote_items
if items:
    st.dataframe(pd.DataFrame(items)[["section", "description", "quantity", "unit_price", "amount", "is_gift"]],
                 use_container_width=True)
    drop = st.multiselect("Remove rows (by index)", options=list(range(len(items))))
    if drop and st.button("Remove"):
        st.session_state.quote_items = [row for i, row in enumerate(items) if i not in drop]
        st.rerun()

base = existing or {}
client_ids = [c["id"] for c in clients]
client_names = {c["id"]: c["name"] for c in clients}
event_types = [e.value for e in EventType]
discount_opts = ["none", DiscountType.PERCENTAGE.value, DiscountType.FIXED.value]

with st.form("quote_form"):
    g1, g2 = st.columns(2)
    with g1:
        client_id = st.selectbox("Client", client_ids, format_func=client_names.get,
                                 index=client_ids.index(base["client_id"]) if base.get("client_id") in client_ids else 0)
        event_type = st.selectbox("Event type", event_types,
                                  index=event_types.index(base.get("event_type", EventType.WEDDING.value)))
        event_date = st.date_input("Event date", value=parse_day(base.get("event_date")) or date.today() + timedelta(days=90))
        location = st.text_input("Location", value=base.get("event_location", ""))
    with g2:
        guests = st.number_input("Guests", min_value=0, step=1, value=int(base.get("guest_count", 0)))
        tables = st.number_input("Tables", min_value=0, step=1, value=int(base.get("table_count", 0)))
        expiry = st.date_input("Valid until", value=parse_day(base.get("expiry_date")) or date.today() + timedelta(days=30))
        internal = st.text_input("Internal notes", value=base.get("internal_notes", ""))

    d1, d2, d3 = st.columns(3)
    with d1:
        disc_type = st.selectbox("Discount", discount_opts,
                                 index=discount_opts.index(base.get("discount_type") or "none"))
    with d2:
        disc_value = st.number_input("Discount value", min_value=0.0, value=float(base.get("discount_value", 0.0)))
    with d3:
        disc_note = st.text_input("Discount note", value=base.get("discount_note", ""))

    client_notes = st.text_area("Notes for the client", value=base.get("client_notes", settings.default_notes))
    conditions = st.text_area("Conditions", value=base.get("conditions", settings.default_conditions))

    # Payment plan: percentages only, amounts follow the total
    plans = get_payment_plans(store, editing_id) if editing_id else []
    plans = plans or pricing.default_payment_plans(settings)
    st.markdown("**Payment plan**")
    edited_plans = []
    for i, p in enumerate(plans):
        p1, p2, p3 = st.columns([3, 1, 2])
        with p1:
            desc = st.text_input(f"Instalment {i + 1}", value=p["description"], key=f"plan_desc_{i}")
        with p2:
            pct = st.number_input("%", min_value=0.0, max_value=100.0, value=float(p["percentage"]), key=f"plan_pct_{i}")
        with p3:
            due = st.text_input("Due date (YYYY-MM-DD)", value=p.get("due_date", ""), key=f"plan_due_{i}")
        edited_plans.append({"description": desc, "percentage": pct, "due_date": due})

    wedding_fields = None
    if event_type == EventType.WEDDING.value:
        st.markdown("**Wedding details**")
        wd = (get_wedding_details(store, editing_id) if editing_id else None) or {}
        sel = decode_selections(wd)
        w1, w2 = st.columns(2)
        with w1:
            bride = st.text_input("Bride", value=wd.get("bride_name", ""))
            church = st.text_input("Church", value=wd.get("church_name", ""))
            palette_names = [p["name"] for p in WEDDING_PALETTES]
            palette = st.selectbox("Palette", [""] + palette_names,
                                   index=([""] + palette_names).index(wd.get("palette", "")) if wd.get("palette", "") in palette_names else 0)
        with w2:
            groom = st.text_input("Groom", value=wd.get("groom_name", ""))
            reception = st.text_input("Reception venue", value=wd.get("reception_name", ""))
            style_ids = [s["id"] for s in WEDDING_STYLES]
            style = st.selectbox("Style", [""] + style_ids,
                                 index=([""] + style_ids).index(wd.get("style", "")) if wd.get("style", "") in style_ids else 0)
        flowers = st.multiselect("Flowers", [f["id"] for f in FLOWERS], default=[f for f in sel.flowers if any(x["id"] == f for x in FLOWERS)])
        greenery = st.multiselect("Greenery", [g["id"] for g in GREENERY], default=[g for g in sel.greenery if any(x["id"] == g for x in GREENERY)])
        areas = st.multiselect("Areas", [a["id"] for a in WEDDING_AREAS], default=[a for a in sel.areas if any(x["id"] == a for x in WEDDING_AREAS)])
        coordinator = st.checkbox("Wedding coordinator", value=bool(wd.get("has_coordinator", False)))
        colors = next((p["colors"] for p in WEDDING_PALETTES if p["name"] == palette), sel.palette_colors)
        wedding_fields = {
            "bride_name": bride, "groom_name": groom, "church_name": church,
            "reception_name": reception, "has_coordinator": coordinator,
            "palette": palette, "style": style,
            **WeddingSelections(palette_colors=colors, flowers=flowers, greenery=greenery, areas=areas).encoded(),
        }

    save = st.form_submit_button("💾 Save quote")

totals = pricing.compute_totals(items, None if disc_type == "none" else disc_type, disc_value, settings)
m1, m2, m3, m4 = st.columns(4)
m1.metric("Subtotal", format_currency(totals["subtotal"]))
m2.metric("Discount", format_currency(totals["discount_amount"]))
m3.metric("VAT", format_currency(totals["tax_amount"]))
m4.metric("Total", format_currency(totals["total"]))

if save:
    fields = {
        "client_id": client_id,
        "event_type": event_type,
        "event_date": event_date.isoformat(),
        "event_location": location,
        "guest_count": int(guests),
        "table_count": int(tables),
        "expiry_date": expiry.isoformat(),
        "internal_notes": internal,
        "client_notes": client_notes,
        "conditions": conditions,
        "discount_type": None if disc_type == "none" else disc_type,
        "discount_value": disc_value if disc_type != "none" else 0.0,
        "discount_note": disc_note,
    }
    if existing is None:
        fields["number"] = next_quote_number(store, settings)
    quote, warning = save_quote(store, fields, items, edited_plans, wedding_fields,
                                quote_id=editing_id, settings=settings)
    st.session_state.editing_quote_id = quote["id"]
    st.session_state.quote_items = get_quote_items(store, quote["id"])
    st.success(f"Saved {quote['number']} · total {format_currency(quote['total'])}")
    if warning:
        st.warning(warning)
