import streamlit as st
import pandas as pd

from decorquote.catalog import (
    create_category, create_service, delete_category, delete_service,
    list_categories, list_services, update_service,
)
from decorquote.formatting import format_currency
from decorquote.records import Unit
from decorquote.ui import page_header

store = page_header("Service catalogue", "🌸")

categories = list_categories(store)
services = list_services(store)

# Sidebar: categories
with st.sidebar:
    st.subheader("Categories")
    with st.form("category_form"):
        cat_name = st.text_input("New category")
        cat_order = st.number_input("Sort order", min_value=0, value=len(categories) + 1, step=1)
        if st.form_submit_button("Add") and cat_name.strip():
            create_category(store, {"name": cat_name.strip(), "sort_order": int(cat_order)})
            st.rerun()
    if categories:
        to_drop = st.selectbox("Delete category", [c["id"] for c in categories],
                               format_func=lambda i: next(c["name"] for c in categories if c["id"] == i))
        if st.button("Delete"):
            delete_category(store, to_drop)
            st.rerun()

# Catalogue per category
for cat in categories:
    rows = [s for s in services if s.get("category_id") == cat["id"]]
    with st.expander(f"{cat['name']} ({len(rows)})"):
        if rows:
            df = pd.DataFrame(rows)[["id", "name", "description", "base_price", "unit", "transport_included"]]
            df["base_price"] = df["base_price"].map(format_currency)
            st.dataframe(df, use_container_width=True)

orphans = [s for s in services if not s["category_name"]]
if orphans:
    with st.expander(f"Without category ({len(orphans)})"):
        st.dataframe(pd.DataFrame(orphans)[["id", "name", "base_price"]], use_container_width=True)

# Add / edit service
st.markdown("### Add or edit service")
by_id = {s["id"]: s for s in services}
sel = st.selectbox("Service", [None] + list(by_id),
                   format_func=lambda i: "(new service)" if i is None else f"#{i} {by_id[i]['name']}")
current = by_id.get(sel, {})

if not categories:
    st.info("Create a category first.")
    st.stop()

with st.form("service_form"):
    cat_ids = [c["id"] for c in categories]
    c1, c2 = st.columns(2)
    with c1:
        category_id = st.selectbox(
            "Category", cat_ids,
            index=cat_ids.index(current["category_id"]) if current.get("category_id") in cat_ids else 0,
            format_func=lambda i: next(c["name"] for c in categories if c["id"] == i),
        )
        name = st.text_input("Name", value=current.get("name", ""))
    with c2:
        units = [u.value for u in Unit]
        unit = st.selectbox("Unit", units, index=units.index(current.get("unit", Unit.PIECE.value)))
        base_price = st.number_input("Base price (€)", min_value=0.0, step=5.0,
                                     value=float(current.get("base_price", 0.0)))
    description = st.text_area("Description", value=current.get("description", ""))
    transport = st.checkbox("Transport included", value=bool(current.get("transport_included", False)))
    saved = st.form_submit_button("Save")

if saved and name.strip():
    fields = {"category_id": category_id, "name": name.strip(), "description": description,
              "base_price": base_price, "unit": unit, "transport_included": transport}
    if sel is None:
        create_service(store, {**fields, "sort_order": len(services) + 1})
    else:
        update_service(store, sel, fields)
    st.success("Service saved.")
    st.rerun()

if sel is not None and st.button("🗑️ Delete service"):
    delete_service(store, sel)
    st.rerun()
