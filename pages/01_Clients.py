import streamlit as st
import pandas as pd

from decorquote.clients import create_client, delete_client, list_clients, update_client
from decorquote.quotes import quotes_for_client
from decorquote.records import ClientStatus, EventType
from decorquote.ui import page_header

store = page_header("Clients", "👰")

clients = list_clients(store)

# Filters
c1, c2 = st.columns([3, 2])
with c1:
    s = st.text_input("Search (name / email / phone contains)")
with c2:
    status = st.selectbox("Status", ["(all)"] + [x.value for x in ClientStatus])

rows = clients
if s:
    needle = s.lower()
    rows = [c for c in rows if any(needle in str(c.get(k, "")).lower() for k in ("name", "email", "phone"))]
if status != "(all)":
    rows = [c for c in rows if c.get("status") == status]

if rows:
    st.dataframe(pd.DataFrame(rows).drop(columns=["notes"], errors="ignore"), use_container_width=True)
else:
    st.info("No clients yet.")

# Add / edit
st.markdown("### Add or edit client")
options = [None] + [c["id"] for c in clients]
by_id = {c["id"]: c for c in clients}
sel = st.selectbox("Client", options,
                   format_func=lambda i: "(new client)" if i is None else f"#{i} {by_id[i]['name']}")
current = by_id.get(sel, {})

with st.form("client_form"):
    name = st.text_input("Name", value=current.get("name", ""))
    f1, f2, f3 = st.columns(3)
    with f1:
        email = st.text_input("Email", value=current.get("email", ""))
    with f2:
        phone = st.text_input("Phone", value=current.get("phone", ""))
    with f3:
        address = st.text_input("Address", value=current.get("address", ""))
    event_types = [x.value for x in EventType]
    statuses = [x.value for x in ClientStatus]
    g1, g2 = st.columns(2)
    with g1:
        event_type = st.selectbox("Event type", event_types,
                                  index=event_types.index(current.get("event_type", EventType.WEDDING.value)))
    with g2:
        client_status = st.selectbox("Status", statuses,
                                     index=statuses.index(current.get("status", ClientStatus.PROSPECT.value)))
    notes = st.text_area("Notes", value=current.get("notes", ""))
    saved = st.form_submit_button("Save")

if saved:
    if not name.strip():
        st.error("Name is required.")
    else:
        fields = {"name": name.strip(), "email": email, "phone": phone, "address": address,
                  "event_type": event_type, "status": client_status, "notes": notes}
        if sel is None:
            create_client(store, fields)
        else:
            update_client(store, sel, fields)
        st.success("Client saved.")
        st.rerun()

if sel is not None:
    linked = quotes_for_client(store, sel)
    st.caption(f"{len(linked)} quote(s) for this client. Deleting the client keeps its quotes.")
    if st.button("🗑️ Delete client"):
        delete_client(store, sel)
        st.rerun()
