import streamlit as st
import pandas as pd

from decorquote.formatting import format_currency, format_date
from decorquote.stats import compute_stats
from decorquote.ui import page_header

# ----------------- UI CONFIG -----------------
store = page_header("Dashboard", "💐")

stats = compute_stats(store)

# ----------------- KPIs -----------------
c1, c2, c3 = st.columns(3)
c1.metric("Quotes this month", stats.monthly_quotes)
c2.metric("Value this month", format_currency(stats.monthly_value))
c3.metric("Conversion rate", f"{stats.conversion_rate:.1f}%")

# ----------------- REVENUE -----------------
st.subheader("Revenue by event month")
revenue = pd.DataFrame(stats.monthly_revenue, columns=["month", "revenue"])
revenue["month"] = pd.Categorical(revenue["month"], categories=revenue["month"], ordered=True)
st.bar_chart(revenue.set_index("month"))


def _quote_table(rows: list, date_field: str) -> pd.DataFrame:
    return pd.DataFrame([{
        "Number": q["number"],
        "Client": q["client_name"],
        "Date": format_date(q.get(date_field)),
        "Total": format_currency(q.get("total")),
        "Status": q.get("status", ""),
    } for q in rows])


left, right = st.columns(2)
with left:
    st.subheader("⏳ Expiring within 30 days")
    if stats.expiring_quotes:
        st.dataframe(_quote_table(stats.expiring_quotes, "expiry_date"), use_container_width=True)
    else:
        st.info("No open quotes are about to expire.")
with right:
    st.subheader("📅 Upcoming events")
    if stats.upcoming_events:
        st.dataframe(_quote_table(stats.upcoming_events, "event_date"), use_container_width=True)
    else:
        st.info("No confirmed events ahead.")

st.markdown("---")
st.caption("Clients, catalogue, quotes and settings are in the sidebar pages.")
