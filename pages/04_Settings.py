import streamlit as st
from datetime import date

from decorquote.company import get_settings, update_settings
from decorquote.errors import PaymentSplitError
from decorquote.records import PdfTemplate, TaxRegime
from decorquote.transfer import export_all_data, import_all_data
from decorquote.ui import page_header

store = page_header("Settings", "⚙️")
s = get_settings(store)

regimes = [r.value for r in TaxRegime]
templates = [t.value for t in PdfTemplate]

with st.form("settings_form"):
    st.subheader("Company")
    c1, c2 = st.columns(2)
    with c1:
        company_name = st.text_input("Company name", value=s.company_name)
        address = st.text_input("Address", value=s.address)
        vat_number = st.text_input("VAT number", value=s.vat_number)
    with c2:
        phone = st.text_input("Phone", value=s.phone)
        email = st.text_input("Email", value=s.email)

    st.subheader("Tax & documents")
    t1, t2, t3 = st.columns(3)
    with t1:
        tax_regime = st.selectbox("Tax regime", regimes, index=regimes.index(s.tax_regime.value))
    with t2:
        vat_rate = st.number_input("VAT rate (%)", min_value=0.0, max_value=100.0, value=float(s.vat_rate))
    with t3:
        template = st.selectbox("PDF template", templates, index=templates.index(s.default_template.value))

    st.subheader("Default payment split")
    st.caption("The three percentages must add up to 100%.")
    p1, p2, p3 = st.columns(3)
    with p1:
        deposit = st.number_input("Deposit %", min_value=0.0, max_value=100.0, value=float(s.default_payment_deposit))
    with p2:
        second = st.number_input("Second instalment %", min_value=0.0, max_value=100.0, value=float(s.default_payment_second))
    with p3:
        balance = st.number_input("Balance %", min_value=0.0, max_value=100.0, value=float(s.default_payment_balance))

    st.subheader("Quotes")
    q1, q2 = st.columns(2)
    with q1:
        prefix = st.text_input("Number prefix", value=s.quote_prefix)
    with q2:
        start = st.number_input("Start number", min_value=1, step=1, value=int(s.quote_start_number))
    notes = st.text_area("Default notes", value=s.default_notes)
    conditions = st.text_area("Default conditions", value=s.default_conditions)

    submitted = st.form_submit_button("Save settings")

if submitted:
    try:
        update_settings(store, {
            "company_name": company_name, "address": address, "vat_number": vat_number,
            "phone": phone, "email": email, "tax_regime": tax_regime, "vat_rate": vat_rate,
            "default_template": template, "default_payment_deposit": deposit,
            "default_payment_second": second, "default_payment_balance": balance,
            "quote_prefix": prefix.strip() or "PRV", "quote_start_number": int(start),
            "default_notes": notes, "default_conditions": conditions,
        })
    except PaymentSplitError as e:
        st.error(str(e))
    else:
        st.success("Settings saved.")

# ----------------- BACKUP -----------------
st.markdown("---")
st.subheader("Backup")
st.download_button("⬇️ Export all data (JSON)", export_all_data(store).encode("utf-8"),
                   file_name=f"decorquote_backup_{date.today().isoformat()}.json", mime="application/json")

up = st.file_uploader("Restore from backup", type=["json"])
if up is not None and st.button("Import (overwrites current data)"):
    if import_all_data(store, up.read()):
        st.success("Backup imported.")
    else:
        st.error("The file is not a valid backup.")
