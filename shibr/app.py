import pandas as pd
import streamlit as st

# Configuration
from shibr.config import get_config

# DataAccess interface + service
from shibr.data.models import ClearanceFilters
from shibr.data.util import get_data_access
from shibr.finance.errors import InventoryMismatchError, SettlementError
from shibr.finance.formatters import format_currency, format_rate
from shibr.finance.tax import tax_rate_percentage
from shibr.services.clearance import ClearanceService

st.set_page_config(page_title="Shibr: Clearance settlements", layout="wide")

# -----------------------------------------------------------------------------
# Backend selection (CSV for now), shared by every session in this process
# -----------------------------------------------------------------------------
config = get_config()
da = get_data_access("csv")
service = ClearanceService(da, config)

# -----------------------------------------------------------------------------
# Sidebar filters (all choices sourced via the DataAccess layer)
# -----------------------------------------------------------------------------
st.sidebar.header("Filters")

language = st.sidebar.radio("Currency format", ["en", "ar"], horizontal=True)

status_options = ["(All)"] + da.list_clearance_statuses().values
status_sel = st.sidebar.selectbox("Status", status_options)

store_options = ["(All)"] + da.list_store_names().values
store_sel = st.sidebar.selectbox("Store", store_options)

filters = ClearanceFilters(
    status=None if status_sel == "(All)" else status_sel,
    store_name=None if store_sel == "(All)" else store_sel,
)
clearances = da.list_clearances(filters)

if not clearances:
    st.info("No clearances match the current filters.")
    st.stop()

labels = {f"{c.clearance_id} · {c.brand_name} @ {c.store_name}": c.clearance_id for c in clearances}
clearance_id = labels[st.sidebar.selectbox("Clearance", list(labels))]

# -----------------------------------------------------------------------------
# Settlement (one settings snapshot per page run)
# -----------------------------------------------------------------------------
session = service.open_session(clearance_id)
clearance = session.clearance
record = da.get_settlement_record(clearance_id)
if record:
    settlement = record.settlement
else:
    try:
        settlement = service.calculate(session)
    except InventoryMismatchError as e:
        st.error(
            "Settlement blocked: counted quantities do not add up (initial ≠ sold + remaining) for "
            + ", ".join(f"{m.product_id} ({m.difference:+d})" for m in e.mismatches)
        )
        st.stop()
    except SettlementError as e:
        st.error(f"Settlement cannot be calculated for clearance {clearance_id}: {e}")
        st.stop()

st.markdown(f"## Clearance {clearance.clearance_id}")
c1, c2, c3 = st.columns(3)
c1.metric("Status", clearance.status.replace("_", " "))
c2.metric("Store", clearance.store_name)
c3.metric("Brand", clearance.brand_name)
if clearance.start_date and clearance.end_date:
    st.caption(f"Rental period {clearance.start_date:%Y-%m-%d} to {clearance.end_date:%Y-%m-%d}")

if record:
    st.success(f"Settlement approved by {record.approved_by} on {record.approved_at:%Y-%m-%d %H:%M}")
elif session.settings.is_default:
    st.caption("No platform settings stored yet; default commission rates apply.")

# -----------------------------------------------------------------------------
# Inventory reconciliation table
# -----------------------------------------------------------------------------
st.markdown("### Inventory reconciliation")
if settlement.is_empty:
    st.info("No inventory has been counted for this clearance yet, so there is no settlement to show.")
    st.stop()

lines_df = pd.DataFrame([line.model_dump() for line in settlement.breakdown])
show_cols = [
    "product_name", "product_name_ar", "initial_quantity", "sold_quantity",
    "remaining_quantity", "unit_price", "total_sales_value", "total_sales_with_tax",
]
st.dataframe(lines_df[show_cols], use_container_width=True)

if settlement.warnings:
    st.warning(
        "Counted quantities do not add up (initial ≠ sold + remaining) for: "
        + ", ".join(f"{w.product_id} ({w.difference:+d})" for w in settlement.warnings)
    )

# -----------------------------------------------------------------------------
# Settlement summary
# -----------------------------------------------------------------------------
st.markdown("### Settlement summary")
s1, s2, s3 = st.columns(3)
s1.metric("Total sales", format_currency(settlement.total_sales, language))
s2.metric(f"VAT ({tax_rate_percentage()})", format_currency(settlement.vat_amount, language))
s3.metric("Total incl. VAT", format_currency(settlement.total_sales_with_tax, language))

k1, k2, k3 = st.columns(3)
k1.metric(
    f"Platform commission ({format_rate(settlement.platform_commission_rate)})",
    format_currency(settlement.platform_commission_amount, language),
)
k2.metric(
    f"Store payout ({format_rate(settlement.store_commission_rate)})",
    format_currency(settlement.store_payout_amount, language),
)
k3.metric("Brand total", format_currency(settlement.brand_total_amount, language))

r1, r2, r3 = st.columns(3)
r1.metric("Units sold", f"{settlement.total_sold_units:,}")
r2.metric("Units returned", f"{settlement.total_returned_units:,}")
r3.metric("Returned inventory value", format_currency(settlement.return_inventory_value, language))

# -----------------------------------------------------------------------------
# Footer
# -----------------------------------------------------------------------------
with st.expander("Data source"):
    st.write(
        f"Clearances are read via the **DataAccess** interface (CSV-backed for local dev) "
        f"from `{config.data_dir}/`. This page is read-only; settlements are approved "
        "through `ClearanceService.approve_settlement`."
    )
