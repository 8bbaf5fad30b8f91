from datetime import datetime

import streamlit as st

from config import configure_logging, load_settings
from element_component import low_stock_card, sidebar_header, stats_card
from services.dashboard_service import fetch_dashboard_data
from utils.formatting import format_clock, format_currency, format_long_date, greeting

settings = load_settings()
configure_logging(settings.log_level)

st.set_page_config(
    page_title=f"{settings.store_name} Dashboard",
    page_icon="📊",
    layout="wide",
)

sidebar_header(settings.store_name, settings.cashier_name)

now = datetime.now()

col_title, col_clock = st.columns([3, 1])
with col_title:
    st.title(f"{greeting(now)}, {settings.cashier_name}")
    st.caption(f"Welcome to your {settings.store_name} POS dashboard")
with col_clock:
    st.caption(f"📅 {format_long_date(now)}")
    st.markdown(f"**🕒 {format_clock(now)}**")

# -----------------------------------------------------------------------------
# Quick actions
# -----------------------------------------------------------------------------
st.page_link("pages/1_Sales.py", label="New Sale", icon="🛒")

# -----------------------------------------------------------------------------
# Stats
# -----------------------------------------------------------------------------
with st.spinner("Loading..."):
    stats = fetch_dashboard_data()

col_1, col_2, col_3, col_4 = st.columns(4)
with col_1:
    stats_card("Today's Sales", format_currency(stats.today_sales), "💵")
with col_2:
    stats_card("Total Revenue", format_currency(stats.total_revenue), "📈")
with col_3:
    stats_card("Transactions", stats.total_transactions, "🛒")
with col_4:
    stats_card("Customers", stats.total_customers, "👥")

st.divider()

col_low, col_summary = st.columns(2)

with col_low:
    low_stock_card(stats.low_stock_products)

with col_summary:
    st.subheader("📈 Performance Summary")
    st.caption("Top Selling Product")
    st.markdown(f"**{stats.top_selling_product}**")
    st.caption("Average Sale")
    st.markdown(f"**{format_currency(stats.average_sale)}**")
    st.caption("System Status")
    st.success("Online & Active")
