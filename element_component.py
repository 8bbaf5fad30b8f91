from typing import List, Optional

import pandas as pd
import streamlit as st

from domain.exceptions import EmptyCartError, TransactionFailedError
from domain.models import CartLine, Customer, LowStockProduct
from services.checkout_service import process_transaction
from services.dashboard_service import LOW_STOCK_PREVIEW
from services.pricing import summarize
from utils.formatting import format_currency


def sidebar_header(store_name: str, cashier_name: str, role: str = "cashier"):
    st.sidebar.header(f"🛒 {store_name}")
    st.sidebar.caption("POS System")
    st.sidebar.markdown(f"**{cashier_name}**  \n{role.capitalize()}")


def stats_card(title: str, value, icon: str = ""):
    label = f"{icon} {title}".strip()
    st.metric(label, value, border=True)


def low_stock_card(products: List[LowStockProduct]):
    title = "⚠️ Low Stock Alert"
    if products:
        title += f" ({len(products)} items)"
    st.subheader(title)

    if not products:
        st.caption("All items are well stocked!")
        return

    for product in products[:LOW_STOCK_PREVIEW]:
        col_name, col_qty = st.columns([3, 1])
        col_name.write(product.name)
        col_qty.caption(f"{product.stock_quantity} left")

    if len(products) > LOW_STOCK_PREVIEW:
        st.caption(f"+{len(products) - LOW_STOCK_PREVIEW} more items")


@st.dialog("Confirm Sale")
def checkout_confirmation_dialog(
        cart: List[CartLine],
        customer: Optional[Customer],
        payment_method: str,
        cashier_id: Optional[str],
        state_name: str,
):
    """
    Show the cart and totals, then run the checkout on "Yes".

    On success the result is stored in st.session_state[state_name] and the
    page reruns; the page is responsible for resetting the cart.
    """
    df = pd.DataFrame(
        [
            {
                "Product": line.name,
                "Qty": line.quantity,
                "Unit Price": format_currency(line.price),
                "Total": format_currency(line.total),
            }
            for line in cart
        ]
    )
    st.dataframe(df, hide_index=True, width="stretch")

    pricing = summarize(cart, customer)
    st.write(f"Total: **{format_currency(pricing.total)}** ({payment_method.upper()})")

    col_yes, col_no = st.columns(2)

    with col_yes:
        if st.button("Yes", type="primary", key="confirm_yes"):
            try:
                result = process_transaction(cart, customer, payment_method, cashier_id)
            except EmptyCartError as e:
                st.error(f"Empty Cart: {e}")
                return
            except TransactionFailedError:
                st.error("Transaction Failed: Failed to process transaction. Please try again.")
                return

            st.session_state[state_name] = result
            st.rerun()

    with col_no:
        if st.button("No", key="confirm_no"):
            st.rerun()
