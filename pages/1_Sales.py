import streamlit as st

from config import configure_logging, load_settings
from data_integrator import fetch_active_products, fetch_customers
from domain.exceptions import InsufficientStockError, ProductNotFoundError
from domain.models import PAYMENT_METHODS
from element_component import checkout_confirmation_dialog, sidebar_header
from services.cart_service import (
    add_by_barcode,
    add_to_cart,
    cart_item_count,
    remove_from_cart,
    update_quantity,
)
from services.pricing import summarize
from utils.formatting import format_currency

settings = load_settings()
configure_logging(settings.log_level)

st.set_page_config(page_title="Point of Sale", page_icon="🛒", layout="wide")
sidebar_header(settings.store_name, settings.cashier_name)

PAYMENT_LABELS = {"cash": "💵 Cash", "card": "💳 Card", "mpesa": "📱 M-Pesa"}

# -------------------------------------------------------------------
# Session state defaults
# -------------------------------------------------------------------
st.session_state.setdefault("cart", [])
st.session_state.setdefault("selected_payment", "cash")

# A finished sale from the confirmation dialog: reset before widgets are built.
# Dropping a widget key puts the widget back on its default (no customer, cash).
checkout_result = st.session_state.pop("checkout_result", None)
if checkout_result is not None:
    st.session_state["cart"] = []
    st.session_state["selected_payment"] = "cash"
    st.session_state.pop("customer_id", None)
    st.session_state.pop("payment_method", None)
    st.success(f"Transaction {checkout_result.transaction_number} completed successfully")

# -------------------------------------------------------------------
# Data (refetched on every rerun)
# -------------------------------------------------------------------
ok_products, msg_products, products = fetch_active_products()
ok_customers, msg_customers, customers = fetch_customers(settings.customer_list_limit)
customers_by_id = {c.id: c for c in customers}


def _flash(kind: str, message: str):
    st.session_state["flash"] = (kind, message)


def _on_add(product):
    try:
        st.session_state["cart"] = add_to_cart(st.session_state["cart"], product)
    except InsufficientStockError as e:
        _flash("error", f"Insufficient Stock: {e}")


def _on_quantity(product_id: str, new_quantity: int):
    try:
        st.session_state["cart"] = update_quantity(st.session_state["cart"], products, product_id, new_quantity)
    except InsufficientStockError as e:
        _flash("error", f"Insufficient Stock: {e}")


def _on_remove(product_id: str):
    st.session_state["cart"] = remove_from_cart(st.session_state["cart"], product_id)


def _on_payment():
    st.session_state["selected_payment"] = st.session_state["payment_method"]


def _on_barcode():
    code = st.session_state.get("barcode_input", "")
    try:
        cart, product = add_by_barcode(st.session_state["cart"], products, code)
    except ProductNotFoundError as e:
        _flash("error", f"Product Not Found: {e}")
        return
    except InsufficientStockError as e:
        _flash("error", f"Insufficient Stock: {e}")
        return

    if product is not None:
        st.session_state["cart"] = cart
        st.session_state["barcode_input"] = ""
        _flash("success", f"Product Added: {product.name} added to cart")


flash = st.session_state.pop("flash", None)
if flash:
    kind, message = flash
    if kind == "error":
        st.error(message)
    else:
        st.toast(message)

col_left, col_right = st.columns([2, 1])

# -------------------------------------------------------------------
# Left panel: scanner + products
# -------------------------------------------------------------------
with col_left:
    col_title, col_badge = st.columns([3, 1])
    col_title.title("Point of Sale")
    col_badge.caption(f"Cashier: **{settings.cashier_name}**")

    st.subheader("Barcode Scanner")
    col_code, col_scan = st.columns([4, 1])
    with col_code:
        st.text_input(
            "Barcode",
            placeholder="Scan or enter barcode",
            key="barcode_input",
            on_change=_on_barcode,
            label_visibility="collapsed",
        )
    with col_scan:
        st.button("Scan", on_click=_on_barcode, width="stretch")

    st.subheader("Products")
    if not ok_products:
        st.error("Could not load products")
    elif not products:
        st.info("No products in stock.")
    else:
        grid = st.columns(3)
        for i, product in enumerate(products):
            with grid[i % 3].container(border=True):
                st.markdown(f"**{product.name}**")
                st.write(f"{format_currency(product.price)} · Stock: {product.stock_quantity}")
                st.button(
                    "➕ Add",
                    key=f"add_{product.id}",
                    on_click=_on_add,
                    args=(product,),
                    width="stretch",
                )

# -------------------------------------------------------------------
# Right panel: customer, cart, totals, payment
# -------------------------------------------------------------------
with col_right:
    st.subheader("👥 Customer")
    if not ok_customers:
        st.error("Could not load customers")

    st.selectbox(
        "Customer",
        options=list(customers_by_id.keys()),
        index=None,
        placeholder="Select customer (optional)",
        format_func=lambda cid: (
            f"{customers_by_id[cid].name} ({customers_by_id[cid].phone})"
            + (" 🎓 Student" if customers_by_id[cid].is_student else "")
        ),
        key="customer_id",
        label_visibility="collapsed",
    )
    selected_customer = customers_by_id.get(st.session_state.get("customer_id"))

    if selected_customer:
        st.caption(f"Loyalty Points: **{selected_customer.loyalty_points}**")
        if selected_customer.is_student:
            st.caption(":green[10% Student Discount Applied]")

    cart = st.session_state["cart"]
    st.subheader(f"🛒 Cart ({cart_item_count(cart)} items)")

    if not cart:
        st.caption("Cart is empty")
    else:
        for line in cart:
            with st.container(border=True):
                st.markdown(f"**{line.name}**")
                st.caption(f"{format_currency(line.price)} each")
                col_minus, col_qty, col_plus, col_del = st.columns(4)
                col_minus.button("➖", key=f"dec_{line.product_id}", on_click=_on_quantity,
                                 args=(line.product_id, line.quantity - 1))
                col_qty.write(str(line.quantity))
                col_plus.button("➕", key=f"inc_{line.product_id}", on_click=_on_quantity,
                                args=(line.product_id, line.quantity + 1))
                col_del.button("🗑️", key=f"del_{line.product_id}", on_click=_on_remove,
                               args=(line.product_id,))

        pricing = summarize(cart, selected_customer)

        st.divider()
        st.write(f"Subtotal: {format_currency(pricing.subtotal)}")
        st.write(f"Tax (16%): {format_currency(pricing.tax)}")
        if pricing.discount > 0:
            st.write(f":green[Discount: -{format_currency(pricing.discount)}]")
        st.markdown(f"### Total: {format_currency(pricing.total)}")
        if selected_customer:
            st.caption(f"Loyalty points to earn: {pricing.points_earned}")

        st.divider()
        # The radio only exists while the cart has lines, so the choice lives
        # under its own key and survives the cart being emptied.
        payment_method = st.radio(
            "Payment Method",
            options=PAYMENT_METHODS,
            index=PAYMENT_METHODS.index(st.session_state["selected_payment"]),
            format_func=lambda m: PAYMENT_LABELS[m],
            horizontal=True,
            key="payment_method",
            on_change=_on_payment,
        )

        if st.button("🧾 Complete Sale", type="primary", width="stretch"):
            checkout_confirmation_dialog(
                cart,
                selected_customer,
                payment_method,
                settings.cashier_id,
                "checkout_result",
            )
