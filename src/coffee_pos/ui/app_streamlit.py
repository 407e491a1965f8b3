"""
Streamlit UI for the coffee shop register.

Screens:
- Customer list: pick a customer (or walk-in) to start an order
- Order: drink buttons, customizations, quantity +/-, running totals
- Receipt: finalized snapshot of the completed order

The UI only translates clicks into Order calls and renders snapshots;
all pricing lives in the engine.
"""
import streamlit as st
import pandas as pd
import sys
from pathlib import Path
from datetime import datetime

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from coffee_pos.engine import Catalog, Order, PricingPolicy
from coffee_pos.config.settings import get_settings, setup_logging
from coffee_pos.services.customer_service import CustomerService


st.set_page_config(
    page_title="Coffee POS",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_catalog():
    """Get cached catalog instance."""
    return Catalog.from_settings(get_settings())


@st.cache_resource
def get_policy():
    return PricingPolicy.from_settings(get_settings())


@st.cache_resource
def get_customer_service():
    return CustomerService(get_settings().customers_csv)


try:
    settings = get_settings()
    setup_logging(settings)
    catalog = get_catalog()
    policy = get_policy()
    customer_service = get_customer_service()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()


def go_to(screen: str):
    st.session_state.screen = screen
    st.rerun()


def start_order(customer: str = None):
    st.session_state.order = Order(policy, customer=customer)
    st.session_state.receipt = None
    go_to("order")


def show_result(result):
    """Surface a rejected operation to the cashier."""
    if not result.ok:
        st.session_state.flash = result.message


def option_labels_for(product) -> dict:
    return {
        o.option_id: f"{o.name} ({'+' if o.price_delta >= 0 else '-'}${abs(o.price_delta)})"
        for o in product.options
    }


# ============================================================================
# SCREEN: CUSTOMER LIST
# ============================================================================
def render_customers():
    st.subheader("👥 Customers")

    customers = customer_service.list()
    if not customers:
        st.info("No customers on file.")

    for idx, customer in enumerate(customers, start=1):
        c1, c2 = st.columns([4, 1])
        c1.markdown(f"{idx}. {customer}  \n:gray[{customer.reward_points} reward points]")
        if c2.button("Order", key=f"order_{customer.phone}", use_container_width=True):
            start_order(str(customer))

    st.divider()
    if st.button("☕ Walk-in Order", type="primary"):
        start_order()


# ============================================================================
# SCREEN: ORDER
# ============================================================================
def render_order():
    order: Order = st.session_state.get("order")
    if order is None:
        go_to("customers")
        return

    st.subheader(f"Order {order.order_id}")
    if order.customer:
        st.caption(f"Customer: {order.customer}")

    if st.session_state.get("flash"):
        st.warning(st.session_state.pop("flash"))

    col1, col2 = st.columns([1.6, 1.4], gap="large")

    with col1:
        st.markdown("##### Drinks")
        products = catalog.products()
        if 'selected_product' not in st.session_state:
            st.session_state.selected_product = products[0].product_id if products else None

        button_cols = st.columns(3)
        for i, product in enumerate(products):
            label = f"{product.name}\n{policy.format_money(product.base_price)}"
            is_selected = product.product_id == st.session_state.selected_product
            if button_cols[i % 3].button(label, key=f"drink_{product.product_id}",
                                         type="primary" if is_selected else "secondary",
                                         use_container_width=True):
                st.session_state.selected_product = product.product_id
                st.rerun()

        if st.session_state.selected_product:
            product = catalog.find_product(st.session_state.selected_product)
            with st.container(border=True):
                st.markdown(f"**{product.name}**")
                option_labels = option_labels_for(product)
                chosen = st.multiselect(
                    "Customizations",
                    options=list(option_labels),
                    format_func=option_labels.get,
                    key=f"options_{product.product_id}",
                )
                quantity = st.number_input("Qty", min_value=1, value=1, step=1, key="add_qty")
                if st.button("➕ Add Drink", type="primary"):
                    show_result(order.add_item(product, int(quantity), chosen))
                    st.rerun()

    with col2:
        st.markdown("##### Order Items")
        with st.container(border=True):
            lines = order.items()
            if not lines:
                st.info("🛒 No drinks yet")

            for line in lines:
                c1, c2, c3, c4 = st.columns([3, 1, 1, 1])
                c1.markdown(
                    f"**{line.name}** × {line.quantity}  \n"
                    f":gray[{', '.join(line.option_names) or 'No customizations'}]  \n"
                    f"{policy.format_money(line.extended_price)}"
                )
                if c2.button("−", key=f"minus_{line.ref}"):
                    show_result(order.adjust_quantity(line.ref, -1))
                    st.rerun()
                if c3.button("+", key=f"plus_{line.ref}"):
                    show_result(order.adjust_quantity(line.ref, 1))
                    st.rerun()
                if c4.button("🗑️", key=f"remove_{line.ref}"):
                    show_result(order.remove_item(line.ref))
                    st.rerun()
                with st.expander("✏️ Edit customizations"):
                    line_product = catalog.find_product(line.product_id)
                    line_labels = option_labels_for(line_product)
                    edited = st.multiselect(
                        "Customizations",
                        options=list(line_labels),
                        default=list(line.option_ids),
                        format_func=line_labels.get,
                        key=f"edit_options_{line.ref}",
                    )
                    if st.button("Update", key=f"update_options_{line.ref}"):
                        show_result(order.update_customization(line.ref, edited))
                        st.rerun()

            st.divider()
            totals = order.totals()
            m1, m2, m3 = st.columns(3)
            m1.metric("Sub-Total", policy.format_money(totals.subtotal))
            m2.metric(f"Sales Tax ({policy.tax_rate * 100:.2f}%)", policy.format_money(totals.tax))
            m3.metric("Total", policy.format_money(totals.total))

        btn_col1, btn_col2, btn_col3 = st.columns(3)
        with btn_col1:
            if st.button("💳 Complete Order", type="primary", disabled=order.is_empty, use_container_width=True):
                st.session_state.receipt = order.snapshot()
                st.session_state.order = None
                go_to("receipt")
        with btn_col2:
            if st.button("🗑️ Clear", use_container_width=True):
                order.clear()
                st.rerun()
        with btn_col3:
            if st.button("↩️ Customers", use_container_width=True):
                st.session_state.order = None
                go_to("customers")

    if order.items():
        with st.expander("📊 View Detailed Pricing Breakdown"):
            for line in order.items():
                st.caption(f"**{line.description}**")
                st.code(order.get_trace_text(line.ref), language=None)


# ============================================================================
# SCREEN: RECEIPT
# ============================================================================
def render_receipt():
    receipt = st.session_state.get("receipt")
    if receipt is None:
        go_to("customers")
        return

    st.subheader("🧾 Receipt")
    with st.container(border=True):
        st.markdown(f"**{settings.shop_name}**")
        st.caption(f"Order {receipt.order_id} | {receipt.taken_at.strftime('%Y-%m-%d %H:%M')}")
        if receipt.customer:
            st.caption(f"Customer: {receipt.customer}")

        receipt_df = pd.DataFrame([{
            'Item': line.description,
            'Qty': line.quantity,
            'Unit Price': policy.format_money(line.unit_price),
            'Ext Price': policy.format_money(line.extended_price),
        } for line in receipt.lines])
        st.dataframe(receipt_df, use_container_width=True, hide_index=True)

        st.markdown(
            f"Sub-Total: **{policy.format_money(receipt.totals.subtotal)}**  \n"
            f"Sales Tax: **{policy.format_money(receipt.totals.tax)}**  \n"
            f"Total: **{policy.format_money(receipt.totals.total)}**"
        )

    st.download_button(
        "📥 CSV",
        data=receipt_df.to_csv(index=False),
        file_name=f"receipt_{receipt.order_id}.csv",
        mime="text/csv",
    )
    if st.button("Main Menu", type="primary"):
        st.session_state.receipt = None
        go_to("customers")


# Screen provider: navigation resolves screens by name
SCREENS = {
    "customers": render_customers,
    "order": render_order,
    "receipt": render_receipt,
}

st.title(settings.shop_name)
st.caption(f"Register | {datetime.now().strftime('%Y-%m-%d')}")

SCREENS[st.session_state.get("screen", "customers")]()
