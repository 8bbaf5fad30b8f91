import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

import streamlit as st
from supabase import Client, create_client

from config import load_settings
from domain.models import Customer, LowStockProduct, Product

logger = logging.getLogger(__name__)

settings = load_settings()
schema: str = settings.schema


class DataIntegratorError(Exception):
    """A backend call returned an error payload."""


@st.cache_resource
def get_client() -> Client:
    if not settings.supabase_url or not settings.supabase_key:
        raise RuntimeError("Set SUPABASE_URL and SUPABASE_KEY in .env or environment variables")
    return create_client(settings.supabase_url, settings.supabase_key)


def _table(client: Optional[Client], table_name: str):
    if client is None:
        client = get_client()
    return client.schema(schema).table(table_name)


def _check(resp, action: str):
    if getattr(resp, "error", None):
        raise DataIntegratorError(f"{action} failed: {resp.error}")
    return resp


# ---------------------------------------------------------------------------
# Sales screen reads
# ---------------------------------------------------------------------------

def fetch_active_products(client: Optional[Client] = None) -> Tuple[bool, str, List[Product]]:
    """
    Products that can be sold right now (active and in stock).
    Returns (ok, message, products)
    """
    try:
        resp = (
            _table(client, "products")
            .select("*")
            .eq("is_active", True)
            .gt("stock_quantity", 0)
            .execute()
        )

        if getattr(resp, "error", None):
            return False, f"Fetch failed: {resp.error}", []

        if not resp.data:
            return True, "No rows found", []

        return True, "Fetched", [Product.from_row(row) for row in resp.data]

    except Exception as e:
        logger.warning("Could not load products: %s", e)
        return False, f"Unexpected error: {e}", []


def fetch_customers(limit: int = 50, client: Optional[Client] = None) -> Tuple[bool, str, List[Customer]]:
    """
    Returns (ok, message, customers), at most `limit` rows.
    """
    try:
        resp = (
            _table(client, "customers")
            .select("*")
            .limit(limit)
            .execute()
        )

        if getattr(resp, "error", None):
            return False, f"Fetch failed: {resp.error}", []

        if not resp.data:
            return True, "No rows found", []

        return True, "Fetched", [Customer.from_row(row) for row in resp.data]

    except Exception as e:
        logger.warning("Could not load customers: %s", e)
        return False, f"Unexpected error: {e}", []


# ---------------------------------------------------------------------------
# Checkout writes
# ---------------------------------------------------------------------------

def generate_transaction_number(client: Optional[Client] = None) -> str:
    """
    Ask the database for the next transaction number (Postgres function).
    """
    if client is None:
        client = get_client()

    resp = _check(client.rpc("generate_transaction_number").execute(), "Generate transaction number")

    number = resp.data
    if isinstance(number, list):
        number = number[0] if number else None
    if not number:
        raise DataIntegratorError("Generate transaction number failed: no data returned")
    return str(number)


def insert_transaction(row: Dict[str, Any], client: Optional[Client] = None) -> Dict[str, Any]:
    resp = _check(
        _table(client, "transactions").insert(row).execute(),
        "Insert transaction",
    )

    if not resp.data:
        raise DataIntegratorError("Insert transaction failed: no data returned")
    return resp.data[0]


def insert_transaction_items(rows: List[Dict[str, Any]], client: Optional[Client] = None) -> List[Dict[str, Any]]:
    resp = _check(
        _table(client, "transaction_items").insert(rows).execute(),
        "Insert transaction items",
    )
    return resp.data or []


def update_product_stock(product_id: str, stock_quantity: int, client: Optional[Client] = None) -> None:
    # Plain overwrite; whoever writes last wins.
    _check(
        _table(client, "products")
        .update({"stock_quantity": stock_quantity})
        .eq("id", product_id)
        .execute(),
        f"Update stock for product {product_id}",
    )


def update_customer_loyalty(
        customer_id: str,
        loyalty_points: int,
        total_spent: float,
        client: Optional[Client] = None,
) -> None:
    _check(
        _table(client, "customers")
        .update({"loyalty_points": loyalty_points, "total_spent": total_spent})
        .eq("id", customer_id)
        .execute(),
        f"Update loyalty for customer {customer_id}",
    )


# ---------------------------------------------------------------------------
# Dashboard reads
# ---------------------------------------------------------------------------

def fetch_completed_totals(day: Optional[date] = None, client: Optional[Client] = None) -> List[float]:
    """
    `total_amount` of every completed transaction, optionally only those
    created on `day`.
    """
    query = _table(client, "transactions").select("total_amount")

    if day is not None:
        iso_day = day.isoformat()
        query = query.gte("created_at", f"{iso_day}T00:00:00").lt("created_at", f"{iso_day}T23:59:59")

    resp = _check(query.eq("status", "completed").execute(), "Fetch transactions")
    return [float(row.get("total_amount") or 0) for row in (resp.data or [])]


def count_customers(client: Optional[Client] = None) -> int:
    resp = _check(
        _table(client, "customers").select("*", count="exact", head=True).execute(),
        "Count customers",
    )
    return resp.count or 0


def fetch_low_stock_products(client: Optional[Client] = None) -> List[LowStockProduct]:
    """
    Active products whose stock is below their own `min_stock_level`.

    PostgREST filters compare a column to a literal, so the column-to-column
    comparison happens here.
    """
    resp = _check(
        _table(client, "products")
        .select("id, name, stock_quantity, min_stock_level")
        .eq("is_active", True)
        .execute(),
        "Fetch low stock products",
    )

    result: List[LowStockProduct] = []
    for row in resp.data or []:
        stock = int(row.get("stock_quantity") or 0)
        minimum = int(row.get("min_stock_level") or 0)
        if stock < minimum:
            result.append(
                LowStockProduct(
                    id=row["id"],
                    name=row["name"],
                    stock_quantity=stock,
                    min_stock_level=minimum,
                )
            )
    return result


def fetch_first_product_name(client: Optional[Client] = None) -> Optional[str]:
    resp = _check(
        _table(client, "products").select("name").limit(1).execute(),
        "Fetch product name",
    )
    if resp.data:
        return resp.data[0]["name"]
    return None
