# karu/services/dashboard_service.py
import logging
from datetime import date, datetime, timezone
from typing import Optional

from supabase import Client

import data_integrator
from domain.models import DashboardStats

logger = logging.getLogger(__name__)

LOW_STOCK_PREVIEW = 5


def fetch_dashboard_data(client: Optional[Client] = None, today: Optional[date] = None) -> DashboardStats:
    """
    Collect everything the dashboard shows. Totals are summed here, not in SQL.

    On any backend error the default (zeroed) stats are returned.
    """
    if today is None:
        today = datetime.now(timezone.utc).date()

    try:
        today_totals = data_integrator.fetch_completed_totals(today, client)
        all_totals = data_integrator.fetch_completed_totals(None, client)
        customer_count = data_integrator.count_customers(client)
        low_stock = data_integrator.fetch_low_stock_products(client)
        # TODO: rank by transaction_items quantity once a sales-by-product view exists
        top_product = data_integrator.fetch_first_product_name(client)
    except Exception as e:
        logger.error("Error fetching dashboard data: %s", e)
        return DashboardStats()

    return DashboardStats(
        today_sales=sum(today_totals),
        total_revenue=sum(all_totals),
        total_transactions=len(all_totals),
        total_customers=customer_count,
        top_selling_product=top_product or "No data",
        low_stock_products=low_stock,
    )
