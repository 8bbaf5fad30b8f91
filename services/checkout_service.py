# karu/services/checkout_service.py
import logging
from typing import List, Optional

from supabase import Client

import data_integrator
from domain.exceptions import EmptyCartError, TransactionFailedError
from domain.models import PAYMENT_METHODS, CartLine, CheckoutResult, Customer, TransactionItem
from services.pricing import summarize

logger = logging.getLogger(__name__)


def process_transaction(
        cart: List[CartLine],
        customer: Optional[Customer],
        payment_method: str,
        cashier_id: Optional[str],
        client: Optional[Client] = None,
) -> CheckoutResult:
    """
    Record a sale.

    Steps, each awaited before the next:
      1. get a transaction number from the database
      2. insert the `transactions` row
      3. insert one `transaction_items` row per cart line
      4. overwrite each product's stock with (known stock - quantity sold)
      5. add the earned points and the total to the customer, if any

    There is no rollback. If step 3, 4 or 5 fails, the rows written by the
    earlier steps stay in the database and TransactionFailedError is raised.
    """
    if not cart:
        raise EmptyCartError()

    if payment_method not in PAYMENT_METHODS:
        raise ValueError(f"Invalid payment_method: {payment_method}")

    if not cashier_id:
        raise TransactionFailedError("No cashier configured (set CASHIER_ID)")

    pricing = summarize(cart, customer)
    transaction_id = None

    try:
        # 1) Transaction number
        transaction_number = data_integrator.generate_transaction_number(client)
        logger.info("Processing transaction %s (%d lines)", transaction_number, len(cart))

        # 2) Transaction row
        transaction = data_integrator.insert_transaction(
            {
                "transaction_number": transaction_number,
                "cashier_id": cashier_id,
                "customer_id": customer.id if customer else None,
                "subtotal": pricing.subtotal,
                "tax_amount": pricing.tax,
                "discount_amount": pricing.discount,
                "total_amount": pricing.total,
                "payment_method": payment_method,
                "points_earned": pricing.points_earned,
                "status": "completed",
            },
            client,
        )
        transaction_id = transaction["id"]

        # 3) Line items
        items = [
            TransactionItem(
                transaction_id=transaction_id,
                product_id=line.product_id,
                quantity=line.quantity,
                unit_price=line.price,
                total_price=line.total,
            ).to_row()
            for line in cart
        ]
        data_integrator.insert_transaction_items(items, client)

        # 4) Stock, one independent update per line
        for line in cart:
            data_integrator.update_product_stock(
                line.product_id,
                line.stock_quantity - line.quantity,
                client,
            )
            logger.debug("Stock for %s set to %d", line.product_id, line.stock_quantity - line.quantity)

        # 5) Loyalty
        if customer is not None and pricing.points_earned > 0:
            data_integrator.update_customer_loyalty(
                customer.id,
                customer.loyalty_points + pricing.points_earned,
                customer.total_spent + pricing.total,
                client,
            )

    except Exception as e:
        logger.exception("Transaction error")
        if transaction_id is not None:
            logger.warning(
                "Transaction %s was recorded but later steps failed; stock or loyalty may be out of date",
                transaction_id,
            )
        raise TransactionFailedError("Failed to process transaction. Please try again.") from e

    logger.info("Transaction %s completed, total %.2f", transaction_number, pricing.total)

    return CheckoutResult(
        transaction_id=transaction_id,
        transaction_number=transaction_number,
        pricing=pricing,
        customer_id=customer.id if customer else None,
    )
