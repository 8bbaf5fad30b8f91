# karu/services/pricing.py

import math
from typing import List, Optional

from domain.models import CartLine, Customer, PricingSummary

TAX_RATE = 0.16  # 16% VAT
STUDENT_DISCOUNT_RATE = 0.10
CURRENCY_PER_POINT = 10  # 1 point per 10 spent


def calculate_subtotal(cart: List[CartLine]) -> float:
    return sum((line.total for line in cart), 0.0)


def calculate_tax(subtotal: float) -> float:
    return subtotal * TAX_RATE


def calculate_discount(subtotal: float, customer: Optional[Customer]) -> float:
    if customer is not None and customer.is_student:
        return subtotal * STUDENT_DISCOUNT_RATE
    return 0.0


def calculate_total(subtotal: float, tax: float, discount: float) -> float:
    return subtotal + tax - discount


def calculate_loyalty_points(total: float) -> int:
    return math.floor(total / CURRENCY_PER_POINT)


def summarize(cart: List[CartLine], customer: Optional[Customer] = None) -> PricingSummary:
    """
    Compute every figure shown under the cart and stored on the transaction.

    No rounding is applied here; amounts are only rounded for display.
    """
    subtotal = calculate_subtotal(cart)
    tax = calculate_tax(subtotal)
    discount = calculate_discount(subtotal, customer)
    total = calculate_total(subtotal, tax, discount)

    return PricingSummary(
        subtotal=subtotal,
        tax=tax,
        discount=discount,
        total=total,
        points_earned=calculate_loyalty_points(total),
    )
