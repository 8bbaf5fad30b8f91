# karu/utils/formatting.py
from datetime import datetime


def format_currency(amount: float, symbol: str = "$") -> str:
    """
    Two-decimal display with a leading symbol.
    Example: 116 -> "$116.00"
    """
    return f"{symbol}{amount:,.2f}"


def greeting(now: datetime) -> str:
    if now.hour < 12:
        return "Good Morning"
    if now.hour < 18:
        return "Good Afternoon"
    return "Good Evening"


def format_long_date(now: datetime) -> str:
    # e.g. "Saturday, October 17, 2026"
    return f"{now:%A}, {now:%B} {now.day}, {now.year}"


def format_clock(now: datetime) -> str:
    # e.g. "09:05 AM"
    return now.strftime("%I:%M %p")
