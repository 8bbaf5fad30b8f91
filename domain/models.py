# karu/domain/models.py

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

PAYMENT_METHODS = ("cash", "card", "mpesa")


@dataclass
class Product:
    id: str
    name: str
    price: float
    stock_quantity: int
    barcode: Optional[str] = None
    is_active: bool = True
    min_stock_level: int = 0

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Product":
        return cls(
            id=row["id"],
            name=row["name"],
            price=float(row.get("price") or 0),
            stock_quantity=int(row.get("stock_quantity") or 0),
            barcode=row.get("barcode"),
            is_active=bool(row.get("is_active", True)),
            min_stock_level=int(row.get("min_stock_level") or 0),
        )


@dataclass
class Customer:
    id: str
    name: str
    phone: str
    loyalty_points: int = 0
    is_student: bool = False
    total_spent: float = 0.0

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Customer":
        return cls(
            id=row["id"],
            name=row["name"],
            phone=row.get("phone") or "",
            loyalty_points=int(row.get("loyalty_points") or 0),
            is_student=bool(row.get("is_student")),
            total_spent=float(row.get("total_spent") or 0),
        )


@dataclass
class CartLine:
    """
    One product in the cart. Lives only in session state.

    `stock_quantity` is the stock known when the product was picked; the
    checkout decrements from this value.
    """
    product_id: str
    name: str
    price: float
    stock_quantity: int
    quantity: int
    total: float  # quantity * price
    barcode: Optional[str] = None

    @classmethod
    def from_product(cls, product: Product, quantity: int) -> "CartLine":
        return cls(
            product_id=product.id,
            name=product.name,
            price=product.price,
            stock_quantity=product.stock_quantity,
            quantity=quantity,
            total=quantity * product.price,
            barcode=product.barcode,
        )


@dataclass
class PricingSummary:
    subtotal: float
    tax: float
    discount: float
    total: float
    points_earned: int


@dataclass
class TransactionItem:
    transaction_id: str
    product_id: str
    quantity: int
    unit_price: float
    total_price: float

    def to_row(self) -> Dict[str, Any]:
        return {
            "transaction_id": self.transaction_id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "total_price": self.total_price,
        }


@dataclass
class CheckoutResult:
    transaction_id: str
    transaction_number: str
    pricing: PricingSummary
    customer_id: Optional[str] = None


@dataclass
class LowStockProduct:
    id: str
    name: str
    stock_quantity: int
    min_stock_level: int


@dataclass
class DashboardStats:
    """
    Figures shown on the dashboard. Defaults are what the screen renders
    when the backend could not be reached.
    """
    today_sales: float = 0.0
    total_revenue: float = 0.0
    total_transactions: int = 0
    total_customers: int = 0
    top_selling_product: str = "No data"
    low_stock_products: List[LowStockProduct] = field(default_factory=list)

    @property
    def low_stock_items(self) -> int:
        return len(self.low_stock_products)

    @property
    def average_sale(self) -> float:
        if self.total_transactions <= 0:
            return 0.0
        return self.total_revenue / self.total_transactions
