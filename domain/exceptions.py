# karu/domain/exceptions.py


class PosError(Exception):
    """Base class for errors shown to the cashier."""


class InsufficientStockError(PosError):
    def __init__(self, product_name: str, available: int):
        self.product_name = product_name
        self.available = available
        super().__init__(f"Only {available} items available")


class ProductNotFoundError(PosError):
    def __init__(self, barcode: str):
        self.barcode = barcode
        super().__init__("No product found with this barcode")


class EmptyCartError(PosError):
    def __init__(self):
        super().__init__("Please add items to cart before processing")


class TransactionFailedError(PosError):
    """
    Raised when any step of the checkout commit fails.

    Writes done before the failing step are not undone.
    """
