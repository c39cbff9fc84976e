from .base import Base
from .sale_item import SaleItem
from .sale import Sale
__all__ = [
    "Base",
    "SaleItem",
    "Sale",
]
