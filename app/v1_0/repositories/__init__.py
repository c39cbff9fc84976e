from .base_repository import BaseRepository
from .sale_item_repository import SaleItemRepository
from .sale_repository import SaleRepository
__all__ = [
    "BaseRepository",
    "SaleItemRepository",
    "SaleRepository",
]
