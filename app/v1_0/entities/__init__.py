from .sale_DTO import SaleDTO, SaleViewDTO
from .sale_itemDTO import SaleItemDTO, SaleItemViewDTO


__all__ = [
    "SaleDTO", "SaleViewDTO",
    "SaleItemDTO", "SaleItemViewDTO",
]
