from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

@dataclass(slots=True)
class SaleItemDTO:
    id: UUID
    product_name: str
    quantity: int
    unit_price: Decimal

@dataclass(slots=True)
class SaleItemViewDTO:
    product_name: str
    quantity: int
    unit_price: Decimal
    discount: Decimal
    total: Decimal
