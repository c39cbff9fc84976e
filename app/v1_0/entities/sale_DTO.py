from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List
from uuid import UUID
from .sale_itemDTO import SaleItemDTO, SaleItemViewDTO

@dataclass(slots=True)
class SaleDTO:
    """Created sale as stored: ids and raw line fields, no derived pricing."""
    id: UUID
    sale_number: str
    sale_date: datetime
    customer_name: str
    branch: str
    is_cancelled: bool
    items: List[SaleItemDTO] = field(default_factory=list)

@dataclass(slots=True)
class SaleViewDTO:
    """Read projection with per-line discount/total and the sale total."""
    id: UUID
    sale_number: str
    sale_date: datetime
    customer_name: str
    branch: str
    is_cancelled: bool
    items: List[SaleItemViewDTO]
    total_amount: Decimal
