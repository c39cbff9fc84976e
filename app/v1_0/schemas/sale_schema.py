from typing import List
from decimal import Decimal
from pydantic import BaseModel, Field
from datetime import datetime

# lengths and money precision follow the sale / sale_item columns

class SaleItemInput(BaseModel):
    product_name: str = Field(..., min_length=1, max_length=200)
    # upper bound is a pricing rule, checked when the line is priced
    quantity: int = Field(..., ge=0)
    unit_price: Decimal = Field(..., ge=0, max_digits=14, decimal_places=2)

class SaleCreate(BaseModel):
    sale_number: str = Field(..., min_length=1, max_length=64)
    sale_date: datetime
    customer_name: str = Field(..., min_length=1, max_length=200)
    branch: str = Field("", max_length=120)
    items: List[SaleItemInput] = Field(default_factory=list)

    def scalar_fields(self) -> dict:
        return self.model_dump(exclude={"items"})

SaleReplace = SaleCreate
