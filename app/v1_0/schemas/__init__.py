from .sale_schema import (
    SaleItemInput,
    SaleCreate,
    SaleReplace
    )
__all__ = [
    "SaleItemInput", "SaleCreate", "SaleReplace",
]
