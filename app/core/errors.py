from typing import Any, Optional
from uuid import UUID


class SaleError(Exception):
    """
    Base class for failures surfaced by the sales core.

    Each subclass carries the HTTP status and the error kind the transport
    layer renders, so routers never have to translate them one by one.
    """

    status_code: int = 400
    error: str = "SaleError"

    def __init__(self, detail: str, **context: Any) -> None:
        super().__init__(detail)
        self.detail = detail
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.detail, "error": self.error}


class SaleNotFoundError(SaleError):
    status_code = 404
    error = "NotFound"

    def __init__(self, sale_id: UUID, product_name: Optional[str] = None) -> None:
        if product_name is None:
            detail = f"Sale {sale_id} not found"
        else:
            detail = f"Item '{product_name}' not found in sale {sale_id}"
        super().__init__(detail, sale_id=sale_id, product_name=product_name)


class SaleAlreadyCancelledError(SaleError):
    status_code = 400
    error = "AlreadyCancelled"

    def __init__(self, sale_id: UUID) -> None:
        super().__init__("Sale is already cancelled.", sale_id=sale_id)


class InvalidQuantityError(SaleError):
    status_code = 422
    error = "InvalidQuantity"

    def __init__(self, quantity: int, max_quantity: int, product_name: Optional[str] = None) -> None:
        target = f" for '{product_name}'" if product_name else ""
        super().__init__(
            f"Cannot sell more than {max_quantity} items{target} (got {quantity}).",
            quantity=quantity,
            product_name=product_name,
        )


class SaleConflictError(SaleError):
    status_code = 409
    error = "Conflict"

    def __init__(self, sale_id: UUID) -> None:
        super().__init__(
            f"Sale {sale_id} was modified concurrently, reload and retry.",
            sale_id=sale_id,
        )
