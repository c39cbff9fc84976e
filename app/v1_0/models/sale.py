import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from sqlalchemy import Boolean, DateTime, Integer, String, Uuid, false
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.errors import SaleAlreadyCancelledError, SaleNotFoundError
from .base import Base
from .sale_item import SaleItem

class Sale(Base):
    __tablename__ = "sale"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    sale_number: Mapped[str] = mapped_column(String(64), nullable=False)
    sale_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    customer_name: Mapped[str] = mapped_column(String(200), nullable=False)
    branch: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    is_cancelled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    items: Mapped[list[SaleItem]] = relationship(
        "SaleItem",
        back_populates="sale",
        cascade="all, delete-orphan",
        order_by="SaleItem.position",
        collection_class=ordering_list("position"),
        lazy="selectin",
    )

    __mapper_args__ = {"version_id_col": version}

    # scalar fields a full replace is allowed to overwrite
    REPLACEABLE_FIELDS = frozenset({"sale_number", "sale_date", "customer_name", "branch"})

    def total_amount(self) -> Decimal:
        """Sum of current item totals; raises InvalidQuantityError like any line."""
        return sum((item.pricing().total for item in self.items), Decimal("0"))

    def cancel(self) -> dict[str, Any]:
        """
        Validate the Active -> Cancelled transition and return the field
        changes to persist. Cancelled is terminal.
        """
        if self.is_cancelled:
            raise SaleAlreadyCancelledError(self.id)
        return {"is_cancelled": True}

    def find_item(self, product_name: str) -> Optional[SaleItem]:
        # first exact match, case-sensitive; duplicates are left in place
        return next((it for it in self.items if it.product_name == product_name), None)

    def require_item(self, product_name: str) -> SaleItem:
        item = self.find_item(product_name)
        if item is None:
            raise SaleNotFoundError(self.id, product_name=product_name)
        return item
