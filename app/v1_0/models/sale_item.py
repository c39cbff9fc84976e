import uuid
from decimal import Decimal
from sqlalchemy import Integer, Numeric, String, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.v1_0.helper.pricing import LinePricing, price_line
from .base import Base

class SaleItem(Base):
    __tablename__ = "sale_item"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    sale_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("sale.id", ondelete="CASCADE"), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    product_name: Mapped[str] = mapped_column(String(200), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)

    sale = relationship("Sale", back_populates="items")

    def pricing(self) -> LinePricing:
        """Discount and total for this line, evaluated on every call."""
        return price_line(self.quantity, self.unit_price, self.product_name)
