from typing import Iterable, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.v1_0.models import SaleItem, Sale
from app.v1_0.schemas import SaleItemInput
from .base_repository import BaseRepository

class SaleItemRepository(BaseRepository[SaleItem]):
    def __init__(self) -> None:
        super().__init__(SaleItem)

    def build_items(self, payloads: Iterable[SaleItemInput]) -> list[SaleItem]:
        """
        Fresh, unsaved SaleItem rows in payload order.
        """
        return [
            SaleItem(
                product_name=p.product_name,
                quantity=p.quantity,
                unit_price=p.unit_price,
            )
            for p in payloads
        ]

    async def get_by_sale_id(
        self,
        sale_id: UUID,
        session: AsyncSession
    ) -> Sequence[SaleItem]:
        """
        Return all SaleItem rows linked to a sale_id, in display order.
        """
        stmt = (
            select(SaleItem)
            .where(SaleItem.sale_id == sale_id)
            .order_by(SaleItem.position.asc())
        )
        result = await session.scalars(stmt)
        return result.all()

    async def remove_item(
        self,
        sale: Sale,
        item: SaleItem,
        session: AsyncSession
    ) -> None:
        """
        Detach one item from its sale and delete its row.
        """
        sale.items.remove(item)
        await session.flush()
