from typing import Optional, List, Dict, Any
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.v1_0.models import Sale, SaleItem
from .base_repository import BaseRepository

class SaleRepository(BaseRepository[Sale]):
    def __init__(self) -> None:
        super().__init__(Sale)

    async def create_sale(
        self,
        fields: Dict[str, Any],
        items: List[SaleItem],
        session: AsyncSession
    ) -> Sale:
        """
        Creates a new Sale with its items, adds it to the session,
        and flushes to assign primary keys without committing.
        """
        sale = Sale(**fields, is_cancelled=False)
        sale.items.extend(items)
        await self.add(sale, session)
        return sale

    async def get_by_id(
        self,
        sale_id: UUID,
        session: AsyncSession
    ) -> Optional[Sale]:
        """
        Always re-reads the row and its items, so a read-modify-write starts
        from the committed state rather than a stale identity-map copy.
        """
        return await super().get_by_id(sale_id, session, populate_existing=True)

    async def replace_sale(
        self,
        sale: Sale,
        fields: Dict[str, Any],
        items: List[SaleItem],
        session: AsyncSession
    ) -> Sale:
        """
        Full overwrite. Scalars go through the replaceable allow-list and
        the item set is swapped; dropped items are deleted as orphans.
        Flush only.
        """
        sale.items = items
        return await self.update_fields(
            sale,
            fields,
            session,
            allow=Sale.REPLACEABLE_FIELDS,
        )

    async def mark_cancelled(
        self,
        sale: Sale,
        session: AsyncSession
    ) -> Sale:
        return await self.update_fields(sale, sale.cancel(), session, allow={"is_cancelled"})

    async def delete_sale(
        self,
        sale_id: UUID,
        session: AsyncSession
    ) -> bool:
        sale = await self.get_by_id(sale_id, session)
        if not sale:
            return False
        await self.delete(sale, session)
        return True
