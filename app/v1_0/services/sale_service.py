from decimal import Decimal
from typing import Any, Awaitable, Callable, List, TypeVar
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.core.errors import SaleConflictError, SaleNotFoundError
from app.core.events import (
    DomainEvent,
    EventPublisher,
    ITEM_CANCELLED,
    SALE_CANCELLED,
    SALE_CREATED,
    SALE_MODIFIED,
)
from app.core.logger import logger
from app.utils.tx import atomic, maybe_begin
from app.v1_0.entities import (
    SaleDTO,
    SaleItemDTO,
    SaleViewDTO,
    SaleItemViewDTO,
)
from app.v1_0.models import Sale
from app.v1_0.repositories import (
    SaleRepository,
    SaleItemRepository,
)
from app.v1_0.schemas import SaleCreate, SaleReplace

T = TypeVar("T")


class SaleService:
    """Use-cases of the Sale aggregate: create, get, replace, cancel sale, cancel item."""

    def __init__(
        self,
        sale_repository: SaleRepository,
        sale_item_repository: SaleItemRepository,
        event_publisher: EventPublisher,
    ) -> None:
        self.sale_repository = sale_repository
        self.sale_item_repository = sale_item_repository
        self._event_publisher = event_publisher

    async def _load_sale(self, sale_id: UUID, db: AsyncSession) -> Sale:
        sale = await self.sale_repository.get_by_id(sale_id, session=db)
        if not sale:
            raise SaleNotFoundError(sale_id)
        return sale

    async def _in_transaction(
        self,
        sale_id: UUID | None,
        db: AsyncSession,
        run: Callable[[], Awaitable[T]],
    ) -> T:
        """
        Execute ``run`` as one unit of work on ``db``.

        Stale writes detected by the version column surface as
        SaleConflictError; everything else propagates after rollback.
        """
        try:
            async with atomic(db):
                return await run()
        except StaleDataError as e:
            logger.warning("[SaleService] stale write on sale_id=%s: %s", sale_id, e)
            raise SaleConflictError(sale_id) from e

    async def _emit(self, name: str, sale_id: UUID, **payload: Any) -> None:
        """
        Publish a domain event after commit. Best effort: a publisher
        failure is logged and never undoes the mutation.
        """
        try:
            await self._event_publisher.publish(DomainEvent(name=name, sale_id=sale_id, payload=payload))
        except Exception as e:
            logger.error(
                "[SaleService] event publish failed (%s sale_id=%s): %s",
                name,
                sale_id,
                e,
                exc_info=True,
            )

    def _to_dto(self, sale: Sale) -> SaleDTO:
        return SaleDTO(
            id=sale.id,
            sale_number=sale.sale_number,
            sale_date=sale.sale_date,
            customer_name=sale.customer_name,
            branch=sale.branch,
            is_cancelled=sale.is_cancelled,
            items=[
                SaleItemDTO(
                    id=it.id,
                    product_name=it.product_name,
                    quantity=it.quantity,
                    unit_price=it.unit_price,
                )
                for it in sale.items
            ],
        )

    def _to_view(self, sale: Sale) -> SaleViewDTO:
        """
        Price every line and build the read projection.

        Raises:
            InvalidQuantityError: If a line exceeds the per-line quantity cap.
        """
        items: List[SaleItemViewDTO] = []
        for it in sale.items:
            pricing = it.pricing()
            items.append(
                SaleItemViewDTO(
                    product_name=it.product_name,
                    quantity=it.quantity,
                    unit_price=it.unit_price,
                    discount=pricing.discount,
                    total=pricing.total,
                )
            )

        return SaleViewDTO(
            id=sale.id,
            sale_number=sale.sale_number,
            sale_date=sale.sale_date,
            customer_name=sale.customer_name,
            branch=sale.branch,
            is_cancelled=sale.is_cancelled,
            items=items,
            total_amount=sum((i.total for i in items), Decimal("0")),
        )

    async def create_sale(self, payload: SaleCreate, db: AsyncSession) -> SaleDTO:
        """
        Create a sale with its items.

        Items are stored as given; pricing is not evaluated here, so a line
        above the quantity cap is accepted and only fails when priced.

        Args:
            payload: Sale header fields and item lines.
            db: Active async database session.

        Returns:
            SaleDTO with the generated ids.
        """
        logger.info(
            "[SaleService] create_sale sale_number=%s items=%s",
            payload.sale_number,
            len(payload.items),
        )

        async def _run() -> SaleDTO:
            items = self.sale_item_repository.build_items(payload.items)
            sale = await self.sale_repository.create_sale(
                payload.scalar_fields(),
                items,
                session=db,
            )
            return self._to_dto(sale)

        dto = await self._in_transaction(None, db, _run)
        await self._emit(SALE_CREATED, dto.id)
        return dto

    async def get_sale(self, sale_id: UUID, db: AsyncSession) -> SaleViewDTO:
        """
        Retrieve a sale with per-line discount/total and the sale total.

        Args:
            sale_id: Identifier of the sale to retrieve.
            db: Active async database session.

        Returns:
            SaleViewDTO projection.

        Raises:
            SaleNotFoundError: If the sale does not exist.
            InvalidQuantityError: If one of its lines cannot be priced.
        """
        async with maybe_begin(db):
            sale = await self._load_sale(sale_id, db)
            return self._to_view(sale)

    async def replace_sale(self, sale_id: UUID, payload: SaleReplace, db: AsyncSession) -> None:
        """
        Overwrite every header field and the whole item set of a sale.

        Previous items are deleted and new ones get new ids. Cancelled
        sales are not locked against replacement.

        Raises:
            SaleNotFoundError: If the sale does not exist.
            SaleConflictError: If the sale changed since it was loaded.
        """
        logger.info("[SaleService] replace_sale sale_id=%s items=%s", sale_id, len(payload.items))

        async def _run() -> None:
            sale = await self._load_sale(sale_id, db)
            if sale.is_cancelled:
                logger.warning("[SaleService] replacing cancelled sale_id=%s", sale_id)
            items = self.sale_item_repository.build_items(payload.items)
            await self.sale_repository.replace_sale(
                sale,
                payload.scalar_fields(),
                items,
                session=db,
            )

        await self._in_transaction(sale_id, db, _run)
        await self._emit(SALE_MODIFIED, sale_id)

    async def cancel_sale(self, sale_id: UUID, db: AsyncSession) -> None:
        """
        Flag a sale as cancelled. Not idempotent.

        Raises:
            SaleNotFoundError: If the sale does not exist.
            SaleAlreadyCancelledError: If the sale is already cancelled.
            SaleConflictError: If the sale changed since it was loaded.
        """
        logger.info("[SaleService] cancel_sale sale_id=%s", sale_id)

        async def _run() -> None:
            sale = await self._load_sale(sale_id, db)
            await self.sale_repository.mark_cancelled(sale, session=db)

        await self._in_transaction(sale_id, db, _run)
        await self._emit(SALE_CANCELLED, sale_id)

    async def cancel_item(self, sale_id: UUID, product_name: str, db: AsyncSession) -> None:
        """
        Remove the first item of a sale whose product name matches exactly.

        Only one line is removed per call, even if several share the name.

        Raises:
            SaleNotFoundError: If the sale, or an item with that name, does not exist.
        """
        logger.info("[SaleService] cancel_item sale_id=%s product=%s", sale_id, product_name)

        async def _run() -> None:
            sale = await self._load_sale(sale_id, db)
            item = sale.require_item(product_name)
            await self.sale_item_repository.remove_item(sale, item, session=db)

        await self._in_transaction(sale_id, db, _run)
        await self._emit(ITEM_CANCELLED, sale_id, product_name=product_name)
