from dependency_injector import containers, providers
from app.core.events import EventPublisher
from app.v1_0.repositories import (
    SaleRepository,
    SaleItemRepository,
    )
from app.v1_0.services import SaleService

class APIContainer(containers.DeclarativeContainer):
    event_publisher = providers.Singleton(EventPublisher)
    sale_repository = providers.Singleton(SaleRepository)
    sale_item_repository = providers.Singleton(SaleItemRepository)

    sale_service = providers.Singleton(
        SaleService,
        sale_repository = sale_repository,
        sale_item_repository = sale_item_repository,
        event_publisher = event_publisher
    )
