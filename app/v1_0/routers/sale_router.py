from uuid import UUID
from fastapi import APIRouter, HTTPException, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from dependency_injector.wiring import inject, Provide

from app.storage.database.db_connector import get_db
from app.app_containers import ApplicationContainer
from app.core.errors import SaleError
from app.core.logger import logger

from app.v1_0.entities import SaleDTO, SaleViewDTO
from app.v1_0.schemas import SaleCreate, SaleReplace
from app.v1_0.services import SaleService
router = APIRouter(prefix="/sales", tags=["Sales"])



@router.post(
    "",
    response_model=SaleDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Create a sale",
)
@inject
async def create_sale(
    request: SaleCreate,
    http_request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
    service: SaleService = Depends(
        Provide[ApplicationContainer.api_container.sale_service]
    ),
):
    logger.info(
        "[SaleRouter] create_sale sale_number=%s customer=%s branch=%s items=%s",
        request.sale_number,
        request.customer_name,
        request.branch,
        len(request.items),
    )

    try:
        dto = await service.create_sale(request, db)
    except (HTTPException, SaleError):
        raise
    except Exception as e:
        logger.error(f"[SaleRouter] create_sale error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create sale")

    response.headers["Location"] = str(http_request.url_for("get_sale", sale_id=str(dto.id)))
    return dto


@router.get(
    "/{sale_id}",
    response_model=SaleViewDTO,
    summary="Get a sale by ID",
)
@inject
async def get_sale(
    sale_id: UUID,
    db: AsyncSession = Depends(get_db),
    service: SaleService = Depends(Provide[ApplicationContainer.api_container.sale_service]),
):
    logger.debug(f"[SaleRouter] get_sale id={sale_id}")
    try:
        return await service.get_sale(sale_id, db)
    except (HTTPException, SaleError):
        raise
    except Exception as e:
        logger.error(f"[SaleRouter] get_sale error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch sale")


@router.put(
    "/{sale_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Replace a sale and all of its items",
)
@inject
async def replace_sale(
    sale_id: UUID,
    request: SaleReplace,
    db: AsyncSession = Depends(get_db),
    service: SaleService = Depends(Provide[ApplicationContainer.api_container.sale_service]),
):
    logger.info("[SaleRouter] replace_sale id=%s items=%s", sale_id, len(request.items))
    try:
        await service.replace_sale(sale_id, request, db)
    except (HTTPException, SaleError):
        raise
    except Exception as e:
        logger.error(f"[SaleRouter] replace_sale error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update sale")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{sale_id}/cancel",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Cancel a sale",
)
@inject
async def cancel_sale(
    sale_id: UUID,
    db: AsyncSession = Depends(get_db),
    service: SaleService = Depends(Provide[ApplicationContainer.api_container.sale_service]),
):
    logger.info("[SaleRouter] cancel_sale id=%s", sale_id)
    try:
        await service.cancel_sale(sale_id, db)
    except (HTTPException, SaleError):
        raise
    except Exception as e:
        logger.error(f"[SaleRouter] cancel_sale error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to cancel sale")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{sale_id}/items/{product_name}/cancel",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Cancel one item of a sale by product name",
)
@inject
async def cancel_item(
    sale_id: UUID,
    product_name: str,
    db: AsyncSession = Depends(get_db),
    service: SaleService = Depends(Provide[ApplicationContainer.api_container.sale_service]),
):
    logger.info("[SaleRouter] cancel_item id=%s product=%s", sale_id, product_name)
    try:
        await service.cancel_item(sale_id, product_name, db)
    except (HTTPException, SaleError):
        raise
    except Exception as e:
        logger.error(f"[SaleRouter] cancel_item error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to cancel sale item")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
