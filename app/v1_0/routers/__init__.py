from .sale_router import router as sale_router
defined_routers = [
    sale_router,
    ]
