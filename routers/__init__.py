from .assets_api import router as assets_api_router
from .cards_api import router as cards_api_router
from .checkouts_api import router as checkouts_api_router
from .holds_api import router as holds_api_router

ALL_ROUTERS = (
    assets_api_router,
    cards_api_router,
    checkouts_api_router,
    holds_api_router,
)
