from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from core.config import Settings, get_settings
from core.errors import SellerProError
from core.logging import configure_logging

from .container import ServiceContainer
from .routes import admin, loyalty, mail, referrals, sellers

ERROR_STATUS = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "inactive": status.HTTP_400_BAD_REQUEST,
    "insufficient_balance": status.HTTP_400_BAD_REQUEST,
    "already_invited": status.HTTP_409_CONFLICT,
    "already_processed": status.HTTP_409_CONFLICT,
    "invalid_transition": status.HTTP_400_BAD_REQUEST,
    "missing_field": status.HTTP_400_BAD_REQUEST,
    "invalid_amount": status.HTTP_400_BAD_REQUEST,
}


def create_app(
    settings: Optional[Settings] = None,
    services: Optional[ServiceContainer] = None,
    **fastapi_kwargs,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(level=settings.log_level, serialize=settings.log_json)
    services = services or ServiceContainer.build(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Seller Pro API starting", environment=settings.environment)
        yield
        services.save()

    app = FastAPI(
        title="Trendies Seller Pro API",
        description="Loyalty ledger, reward redemption and referral program with admin moderation",
        version="1.0.0",
        lifespan=lifespan,
        **fastapi_kwargs,
    )
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(SellerProError)
    async def handle_service_error(request: Request, exc: SellerProError) -> JSONResponse:
        status_code = ERROR_STATUS.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        return JSONResponse(status_code=status_code, content={"detail": str(exc), "code": exc.code})

    @app.get("/health", tags=["System"])
    def health_check():
        return {"status": "healthy", "service": "seller-pro"}

    app.include_router(loyalty.router)
    app.include_router(referrals.router)
    app.include_router(sellers.router)
    app.include_router(admin.router)
    app.include_router(mail.router)
    return app
