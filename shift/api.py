import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, configure_logging
from .models import (
    AddEarningsRequest, ResetBalanceRequest, DriverShiftBalance, ShiftBalanceResponse,
)
from .service import ShiftBalanceService, ShiftBalanceError
from .storage import BalanceStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/driver/shift", tags=["Shift"])


def get_balance_service(request: Request) -> ShiftBalanceService:
    return request.app.state.balance_service


def resolve_driver_id(request: Request) -> int:
    """Driver from the request context, or the configured fallback when there is none."""
    driver_id = getattr(request.state, "driver_id", None)
    if driver_id is not None:
        return driver_id

    fallback = request.app.state.settings.fallback_driver_id
    # An anonymous request shares a balance with the real driver using the fallback id.
    logger.warning("No driver id in request context, using fallback driver %s", fallback)
    return fallback


@router.get("/balance", response_model=DriverShiftBalance)
def get_current_shift_balance(
    driver_id: int = Depends(resolve_driver_id),
    service: ShiftBalanceService = Depends(get_balance_service),
) -> DriverShiftBalance:
    return service.get_current_shift_balance(driver_id)


@router.post("/earnings", response_model=ShiftBalanceResponse)
def add_earnings(
    request: AddEarningsRequest,
    service: ShiftBalanceService = Depends(get_balance_service),
) -> ShiftBalanceResponse:
    try:
        total = service.add_earnings(request.driver_id, request.amount)
    except ShiftBalanceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ShiftBalanceResponse(applied=total is not None, driver_id=request.driver_id, current_total=total)


@router.post("/reset", response_model=ShiftBalanceResponse)
def reset_balance(
    request: ResetBalanceRequest,
    service: ShiftBalanceService = Depends(get_balance_service),
) -> ShiftBalanceResponse:
    total = service.reset_balance(request.driver_id)
    return ShiftBalanceResponse(applied=total is not None, driver_id=request.driver_id, current_total=total)


def _parse_driver_id(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        logger.warning("Ignoring malformed driver id header value %r", raw)
        return None


def create_app(settings: Optional[Settings] = None, store: Optional[BalanceStore] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    store = store if store is not None else BalanceStore(shards=settings.store_shards)

    app = FastAPI(
        title="Driver Shift API",
        description="In-memory shift earnings balance per driver",
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.balance_service = ShiftBalanceService(store)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def driver_context(request: Request, call_next):
        # A driver id already placed in the context by the server wins over the header.
        if getattr(request.state, "driver_id", None) is None:
            driver_id = _parse_driver_id(request.headers.get(settings.driver_id_header))
            if driver_id is not None:
                request.state.driver_id = driver_id
        return await call_next(request)

    @app.get("/health", tags=["System"])
    def health_check():
        return {"status": "healthy", "service": "driver-shift"}

    app.include_router(router)
    return app


if __name__ == "__main__":
    import uvicorn

    settings = Settings.from_env()
    configure_logging(settings.log_level)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=8000)
