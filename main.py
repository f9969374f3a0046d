from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI

from app.config import Settings, get_settings
from obligations.controller import ObligationsController
from obligations.routes import router as obligations_router
from third_party.usaspending.client import USASpendingClient
from utils.logger import configure_logging, get_logger, kv_message as kv

logger = get_logger(__name__)


def build_controller(settings: Settings, client: Optional[USASpendingClient] = None) -> ObligationsController:
    client = client or USASpendingClient(
        base_url=settings.usaspending_base_url,
        funding_agency_id=settings.funding_agency_id,
        page_limit=settings.page_limit,
        timeout=settings.request_timeout_seconds,
    )
    return ObligationsController(
        client,
        supported_years=settings.supported_years(),
        initial_year=settings.default_fiscal_year,
        max_workers=settings.fetch_workers,
    )


def create_app(settings: Optional[Settings] = None, controller: Optional[ObligationsController] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_format)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        obligations = controller or build_controller(settings)
        app.state.obligations = obligations
        logger.info(kv("startup", default_year=settings.default_fiscal_year))
        obligations.select_year(settings.default_fiscal_year)
        yield
        obligations.shutdown(wait_for_pending=False)

    app = FastAPI(title="Federal Obligations Finder", lifespan=lifespan)
    app.include_router(obligations_router)

    @app.get("/healthz")
    def healthz() -> Any:
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("main:app", host=settings.host, port=settings.port, reload=True)
