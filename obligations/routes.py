from fastapi import APIRouter, HTTPException, Request

from obligations.controller import InvalidFiscalYearError, ObligationsController
from obligations.schemas import FiscalYearsResponse, ObligationsSnapshot, SelectYearRequest


router = APIRouter(prefix="/api")


def _controller(request: Request) -> ObligationsController:
    return request.app.state.obligations


@router.get("/obligations", response_model=ObligationsSnapshot)
def get_obligations(request: Request):
    return _controller(request).snapshot()


@router.get("/fiscal-years", response_model=FiscalYearsResponse)
def get_fiscal_years(request: Request):
    controller = _controller(request)
    return {"years": controller.supported_years, "selectedYear": controller.selected_year}


@router.post("/obligations/year", response_model=ObligationsSnapshot, status_code=202)
def select_year(body: SelectYearRequest, request: Request):
    controller = _controller(request)
    try:
        controller.select_year(body.year)
    except InvalidFiscalYearError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return controller.snapshot()


@router.post("/obligations/refresh", response_model=ObligationsSnapshot, status_code=202)
def refresh(request: Request):
    controller = _controller(request)
    controller.refresh()
    return controller.snapshot()
