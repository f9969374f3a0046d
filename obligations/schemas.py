from typing import List, Optional

from pydantic import BaseModel


class SelectYearRequest(BaseModel):
    year: int


class NormalizedRecord(BaseModel):
    name: str
    value: float
    alternative: float


class ObligationsSnapshot(BaseModel):
    dataset: List[NormalizedRecord]
    busy: bool
    selectedYear: int
    totalValue: float
    recordCount: int
    status: str
    error: Optional[str] = None


class FiscalYearsResponse(BaseModel):
    years: List[int]
    selectedYear: int
