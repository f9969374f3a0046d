import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor, wait
from typing import Any, Dict, List, Optional, Sequence, Set

from third_party.usaspending.client import USASpendingClient
from third_party.usaspending.transforms import normalize_obligations, record_count, total_value
from utils.logger import get_logger, kv_message as kv

logger = get_logger(__name__)

STATUS_IDLE = "idle"
STATUS_FETCHING = "fetching"
STATUS_SUCCEEDED = "succeeded"
STATUS_FAILED = "failed"


class InvalidFiscalYearError(ValueError):
    def __init__(self, year: Any, supported: Sequence[int]) -> None:
        self.year = year
        self.supported = list(supported)
        super().__init__(f"Unsupported fiscal year {year!r}; expected one of {self.supported[0]}..{self.supported[-1]}")


def extract_results(payload: Any) -> Optional[List[Any]]:
    """Return ``payload["results"]`` when present and a list, otherwise ``None``."""
    if not isinstance(payload, dict):
        return None
    results = payload.get("results")
    if not isinstance(results, list):
        return None
    return results


class ObligationsController:
    """Owns the selected fiscal year, the busy flag and the current dataset.

    Every fetch is tagged with an increasing request id. A completion only
    commits when its id is still the latest one issued, so a slow response
    for an earlier selection can never overwrite a newer one. Superseded
    requests are left to finish on the worker; their results are ignored.
    """

    def __init__(
        self,
        client: USASpendingClient,
        supported_years: Sequence[int],
        initial_year: Optional[int] = None,
        executor: Optional[Executor] = None,
        max_workers: int = 4,
    ) -> None:
        if not supported_years:
            raise ValueError("supported_years must not be empty")
        self.client = client
        self.supported_years: List[int] = sorted(supported_years)
        year = self.supported_years[0] if initial_year is None else initial_year
        self._validate_year(year)

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="obligations-fetch")
        self._lock = threading.Lock()
        self._futures: Set[Future] = set()

        self._year = year
        self._busy = False
        self._dataset: List[Dict[str, Any]] = []
        self._status = STATUS_IDLE
        self._error: Optional[str] = None
        self._request_id = 0

    def _validate_year(self, year: Any) -> None:
        if isinstance(year, bool) or not isinstance(year, int) or year not in self.supported_years:
            raise InvalidFiscalYearError(year, self.supported_years)

    @property
    def selected_year(self) -> int:
        with self._lock:
            return self._year

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._busy

    def select_year(self, year: int) -> None:
        self._validate_year(year)
        with self._lock:
            self._request_id += 1
            request_id = self._request_id
            self._year = year
            self._busy = True
            self._status = STATUS_FETCHING
            self._error = None
        logger.info(kv("fetch_start", year=year, request_id=request_id))
        try:
            future = self._executor.submit(self._fetch, request_id, year)
        except RuntimeError as exc:
            logger.error(kv("fetch_not_started", year=year, request_id=request_id, error=str(exc)))
            self._commit(request_id, year, [], STATUS_FAILED, f"{type(exc).__name__}: {exc}")
            raise
        with self._lock:
            if not future.done():
                self._futures.add(future)
        future.add_done_callback(self._forget)

    def refresh(self) -> None:
        self.select_year(self.selected_year)

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            dataset = [dict(r) for r in self._dataset]
            return {
                "dataset": dataset,
                "busy": self._busy,
                "selectedYear": self._year,
                "totalValue": total_value(dataset),
                "recordCount": record_count(dataset),
                "status": self._status,
                "error": self._error,
            }

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until every issued fetch has finished. Returns False on timeout."""
        with self._lock:
            pending = list(self._futures)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait_for_pending: bool = True) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait_for_pending)

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._futures.discard(future)

    def _fetch(self, request_id: int, year: int) -> None:
        try:
            payload = self.client.get_federal_obligations(year)
            logger.debug(kv("api_response", year=year, request_id=request_id, payload_type=type(payload).__name__))
            results = extract_results(payload)
            dataset = None if results is None else normalize_obligations(results)
        except Exception as exc:
            logger.exception(kv("fetch_failed", year=year, request_id=request_id, error=str(exc)))
            self._commit(request_id, year, [], STATUS_FAILED, f"{type(exc).__name__}: {exc}")
            return

        if dataset is None:
            logger.warning(kv("malformed_response", year=year, request_id=request_id))
            self._commit(request_id, year, [], STATUS_SUCCEEDED, None)
            return
        self._commit(request_id, year, dataset, STATUS_SUCCEEDED, None)

    def _commit(
        self,
        request_id: int,
        year: int,
        dataset: List[Dict[str, Any]],
        status: str,
        error: Optional[str],
    ) -> None:
        with self._lock:
            if request_id != self._request_id:
                logger.info(kv("stale_response_dropped", year=year, request_id=request_id, current_year=self._year))
                return
            self._dataset = dataset
            self._busy = False
            self._status = status
            self._error = error
        logger.info(kv("fetch_done", year=year, request_id=request_id, records=len(dataset), status=status))
