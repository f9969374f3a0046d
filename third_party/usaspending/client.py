from typing import Any, Dict, Optional

import requests


class USASpendingClient:
    BASE_URL = "https://api.usaspending.gov/api/v2/federal_obligations/"

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        base_url: Optional[str] = None,
        funding_agency_id: int = 315,
        page_limit: int = 100,
        timeout: Optional[float] = None,
    ) -> None:
        self.session = session or requests.Session()
        self.base_url = base_url or self.BASE_URL
        self.funding_agency_id = funding_agency_id
        self.page_limit = page_limit
        self.timeout = timeout

    def _http_get(self, params: Dict[str, Any]) -> Any:
        response = self.session.get(self.base_url, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def build_params(self, fiscal_year: int) -> Dict[str, Any]:
        # Only the first page is ever requested.
        return {
            "fiscal_year": fiscal_year,
            "funding_agency_id": self.funding_agency_id,
            "limit": self.page_limit,
            "page": 1,
        }

    def get_federal_obligations(self, fiscal_year: int) -> Any:
        """Fetch the first page of obligations for ``fiscal_year``.

        Returns the decoded JSON body untouched. Raises ``requests.RequestException``
        on transport or status errors and ``ValueError`` when the body is not JSON.
        """
        return self._http_get(self.build_params(fiscal_year))
