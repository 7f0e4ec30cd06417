"""Thin synchronous client for the insights backend.

The backend serves three GET endpoints under its base URL:

- ``/data`` with optional filter query params, answering ``{"data": [...]}``
- ``/filters`` answering ``{"filters": {field: [values]}}``
- ``/stats`` answering ``{"stats": {...}}``
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx
from pydantic import BaseModel

from insight_dashboard.config import ApiConfig
from insight_dashboard.errors import RecordsApiError
from insight_dashboard.records import RecordSet

LOGGER = logging.getLogger(__name__)


class InsightFilters(BaseModel):
    end_year: str = ""
    topic: str = ""
    sector: str = ""
    region: str = ""
    pestle: str = ""
    source: str = ""
    country: str = ""

    def to_params(self) -> dict[str, str]:
        """Query params for the active filters; blank values are dropped."""
        return {key: value for key, value in self.model_dump().items() if str(value).strip()}

    @property
    def active_count(self) -> int:
        return len(self.to_params())


class InsightApiClient:
    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout_seconds,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_config(
        cls, config: ApiConfig, transport: httpx.BaseTransport | None = None
    ) -> InsightApiClient:
        return cls(config.base_url, config.timeout_seconds, transport=transport)

    def _get(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        LOGGER.info("Making GET request to %s", path)
        try:
            response = self._client.get(path, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            LOGGER.error("API error %s for %s", exc.response.status_code, path)
            raise RecordsApiError(
                f"Backend answered {exc.response.status_code} for {path}"
            ) from exc
        except httpx.HTTPError as exc:
            LOGGER.error("API request to %s failed: %s", path, exc)
            raise RecordsApiError(f"Request to {path} failed: {exc}") from exc
        except ValueError as exc:
            raise RecordsApiError(f"Backend returned invalid JSON for {path}") from exc
        if not isinstance(payload, dict):
            raise RecordsApiError(f"Unexpected payload shape from {path}")
        return payload

    def fetch_records(self, filters: InsightFilters | None = None) -> RecordSet:
        params = (filters or InsightFilters()).to_params()
        payload = self._get("/data", params=params)
        rows = payload.get("data") or []
        if not isinstance(rows, list):
            raise RecordsApiError("Field 'data' must be a list")
        return RecordSet.from_rows(rows)

    def fetch_filter_options(self) -> dict[str, list[str]]:
        options = self._get("/filters").get("filters") or {}
        return {str(key): [str(value) for value in values or []] for key, values in options.items()}

    def fetch_stats(self) -> dict[str, Any]:
        return dict(self._get("/stats").get("stats") or {})

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> InsightApiClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()
