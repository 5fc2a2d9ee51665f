"""Tavily search/extract calls, each one logged to the call-log table."""

import time
from typing import Optional

import requests
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from prepdeck.config import TAVILY_API_KEY, TAVILY_BASE_URL
from prepdeck.exceptions import SearchApiError
from prepdeck.models.api_call import SearchApiCall


class TavilyClient:
    def __init__(
        self,
        db: Session,
        user_id: int,
        search_id: Optional[int] = None,
        api_key: str = TAVILY_API_KEY,
        base_url: str = TAVILY_BASE_URL,
        http=None,
        timeout: int = 30,
    ):
        self.db = db
        self.user_id = user_id
        self.search_id = search_id
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.http = http or requests.Session()
        self.timeout = timeout

    def _post(self, endpoint: str, payload: dict) -> dict:
        response = self.http.post(
            endpoint,
            json=payload,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key}",
            },
            timeout=self.timeout,
        )
        if response.status_code != 200:
            raise SearchApiError(response.status_code, f"HTTP {response.status_code}: {response.reason}")
        return response.json()

    def _log_call(self, **fields) -> None:
        try:
            self.db.add(SearchApiCall(search_id=self.search_id, user_id=self.user_id, **fields))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            print(f"[Tavily] Failed to log {fields.get('api_type')} call: {e}")

    def _call(self, api_type: str, endpoint: str, payload: dict, credits: int, log_fields: dict) -> Optional[dict]:
        start_time = time.time()
        status = 0
        data = None
        error_message = None

        try:
            data = self._post(endpoint, payload)
            status = 200
        except SearchApiError as e:
            status = e.status_code
            error_message = str(e)
        except requests.RequestException as e:
            error_message = str(e) or "Network/API error"

        self._log_call(
            api_type=api_type,
            endpoint_url=endpoint,
            request_payload=payload,
            response_status=status,
            results_count=len(data.get("results") or []) if data else 0,
            request_duration_ms=int((time.time() - start_time) * 1000),
            credits_used=credits if status else 0,
            error_message=error_message,
            **log_fields,
        )

        if error_message:
            print(f"[Tavily] Error in {api_type}: {error_message}")
        return data

    def search(
        self,
        query: str,
        search_depth: str = "basic",
        max_results: int = 12,
        include_domains: list[str] = None,
        time_range: str = "year",
    ) -> Optional[dict]:
        """Run a search. Returns the response body, or None if the call failed."""
        payload = {
            "query": query,
            "search_depth": search_depth,
            "max_results": max_results,
            "include_answer": True,
            "include_raw_content": True,
            "include_domains": include_domains,
            "time_range": time_range,
        }
        return self._call(
            "search",
            f"{self.base_url}/search",
            payload,
            credits=1,
            log_fields={"query_text": query, "search_depth": search_depth, "max_results": max_results},
        )

    def extract(self, urls: list[str]) -> list[dict]:
        """Extract page content. Each URL costs one credit."""
        data = self._call(
            "extract",
            f"{self.base_url}/extract",
            {"urls": urls},
            credits=len(urls),
            log_fields={
                "query_text": f"Extract {len(urls)} URLs",
                "search_depth": "advanced",
                "max_results": len(urls),
            },
        )
        return (data or {}).get("results") or []
