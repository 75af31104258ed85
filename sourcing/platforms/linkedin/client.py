"""Thin async client for the Apify REST API (actor runs and datasets)."""

import logging
from typing import Any

import httpx

from sourcing.core.errors import ProviderError

logger = logging.getLogger(__name__)

SOURCE = "linkedin"

TERMINAL_STATUSES = frozenset({"SUCCEEDED", "FAILED", "ABORTED", "TIMED-OUT"})


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:300]
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return str(error.get("message") or error.get("type") or error)
    return response.text[:300]


class ApifyClient:
    """Start actor runs, read their status and fetch dataset items.

    Every method takes the token explicitly so the caller can rotate
    credentials between calls. HTTP errors become ProviderError with the
    status code attached.
    """

    def __init__(self, http: httpx.AsyncClient, api_base: str = "https://api.apify.com/v2") -> None:
        self._http = http
        self._api_base = api_base.rstrip("/")

    async def _request(
        self,
        method: str,
        path: str,
        token: str,
        **kwargs: Any,
    ) -> Any:
        response = await self._http.request(
            method,
            f"{self._api_base}{path}",
            headers={"Authorization": f"Bearer {token}"},
            **kwargs,
        )
        if response.status_code >= 400:
            msg = f"Apify {method} {path} failed ({response.status_code}): {_error_message(response)}"
            raise ProviderError(msg, source=SOURCE, status_code=response.status_code)
        return response.json()

    async def start_run(self, actor_id: str, run_input: dict[str, Any], token: str) -> dict[str, Any]:
        actor_path = actor_id.replace("/", "~")
        body = await self._request("POST", f"/acts/{actor_path}/runs", token, json=run_input)
        run: dict[str, Any] = body.get("data", body)
        logger.debug("Started actor %s run %s", actor_id, run.get("id"))
        return run

    async def get_run(self, run_id: str, token: str) -> dict[str, Any]:
        body = await self._request("GET", f"/actor-runs/{run_id}", token)
        return body.get("data", body)  # type: ignore[no-any-return]

    async def list_items(self, dataset_id: str, token: str, limit: int) -> list[dict[str, Any]]:
        body = await self._request(
            "GET",
            f"/datasets/{dataset_id}/items",
            token,
            params={"clean": "true", "format": "json", "limit": limit},
        )
        if isinstance(body, dict):
            body = body.get("items", [])
        return [item for item in body if isinstance(item, dict)]
