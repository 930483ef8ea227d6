"""
fleetops/providers/missions.py - Mission persistence API client

Async client for the missions endpoint. Every non-2xx response and every
transport failure surfaces as PersistenceError; nothing is retried.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from fleetops.core.identifiers import is_draft_mission_id
from fleetops.errors.taxonomy import PersistenceError

logger = logging.getLogger("providers.missions")

DEFAULT_MISSIONS_PATH = "/api/fleet-ops/missions"


class MissionClient:
    """
    Client for ``<base_url><missions_path>``.

    Usage:
        async with MissionClient("http://localhost:8000") as client:
            saved = await client.save_mission(payload)
    """

    def __init__(
        self,
        base_url: str,
        missions_path: str = DEFAULT_MISSIONS_PATH,
        timeout_seconds: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.missions_path = "/" + missions_path.strip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout_seconds,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "MissionClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        path: str,
        mission_id: Optional[str] = None,
        **kwargs: Any,
    ) -> Any:
        client = self._get_client()
        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise PersistenceError(f"{method} {path} failed: {e}", mission_id=mission_id) from e

        if response.status_code >= 400:
            detail = _error_detail(response)
            logger.error(f"{method} {path} returned {response.status_code}: {detail}")
            raise PersistenceError(
                f"{method} {path} returned {response.status_code}: {detail}",
                status_code=response.status_code,
                mission_id=mission_id,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise PersistenceError(f"{method} {path} returned invalid JSON", mission_id=mission_id) from e

    # ==================== Operations ====================

    async def list_missions(
        self,
        status: Optional[str] = None,
        leader_id: Optional[str] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Return the page envelope ``{items, page, pageSize, total, totalPages}``."""
        params = {}
        if status:
            params["status"] = status
        if leader_id:
            params["leaderId"] = leader_id
        if page is not None:
            params["page"] = page
        if page_size is not None:
            params["pageSize"] = page_size
        data = await self._request("GET", self.missions_path, params=params)
        if isinstance(data, list):
            return {"items": data, "page": 1, "pageSize": len(data), "total": len(data), "totalPages": 1}
        return data or {"items": []}

    async def get_mission(self, mission_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"{self.missions_path}/{mission_id}", mission_id=mission_id)

    async def create_mission(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", self.missions_path, json=payload, mission_id=payload.get("id"))

    async def update_mission(self, mission_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request(
            "PUT", f"{self.missions_path}/{mission_id}", json=payload, mission_id=mission_id,
        )

    async def save_mission(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST a draft that was never stored, PUT one that was."""
        mission_id = payload.get("id")
        if is_draft_mission_id(mission_id):
            return await self.create_mission(payload)
        return await self.update_mission(mission_id, payload)

    async def delete_mission(self, mission_id: str) -> None:
        await self._request("DELETE", self.missions_path, params={"id": mission_id}, mission_id=mission_id)


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        return str(body.get("error") or body.get("detail") or body)
    return str(body)
