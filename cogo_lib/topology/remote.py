# -*- coding: utf-8 -*-
"""Geometry engine backed by a spatial database exposed over HTTP RPC.

The database publishes four functions (``st_overlaps``, ``st_contains``,
``st_find_gaps``, ``st_isvalid``) that are called with
``POST {base_url}/rpc/<function>`` and a JSON body, and answer with a JSON
object.  Any transport failure, non-2xx status, undecodable body or
``error`` member in the reply raises
:class:`~cogo_lib.errors.GeometryEngineError`.

Configuration is read from the environment (or a ``.env`` file)::

    COGO_ENGINE_BASE_URL=https://db.example.org/rest/v1
    COGO_ENGINE_API_KEY=...
    COGO_ENGINE_TIMEOUT=30
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

from cogo_lib.constants import DEFAULT_SRID
from cogo_lib.constants import ENGINE_TIMEOUT
from cogo_lib.errors import GeometryEngineError
from cogo_lib.geometry import GeometryAdapter
from cogo_lib.geometry import exterior_points
from cogo_lib.models import Point2D
from cogo_lib.topology.engine import GeometryEngine
from cogo_lib.topology.models import ContainmentResult
from cogo_lib.topology.models import GapRecord
from cogo_lib.topology.models import GapResult
from cogo_lib.topology.models import OverlapResult
from cogo_lib.topology.models import ValidityResult

logger = logging.getLogger(__name__)


class EngineSettings(BaseSettings):
    """Connection settings of the remote geometry engine."""

    model_config = SettingsConfigDict(
        env_prefix="COGO_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    base_url: str | None = None
    api_key: str | None = None
    timeout: float = ENGINE_TIMEOUT

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)


def _points(operation: str, value: Any) -> list[Point2D]:
    """Read coordinates given as GeoJSON, ``{x, y}`` objects or pairs."""
    if not value:
        return []
    try:
        if isinstance(value, dict):
            geometry = GeometryAdapter.validate_python({**value, "srid": DEFAULT_SRID})
            return exterior_points(geometry)
        return [
            Point2D(x=item["x"], y=item["y"])
            if isinstance(item, dict)
            else Point2D(x=item[0], y=item[1])
            for item in value
        ]
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise GeometryEngineError(operation, f"Malformed coordinates: {exc}") from exc


class RemoteEngine(GeometryEngine):
    """Geometry engine calling database RPC functions with httpx.

    Args:
        settings: Connection settings, read from the environment by default
        client: Pre-built client (for connection reuse or testing).  A
            client created by the engine is closed by :meth:`aclose`.
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.settings = settings or EngineSettings()
        self._client = client
        self._owns_client = client is None

    @property
    def name(self) -> str:
        return "Remote Engine"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            if self.settings.api_key:
                headers["apikey"] = self.settings.api_key
                headers["Authorization"] = f"Bearer {self.settings.api_key}"
            self._client = httpx.AsyncClient(
                timeout=self.settings.timeout, headers=headers
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> RemoteEngine:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _rpc(
        self,
        operation: str,
        function: str,
        payload: dict[str, Any],
        required: str,
    ) -> dict[str, Any]:
        if not self.settings.is_configured:
            raise GeometryEngineError(operation, "No engine base URL configured")

        url = f"{self.settings.base_url.rstrip('/')}/rpc/{function}"
        try:
            response = await self._get_client().post(url, json=payload)
        except httpx.HTTPError as exc:
            raise GeometryEngineError(operation, f"Request failed: {exc}") from exc

        if response.is_error:
            raise GeometryEngineError(
                operation, f"{function} returned HTTP {response.status_code}"
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise GeometryEngineError(operation, "Reply is not valid JSON") from exc

        if not isinstance(data, dict):
            raise GeometryEngineError(operation, "Reply is not a JSON object")
        if data.get("error"):
            raise GeometryEngineError(operation, str(data["error"]))
        if required not in data:
            raise GeometryEngineError(operation, f"Reply has no '{required}' member")

        logger.debug("%s %s -> %s", function, list(payload), list(data))
        return data

    async def overlaps(self, wkt1: str, wkt2: str, tolerance: float) -> OverlapResult:
        data = await self._rpc(
            "overlaps",
            "st_overlaps",
            {"geometry1_wkt": wkt1, "geometry2_wkt": wkt2, "tolerance": tolerance},
            "overlaps",
        )
        try:
            return OverlapResult(
                overlaps=bool(data.get("overlaps")),
                overlap_area=float(data.get("overlap_area") or 0.0),
                overlap_coordinates=_points("overlaps", data.get("overlap_coordinates")),
            )
        except (ValueError, TypeError) as exc:
            raise GeometryEngineError("overlaps", f"Malformed reply: {exc}") from exc

    async def contains(
        self, parent_wkt: str, child_wkt: str, allow_touching: bool
    ) -> ContainmentResult:
        data = await self._rpc(
            "contains",
            "st_contains",
            {
                "parent_wkt": parent_wkt,
                "child_wkt": child_wkt,
                "allow_touching": allow_touching,
            },
            "contains",
        )
        return ContainmentResult(
            contains=bool(data.get("contains")),
            touching=bool(data.get("touching")),
        )

    async def find_gaps(
        self, section_wkts: Sequence[str], parent_wkt: str, min_area: float
    ) -> GapResult:
        data = await self._rpc(
            "find_gaps",
            "st_find_gaps",
            {
                "sections_wkt": list(section_wkts),
                "parent_wkt": parent_wkt,
                "min_area": min_area,
            },
            "gaps",
        )
        gaps = data.get("gaps") or []
        if not isinstance(gaps, list):
            raise GeometryEngineError("find_gaps", "Reply 'gaps' is not a list")

        if not all(isinstance(gap, dict) for gap in gaps):
            raise GeometryEngineError(
                "find_gaps", "Reply 'gaps' holds a non-object entry"
            )

        try:
            return GapResult(
                gaps=[
                    GapRecord(
                        geometry=gap.get("geometry"),
                        area=float(gap.get("area") or 0.0),
                        coordinates=_points("find_gaps", gap.get("coordinates")),
                    )
                    for gap in gaps
                ]
            )
        except (ValueError, TypeError) as exc:
            raise GeometryEngineError("find_gaps", f"Malformed reply: {exc}") from exc

    async def is_valid(self, wkt: str, srid: int) -> ValidityResult:
        data = await self._rpc(
            "is_valid", "st_isvalid", {"geometry_wkt": wkt, "srid": srid}, "is_valid"
        )
        try:
            return ValidityResult(
                is_valid=bool(data.get("is_valid")),
                reason=data.get("reason"),
            )
        except ValueError as exc:
            raise GeometryEngineError("is_valid", f"Malformed reply: {exc}") from exc
