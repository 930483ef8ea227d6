"""
fleetops/providers/compendium.py - Vessel compendium

Reference catalog of ship types (manufacturer, crew capacity, size, role
tags, dimensions). Loaded once per instance from a URL or a JSON file.
A catalog that cannot be read is logged and treated as empty.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

from fleetops.core.models import Vessel
from fleetops.errors.taxonomy import ReferenceDataError

logger = logging.getLogger("providers.compendium")

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Lowercase, with every run of non-alphanumerics collapsed to one dash."""
    return _SLUG_STRIP.sub("-", (name or "").lower()).strip("-")


def _entries_from_payload(payload: Any) -> List[Dict[str, Any]]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("items", "ships"):
            if isinstance(payload.get(key), list):
                return payload[key]
    raise ReferenceDataError("compendium", "Compendium payload is not a list of ships")


class VesselCompendium:
    """
    Name-indexed ship catalog.

    Lookup order: exact name, case-insensitive name, slug.
    """

    def __init__(
        self,
        source: Optional[str] = None,
        entries: Optional[List[Vessel]] = None,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the compendium.

        Args:
            source: http(s) URL or path to a JSON file
            entries: Preloaded entries; skips loading when given
            timeout_seconds: HTTP timeout
            transport: Optional httpx transport (tests use MockTransport)
        """
        self.source = source
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self._entries: List[Vessel] = []
        self._by_name: Dict[str, Vessel] = {}
        self._by_lower: Dict[str, Vessel] = {}
        self._by_slug: Dict[str, Vessel] = {}
        self._loaded = False
        if entries is not None:
            self._index(entries)

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def entries(self) -> List[Vessel]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def _index(self, entries: List[Vessel]) -> None:
        self._entries = list(entries)
        self._by_name.clear()
        self._by_lower.clear()
        self._by_slug.clear()
        for entry in self._entries:
            # First entry wins on duplicate keys
            self._by_name.setdefault(entry.name, entry)
            self._by_lower.setdefault(entry.name.lower(), entry)
            self._by_slug.setdefault(slugify(entry.name), entry)
        self._loaded = True

    async def load(self) -> List[Vessel]:
        """Load and cache the catalog. Returns the cached entries on later calls."""
        if self._loaded:
            return self.entries

        if not self.source:
            logger.info("No compendium source configured, using empty catalog")
            self._index([])
            return []

        try:
            if self.source.startswith(("http://", "https://")):
                payload = await self._fetch_remote()
            else:
                payload = self._read_file()
            entries = [Vessel.from_dict(raw) for raw in _entries_from_payload(payload)]
        except (httpx.HTTPError, OSError, ValueError, ReferenceDataError) as e:
            logger.warning(f"Compendium unavailable ({self.source}): {e}")
            self._index([])
            return []

        self._index(entries)
        logger.info(f"Compendium loaded: {len(entries)} ships from {self.source}")
        return self.entries

    async def _fetch_remote(self) -> Any:
        async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
            response = await client.get(self.source)
            response.raise_for_status()
            return response.json()

    def _read_file(self) -> Any:
        with open(Path(self.source), "r", encoding="utf-8") as f:
            return json.load(f)

    def lookup(self, name: Optional[str]) -> Optional[Vessel]:
        """Find a catalog entry by ship name."""
        if not name:
            return None
        if name in self._by_name:
            return self._by_name[name]
        lowered = name.strip().lower()
        if lowered in self._by_lower:
            return self._by_lower[lowered]
        return self._by_slug.get(slugify(name))

    def resolve(self, name: Optional[str], ship_type: Optional[str] = None) -> Optional[Vessel]:
        """Look up by name, then by type when it differs from the name."""
        entry = self.lookup(name)
        if entry is None and ship_type and ship_type != name:
            entry = self.lookup(ship_type)
        return entry
