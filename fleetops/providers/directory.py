"""
fleetops/providers/directory.py - User directory provider

Fetches organization members with the ships they own and normalizes each
ship into a Vessel, enriched from the compendium where it is known.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from fleetops.core.identifiers import IdAllocator, default_allocator
from fleetops.core.models import Person, Vessel
from .compendium import VesselCompendium

logger = logging.getLogger("providers.directory")

# Defaults for ships the compendium does not know
UNNAMED_SHIP = "Unnamed Ship"
UNKNOWN_MANUFACTURER = "Unknown Manufacturer"
DEFAULT_CREW_CAPACITY = 1
DEFAULT_SIZE = "Medium"
DEFAULT_ROLE = "Multipurpose"
DEFAULT_STATUS = "Flight Ready"


def _capacity(value: Any) -> Optional[int]:
    try:
        return int(value) or None
    except (TypeError, ValueError):
        return None


class UserDirectory:
    """
    Member directory backed by ``GET <url>``.

    The endpoint may return a bare list or an ``{"items": [...]}`` wrapper.
    Any failure is logged and yields an empty directory.
    """

    def __init__(
        self,
        url: Optional[str],
        compendium: Optional[VesselCompendium] = None,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        allocator: Optional[IdAllocator] = None,
    ):
        self.url = url
        self.compendium = compendium or VesselCompendium()
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self._allocator = allocator or default_allocator

    async def fetch(self) -> List[Person]:
        """Fetch and normalize every member."""
        if not self.url:
            logger.info("No user directory configured")
            return []

        await self.compendium.load()

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = await client.get(self.url)
            if response.status_code != 200:
                logger.error(f"Users fetch failed: HTTP {response.status_code}")
                return []
            raw = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Users fetch failed: {e}")
            return []

        users = raw if isinstance(raw, list) else (raw or {}).get("items") or []
        people = [self.normalize_user(u) for u in users if isinstance(u, dict)]
        logger.info(f"Loaded {len(people)} members from directory")
        return people

    def normalize_user(self, raw: Dict[str, Any]) -> Person:
        person = Person(
            id=str(raw.get("id") or ""),
            display_name=raw.get("aydoHandle") or raw.get("name") or "",
        )
        person.owned_vessels = [
            self.normalize_ship(ship, person)
            for ship in raw.get("ships") or []
            if isinstance(ship, dict)
        ]
        return person

    def normalize_ship(self, raw: Dict[str, Any], owner: Person) -> Vessel:
        """
        Build a Vessel from a raw owned ship.

        Raw values win over compendium values. Ships missing from the
        compendium fall back to one crew seat, an unknown manufacturer and
        medium multipurpose defaults.
        """
        name = raw.get("name") or UNNAMED_SHIP
        ship_type = raw.get("type") or name
        vessel_id = str(raw.get("id") or raw.get("shipId") or "") or self._allocator.vessel_id()
        details = self.compendium.resolve(name, ship_type)

        if details is not None:
            return Vessel(
                vessel_id=vessel_id,
                name=name,
                type=ship_type,
                manufacturer=raw.get("manufacturer") or details.manufacturer,
                crew_capacity=_capacity(raw.get("crewRequirement")) or details.crew_capacity,
                image=raw.get("image") or details.image,
                size=details.size,
                role_tags=list(details.role_tags),
                owner_id=owner.id,
                owner_name=owner.display_name,
                cargo_capacity=details.cargo_capacity,
                length=details.length,
                beam=details.beam,
                height=details.height,
                speed_scm=details.speed_scm,
                speed_boost=details.speed_boost,
                status=details.status,
            )

        raw_role = raw.get("role")
        return Vessel(
            vessel_id=vessel_id,
            name=name,
            type=ship_type,
            manufacturer=raw.get("manufacturer") or UNKNOWN_MANUFACTURER,
            crew_capacity=_capacity(raw.get("crewRequirement")) or DEFAULT_CREW_CAPACITY,
            image=raw.get("image") or "",
            size=raw.get("size") or DEFAULT_SIZE,
            role_tags=[raw_role] if isinstance(raw_role, str) and raw_role else [DEFAULT_ROLE],
            owner_id=owner.id,
            owner_name=owner.display_name,
            cargo_capacity=raw.get("cargoCapacity"),
            length=raw.get("length"),
            beam=raw.get("beam"),
            height=raw.get("height"),
            speed_scm=raw.get("speedSCM"),
            status=DEFAULT_STATUS,
        )
