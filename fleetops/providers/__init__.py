"""
fleetops/providers/ - External collaborators

User directory, vessel compendium and the mission persistence API client.
"""

from .compendium import VesselCompendium, slugify
from .directory import UserDirectory
from .missions import MissionClient

__all__ = [
    "VesselCompendium",
    "slugify",
    "UserDirectory",
    "MissionClient",
]
