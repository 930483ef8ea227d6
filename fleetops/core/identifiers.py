"""
core/identifiers.py - Synthetic identifier allocation

Every synthetic vessel and mission id in the package comes from here.
"""

from __future__ import annotations
from typing import Callable, Optional
import itertools
import string
import random
import threading
import time

DRAFT_MISSION_PREFIX = "mission-"
SYNTHETIC_VESSEL_PREFIX = "ship-"

_ALPHABET = string.digits + string.ascii_lowercase


def _now_millis() -> int:
    return int(time.time() * 1000)


class IdAllocator:
    """
    Allocates ids of the form ``<prefix><millis>-<suffix>``.

    The suffix mixes a process-wide counter with random base36 characters so
    two ids allocated in the same millisecond never collide.
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None, seed: Optional[int] = None):
        self._clock = clock or _now_millis
        self._counter = itertools.count(1)
        self._random = random.Random(seed)
        self._lock = threading.Lock()

    def _suffix(self, length: int = 6) -> str:
        with self._lock:
            n = next(self._counter)
            rand = "".join(self._random.choice(_ALPHABET) for _ in range(length))
        return f"{_to_base36(n)}{rand}"

    def vessel_id(self) -> str:
        """Allocate a synthetic vessel id, e.g. ``ship-1718000000000-1k3x9a2``."""
        return f"{SYNTHETIC_VESSEL_PREFIX}{self._clock()}-{self._suffix()}"

    def mission_id(self) -> str:
        """Allocate a draft mission id, e.g. ``mission-1718000000000``."""
        return f"{DRAFT_MISSION_PREFIX}{self._clock()}"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


def is_draft_mission_id(mission_id: Optional[str]) -> bool:
    """True when the id is missing or was allocated locally for an unsaved draft."""
    return not mission_id or mission_id.startswith(DRAFT_MISSION_PREFIX)


# Process-wide allocator
default_allocator = IdAllocator()


def new_vessel_id() -> str:
    return default_allocator.vessel_id()


def new_mission_id() -> str:
    return default_allocator.mission_id()
