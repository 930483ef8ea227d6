"""
fleetops - Mission composition and crew assignment engine

Assembles a mission from a personnel roster, a vessel roster and per-vessel
crew assignments, and decides whether the result may be saved.
"""

__version__ = "1.0.0"
