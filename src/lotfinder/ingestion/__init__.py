"""Ingestion layer.

Turns raw catalog listing records into normalized :class:`~lotfinder.models.Vehicle`
objects. Everything here is total: bad input degrades to defaults, never raises.
"""

__all__: list[str] = []
