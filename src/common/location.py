"""Location keys shared by the response and plan caches."""

from __future__ import annotations


def location_key(latitude: float, longitude: float) -> str:
    """Round coordinates to ~11 km cells: (-34.6037, -58.3816) -> "-34.6:-58.4"."""
    return f"{latitude:.1f}:{longitude:.1f}"
