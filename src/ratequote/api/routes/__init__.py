"""Route group exports."""

from . import distance, fuel, health, market, quotes, tolls

__all__ = ["quotes", "distance", "tolls", "fuel", "market", "health"]
