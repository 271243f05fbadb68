"""Tool handlers exposed over MCP."""

from pricetracker.api.tools import PriceTrackerTools

__all__ = ["PriceTrackerTools"]
