"""PriceTracker: live e-commerce product data and price tracking over MCP."""

__version__ = "1.0.0"
