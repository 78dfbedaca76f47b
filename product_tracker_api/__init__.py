"""
Product Tracker API - REST gateway for the ProductTracker contract.

Provides REST endpoints for:
- Listing products (optionally by owner)
- Creating products
- Reading a product and its update history
- Appending history updates
- Health checks
"""

__version__ = "0.1.0"
