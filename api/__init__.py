"""
HTTP API for the transaction notification gateway.

This package provides a single FastAPI application that exposes:
- Single-transaction processing
- Batch processing
- Delivery status lookup
"""

from api.main import app

__all__ = ["app"]
