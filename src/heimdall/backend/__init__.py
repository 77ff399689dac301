"""
backend package

FastAPI-based REST API for the Heimdall safety monitoring system.

Provides:
- POST /api/scan → Analyse one webcam frame (also POST /)
- GET /logs → Audit log for the admin screen
- GET /stats → Scan / violation counters
- DELETE /logs → Clear the audit log
- GET / → Health check
"""

from .app import app, create_app
from .config import get_settings

__all__ = ["app", "create_app", "get_settings"]

__version__ = "1.0.0"
