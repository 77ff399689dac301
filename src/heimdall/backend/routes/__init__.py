from .logs import router as logs_router
from .scan import router as scan_router

__all__ = ["logs_router", "scan_router"]
