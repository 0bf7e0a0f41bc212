from .main import main_router
from .legacy import legacy_router

__all__ = ["main_router", "legacy_router"]
