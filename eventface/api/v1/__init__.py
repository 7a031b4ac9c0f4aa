from .media_controller import router as media_router
from .match_controller import router as match_router


__all__ = ["media_router", "match_router"]
