"""API routes"""

from .health import router as health_router
from .debate import router as debate_router
from .content import router as content_router
from .practice import router as practice_router

__all__ = ["health_router", "debate_router", "content_router", "practice_router"]
