"""Image Agent Service - vision analysis enriched with web search."""

from src.services.image_agent.router import router
from src.services.image_agent.service import image_agent

__all__ = ["image_agent", "router"]
