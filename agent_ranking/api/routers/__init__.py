"""
agent_ranking/api/routers package marker.
"""

from agent_ranking.api.routers.rankings import router as rankings_router

__all__ = ["rankings_router"]
