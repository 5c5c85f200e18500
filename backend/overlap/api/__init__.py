"""
API routers
"""

from fastapi import APIRouter
from .game_routes import router as game_router
from .round_routes import router as round_router

# Main router
api_router = APIRouter()

# Room lifecycle and round play share the /overlap prefix
api_router.include_router(game_router, prefix="/overlap", tags=["Rooms"])
api_router.include_router(round_router, prefix="/overlap", tags=["Rounds"])
