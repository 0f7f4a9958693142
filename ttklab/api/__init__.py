from fastapi import APIRouter
from .routes import weapons, ttk

api_router = APIRouter()

api_router.include_router(weapons.router, prefix="/weapons", tags=["weapons"])
api_router.include_router(ttk.router, prefix="/ttk", tags=["ttk"])
