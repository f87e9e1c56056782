"""API routes."""

from fastapi import APIRouter

from campaignforge.api.routes import forge, health, rules, summoning

api_router = APIRouter()

api_router.include_router(health.router, tags=["Health"])
api_router.include_router(forge.router, prefix="/forge", tags=["Forge"])
api_router.include_router(rules.router, prefix="/rules", tags=["Rules"])
api_router.include_router(summoning.router, prefix="/summoning", tags=["Summoning Circle"])
