"""API routes package."""

from fastapi import APIRouter

from roombill.api.routes import audit, bills, floors, health, meters, rooms, settings, tenants

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(floors.router)
api_router.include_router(rooms.router)
api_router.include_router(tenants.router)
api_router.include_router(settings.router)
api_router.include_router(meters.router)
api_router.include_router(bills.router)
api_router.include_router(audit.router)
