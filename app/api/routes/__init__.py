from fastapi import APIRouter
from app.api.routes import generation, probe, normalize, health

api_router = APIRouter()

# Include all route modules
api_router.include_router(health.router)
api_router.include_router(generation.router)
api_router.include_router(probe.router)
api_router.include_router(normalize.router)
