"""Agregador de routers de la API."""
from fastapi import APIRouter
from app.api.routers import health, session, vision, schedule

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(session.router)
api_router.include_router(vision.router)
api_router.include_router(schedule.router)
