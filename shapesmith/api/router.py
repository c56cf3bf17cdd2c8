"""Master API router: mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from shapesmith.api import boolean, health, modify

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(modify.router)
api_router.include_router(boolean.router)
