"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shapesmith.config import settings

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.shapesmith_log_level.upper(), logging.DEBUG),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Shapesmith",
        description="Procedural geometry engine with array, path and boolean modifiers for vector shapes",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Import all modifier modules to trigger registration
    register_modifiers()

    from shapesmith.api.router import api_router

    app.include_router(api_router)

    return app


def register_modifiers() -> None:
    """Import all modifier modules so @modifier decorators fire."""
    import importlib
    import pkgutil

    for package_name in ["shapesmith.engine.arrays", "shapesmith.engine.paths"]:
        package = importlib.import_module(package_name)
        for _, module_name, _ in pkgutil.iter_modules(package.__path__):
            importlib.import_module(f"{package_name}.{module_name}")


app = create_app()
