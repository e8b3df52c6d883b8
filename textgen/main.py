# textgen/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from textgen.core import config
from textgen.core.logging_setup import setup_logging
from textgen.api.routers.health import router as health_router
from textgen.api.routers.providers import router as providers_router
from textgen.api.routers.generate import router as generate_router


def create_app() -> FastAPI:
    setup_logging(config.LOG_LEVEL)
    app = FastAPI(title="Text Generation Gateway", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(health_router)
    app.include_router(providers_router)
    app.include_router(generate_router)

    return app


app = create_app()
