from __future__ import annotations

import argparse
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gearwire.app.api import devices, inference, workspaces
from gearwire.app.core.config import Settings, get_settings
from gearwire.app.core.container import AppContainer
from gearwire.app.core.logging import configure_logging
from gearwire.app.services.catalog_service import CatalogService
from gearwire.app.services.compatibility_service import CompatibilityService
from gearwire.app.services.inference_service import InferenceService
from gearwire.app.services.recommendation_service import RecommendationService
from gearwire.app.services.routing_service import AudioRoutingService
from gearwire.app.services.workspace_service import WorkspaceService


def _build_container(settings: Settings) -> AppContainer:
    catalog_service = CatalogService(catalog_path=settings.catalog_path)
    compatibility_service = CompatibilityService()
    inference_service = InferenceService(compatibility_service=compatibility_service)
    recommendation_service = RecommendationService(inference_service=inference_service)
    routing_service = AudioRoutingService()
    workspace_service = WorkspaceService(
        settings=settings,
        catalog_service=catalog_service,
        inference_service=inference_service,
        recommendation_service=recommendation_service,
        routing_service=routing_service,
    )

    return AppContainer(
        settings=settings,
        catalog_service=catalog_service,
        compatibility_service=compatibility_service,
        inference_service=inference_service,
        recommendation_service=recommendation_service,
        routing_service=routing_service,
        workspace_service=workspace_service,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.debug)
    app.state.container = _build_container(settings)
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(devices.router, prefix=settings.api_prefix)
    app.include_router(inference.router, prefix=settings.api_prefix)
    app.include_router(workspaces.router, prefix=settings.api_prefix)

    @app.get("/api/health")
    async def health() -> dict[str, str | int]:
        container: AppContainer = app.state.container
        return {
            "status": "ok",
            "catalog_devices": len(container.catalog_service.list_devices()),
        }

    return app


app = create_app()


def run() -> None:
    parser = argparse.ArgumentParser(description="Run the Gearwire backend")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--log-level", default="info")
    parser.add_argument("--reload", action=argparse.BooleanOptionalAction, default=False)
    parser.add_argument("--access-log", action=argparse.BooleanOptionalAction, default=True)
    parser.add_argument("--debug", action=argparse.BooleanOptionalAction, default=None)
    parser.add_argument("--catalog", default=None, help="Path to an alternative device catalog JSON file.")
    args = parser.parse_args()

    if args.debug is True:
        os.environ["GEARWIRE_DEBUG"] = "1"
    elif args.debug is False:
        os.environ["GEARWIRE_DEBUG"] = "0"
    if args.catalog:
        os.environ["GEARWIRE_CATALOG_PATH"] = args.catalog

    get_settings.cache_clear()
    globals()["app"] = create_app()

    uvicorn.run(
        "gearwire.app.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
        access_log=args.access_log,
    )


if __name__ == "__main__":
    run()
