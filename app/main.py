# app/main.py
from contextlib import asynccontextmanager
import logging
import sys
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.core.config import Settings, settings
from app.core.logging_middleware import LoggingMiddleware
from app.database.document_store import JsonFileDocumentStore
from app.database.json_assignment import JsonAssignmentRepository
from app.services.identity_service import AnonymousIdentityProvider
from app.services.upload_service import UploadPlacer
from app.routers.v1 import health
from app.routers.v1 import assignment
from app.routers.v1 import submission

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s :: %(message)s",
    stream=sys.stdout,
)

logger = logging.getLogger(__name__)


def create_app(config: Settings = settings) -> FastAPI:
    store = JsonFileDocumentStore(config.data_file)
    placer = UploadPlacer(config.upload_dir, config.upload_url_prefix)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.ensure_ready()
        placer.ensure_dir()
        logger.info("Documento %s pronto, upload in %s", store.path, placer.upload_dir)

        app.state.assignment_repo = JsonAssignmentRepository(store)
        app.state.upload_placer = placer
        app.state.identity_provider = AnonymousIdentityProvider()
        yield

    app = FastAPI(
        title="Assignment Tracker",
        description="Assignment e consegne (upload di file) su un documento JSON",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins, allow_credentials=True,
        allow_methods=["*"], allow_headers=["*"],
    )

    app.include_router(health.router,     prefix="/api/v1", tags=["health"])
    app.include_router(assignment.router, prefix="/api/v1", tags=["assignments"])
    app.include_router(submission.router, prefix="/api/v1", tags=["submissions"])

    # solo lettura, downloadUrl = prefisso + "/" + nome salvato; la directory la crea il lifespan
    app.mount(
        placer.url_prefix,
        StaticFiles(directory=placer.upload_dir, check_dir=False),
        name="uploads",
    )
    return app

app = create_app()
