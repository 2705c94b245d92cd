"""FastAPI entrypoint and HTTP routes."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, FastAPI, File, HTTPException, Request, Response, UploadFile, status

from imagin.api.schemas import EditorViewResponse, EditRequest, SessionCreated
from imagin.config.settings import get_settings
from imagin.imggen.edit_client import GeminiEditClient
from imagin.imgproc.normalize import ImageNormalizer
from imagin.imgproc.payload import RawImageFile
from imagin.monitoring.logging import configure_logging
from imagin.services.orchestrator import EditOrchestrator, OrchestratorBusyError
from imagin.services.presentation import render
from imagin.services.sessions import SessionRegistry


def _view(session_id: str, orchestrator: EditOrchestrator) -> EditorViewResponse:
    state = orchestrator.state
    return EditorViewResponse.from_view(
        session_id,
        type(state).__name__.lower(),
        orchestrator.instruction,
        render(state, orchestrator.instruction),
    )


def get_registry(request: Request) -> SessionRegistry:
    """Return the app's session registry, building the default one on first use."""

    app = request.app
    if app.state.registry is None:
        settings = get_settings()
        client = GeminiEditClient(settings)
        app.state.edit_client = client
        app.state.registry = SessionRegistry(
            ImageNormalizer(settings.max_image_dimension, settings.jpeg_quality),
            client,
        )
    return app.state.registry


def _get_session(session_id: str, registry: SessionRegistry) -> EditOrchestrator:
    orchestrator = registry.get(session_id)
    if orchestrator is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown session.")
    return orchestrator


def create_app(registry: SessionRegistry | None = None) -> FastAPI:
    """Initialise the FastAPI application."""

    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging()
        yield
        client = app.state.edit_client
        if client is not None:
            await client.close()

    app = FastAPI(
        title="Imagin API",
        version="0.1.0",
        docs_url="/docs" if settings.environment != "prod" else None,
        redoc_url="/redoc" if settings.environment != "prod" else None,
        lifespan=lifespan,
    )
    app.state.registry = registry
    app.state.edit_client = None

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple health endpoint used for readiness probes."""

        return {"status": "ok"}

    @app.post("/sessions", status_code=status.HTTP_201_CREATED, tags=["editor"])
    async def create_session(registry: SessionRegistry = Depends(get_registry)) -> SessionCreated:
        session_id, _ = registry.create()
        return SessionCreated(session_id=session_id)

    @app.get("/sessions/{session_id}", tags=["editor"])
    async def get_session(
        session_id: str,
        registry: SessionRegistry = Depends(get_registry),
    ) -> EditorViewResponse:
        return _view(session_id, _get_session(session_id, registry))

    @app.post("/sessions/{session_id}/image", tags=["editor"])
    async def upload_image(
        session_id: str,
        file: UploadFile = File(...),
        registry: SessionRegistry = Depends(get_registry),
    ) -> EditorViewResponse:
        orchestrator = _get_session(session_id, registry)
        data = await file.read()
        await orchestrator.upload(
            RawImageFile(data=data, content_type=file.content_type or "", filename=file.filename),
        )
        return _view(session_id, orchestrator)

    @app.post("/sessions/{session_id}/edit", tags=["editor"])
    async def edit_image(
        session_id: str,
        body: EditRequest,
        registry: SessionRegistry = Depends(get_registry),
    ) -> EditorViewResponse:
        orchestrator = _get_session(session_id, registry)
        try:
            await orchestrator.request_edit(body.instruction)
        except OrchestratorBusyError as exc:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
        return _view(session_id, orchestrator)

    @app.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["editor"])
    async def delete_session(
        session_id: str,
        registry: SessionRegistry = Depends(get_registry),
    ) -> Response:
        if not registry.drop(session_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown session.")
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return app


app = create_app()
