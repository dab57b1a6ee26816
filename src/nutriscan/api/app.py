"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from nutriscan.api.scan_models import ApiViewRequest, UploadRequest
from nutriscan.app_logging import configure_logging
from nutriscan.containers import AppContainer
from nutriscan.domain.capture import CapturedImage
from nutriscan.domain.errors import InvalidTransitionError
from nutriscan.services.analysis import ANALYSIS_SCHEMA, integration_code
from nutriscan.services.results import build_view_payload


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition(
        request: Request, exc: InvalidTransitionError
    ) -> JSONResponse:
        logger.info("Rejected trigger: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": str(exc), "state": exc.state},
        )

    def _view(request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        return build_view_payload(
            state_container.scanner.view, state_container.settings.openai_model
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/scan")
    async def current_view(request: Request) -> dict[str, object]:
        """Return the current view."""
        return _view(request)

    @app.post("/scan/start")
    async def start_scan(request: Request) -> dict[str, object]:
        """Open the scanner."""
        await request.app.state.container.scanner.start_scan()
        return _view(request)

    @app.post("/scan/cancel")
    async def cancel_scan(request: Request) -> dict[str, object]:
        """Close the scanner without capturing."""
        await request.app.state.container.scanner.cancel()
        return _view(request)

    @app.post("/scan/camera/switch")
    async def switch_camera(request: Request) -> dict[str, object]:
        """Switch to the next camera device."""
        await request.app.state.container.scanner.switch_camera()
        return _view(request)

    @app.post("/scan/capture", status_code=status.HTTP_202_ACCEPTED)
    async def capture(request: Request, wait: bool = False) -> dict[str, object]:
        """Snapshot the server-side camera and start analysis."""
        scanner = request.app.state.container.scanner
        await scanner.capture_frame()
        if wait:
            await scanner.wait()
        return _view(request)

    @app.post("/scan/upload", status_code=status.HTTP_202_ACCEPTED)
    async def upload(
        body: UploadRequest, request: Request, wait: bool = False
    ) -> dict[str, object]:
        """Submit an image captured by the client and start analysis."""
        try:
            image = CapturedImage.from_data_url(body.image)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        scanner = request.app.state.container.scanner
        await scanner.submit(image)
        if wait:
            await scanner.wait()
        return _view(request)

    @app.post("/scan/reset")
    async def reset(request: Request) -> dict[str, object]:
        """Return to the home view after a result or error."""
        request.app.state.container.scanner.reset()
        return _view(request)

    @app.post("/scan/api-view")
    async def api_view(body: ApiViewRequest, request: Request) -> dict[str, object]:
        """Show or hide the API overlay on results."""
        request.app.state.container.scanner.toggle_api_view(body.show)
        return _view(request)

    @app.get("/schema")
    async def schema() -> dict[str, object]:
        """Return the declared output schema."""
        return ANALYSIS_SCHEMA

    @app.get("/integration-code", response_class=PlainTextResponse)
    async def sample_code(request: Request) -> str:
        """Return a copyable integration sample."""
        return integration_code(request.app.state.container.settings.openai_model)

    return app
