"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from nutriscan.adapters.cv2_camera import CV2CameraProvider
from nutriscan.adapters.openai_analysis_client import OpenAIAnalysisClient
from nutriscan.config import Settings
from nutriscan.services.analysis import AnalysisService
from nutriscan.services.capture import CaptureProvider
from nutriscan.services.scanner import ScannerStateMachine


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    analysis_service: AnalysisService
    scanner: ScannerStateMachine
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    openai_client = (
        OpenAIAnalysisClient.create(resolved_settings.openai_api_key)
        if resolved_settings.openai_api_key
        else None
    )
    analysis_service = AnalysisService(
        client=openai_client,
        model=resolved_settings.openai_model,
        temperature=resolved_settings.openai_temperature,
        timeout_seconds=resolved_settings.analysis_timeout_seconds,
    )
    camera = _build_camera(resolved_settings)
    scanner = ScannerStateMachine(analysis_service=analysis_service, camera=camera)

    async def close_resources() -> None:
        await scanner.aclose()
        if openai_client is not None:
            await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        analysis_service=analysis_service,
        scanner=scanner,
        close_resources=close_resources,
    )


def _build_camera(settings: Settings) -> CaptureProvider | None:
    if settings.camera_index is None:
        return None
    return CV2CameraProvider(
        index=settings.camera_index, jpeg_quality=settings.camera_jpeg_quality
    )
