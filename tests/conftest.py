"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from nutriscan.config import Settings
from nutriscan.containers import AppContainer
from nutriscan.domain.capture import CapturedImage
from nutriscan.domain.errors import DeviceAccessError
from nutriscan.services.analysis import AnalysisClient, AnalysisService
from nutriscan.services.capture import CaptureProvider
from nutriscan.services.scanner import ScannerStateMachine

JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg"


def apple_payload() -> dict[str, object]:
    return {
        "is_food": True,
        "food_name": "Apple",
        "serving_size_estimate": "1 medium",
        "calories_kcal": 95,
        "macronutrients": {"protein_g": 0.5, "carbs_g": 25, "fat_g": 0.3},
        "micronutrients": {"sugar_g": 19, "fiber_g": 4},
        "health_score": 85,
        "short_description": "Apples are rich in fiber.",
        "confidence": 90,
        "alternatives": ["Pear", "Orange"],
    }


def not_food_payload() -> dict[str, object]:
    return {
        "is_food": False,
        "food_name": "Office chair",
        "calories_kcal": 0,
        "macronutrients": {"protein_g": 0, "carbs_g": 0, "fat_g": 0},
        "micronutrients": {"sugar_g": 0, "fiber_g": 0},
        "health_score": 0,
        "short_description": "This is furniture.",
    }


@dataclass
class FakeAnalysisClient(AnalysisClient):
    """Fake analysis client returning a fixed payload or raising."""

    payload: dict[str, object] = field(default_factory=apple_payload)
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        temperature: float,
        image: CapturedImage,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        self.calls.append(
            {
                "model": model,
                "temperature": temperature,
                "image": image,
                "schema": schema,
                "prompt": prompt,
            }
        )
        if self.error is not None:
            raise self.error
        return self.payload


@dataclass
class FakeCamera(CaptureProvider):
    """Fake capture provider tracking device ownership."""

    image: CapturedImage = field(
        default_factory=lambda: CapturedImage(data=JPEG_BYTES, mime_type="image/jpeg")
    )
    fail_open: bool = False
    fail_capture: bool = False
    is_open: bool = False
    opens: int = 0
    closes: int = 0
    switches: int = 0

    def open(self) -> None:
        if self.fail_open:
            raise DeviceAccessError("permission denied")
        self.is_open = True
        self.opens += 1

    def capture(self) -> CapturedImage:
        if self.fail_capture or not self.is_open:
            raise DeviceAccessError("no frame")
        return self.image

    def switch_device(self) -> None:
        self.close()
        self.switches += 1
        self.open()

    def close(self) -> None:
        if self.is_open:
            self.closes += 1
        self.is_open = False


@pytest.fixture
def settings() -> Settings:
    return Settings(openai_api_key="openai-key", analysis_timeout_seconds=5.0)


@pytest.fixture
def analysis_client() -> FakeAnalysisClient:
    return FakeAnalysisClient()


@pytest.fixture
def camera() -> FakeCamera:
    return FakeCamera()


@pytest.fixture
def container(
    settings: Settings,
    analysis_client: FakeAnalysisClient,
    camera: FakeCamera,
) -> AppContainer:
    analysis_service = AnalysisService(
        client=analysis_client,
        model=settings.openai_model,
        temperature=settings.openai_temperature,
        timeout_seconds=settings.analysis_timeout_seconds,
    )
    scanner = ScannerStateMachine(analysis_service=analysis_service, camera=camera)

    async def close_resources() -> None:
        await scanner.aclose()

    return AppContainer(
        settings=settings,
        analysis_service=analysis_service,
        scanner=scanner,
        close_resources=close_resources,
    )
