"""View state machine coordinating capture, analysis and results."""

import asyncio
import logging
from dataclasses import dataclass, field

from nutriscan.domain.capture import CapturedImage, ScanResult
from nutriscan.domain.errors import DeviceAccessError, InvalidTransitionError
from nutriscan.domain.view import (
    Analyzing,
    Capturing,
    Error,
    Idle,
    Results,
    View,
)
from nutriscan.services.analysis import AnalysisService
from nutriscan.services.capture import CaptureProvider

logger = logging.getLogger(__name__)

ANALYSIS_FAILED_MESSAGE = "Failed to analyze image. Please try again."
DEVICE_ERROR_MESSAGE = (
    "Unable to access camera. Please allow permissions or use file upload."
)
NO_CAMERA_MESSAGE = "No server camera is configured. Please upload a photo."


@dataclass
class ScannerStateMachine:
    """Single-owner state machine for one scan at a time.

    Exactly one view is active. Triggers that are not valid for the current
    view raise ``InvalidTransitionError`` and leave it untouched. Device
    calls block, so they run in a worker thread; ``_device_lock`` keeps
    triggers from interleaving while one is waiting on the device.
    """

    analysis_service: AnalysisService
    camera: CaptureProvider | None = None
    view: View = field(default_factory=Idle)
    _task: asyncio.Task[None] | None = field(default=None, init=False, repr=False)
    _device_lock: asyncio.Lock = field(
        default_factory=asyncio.Lock, init=False, repr=False
    )

    async def start_scan(self) -> View:
        """Idle -> Capturing, acquiring the camera when one is configured."""
        async with self._device_lock:
            self._require("start scan", Idle)
            self.view = Capturing(device_error=await self._open_camera())
            return self.view

    async def cancel(self) -> View:
        """Capturing -> Idle, releasing the camera."""
        async with self._device_lock:
            self._require("cancel", Capturing)
            await self._release_camera()
            self.view = Idle()
            return self.view

    async def switch_camera(self) -> View:
        """Swap to the next capture device while Capturing."""
        async with self._device_lock:
            self._require("switch camera", Capturing)
            if self.camera is None:
                self.view = Capturing(device_error=NO_CAMERA_MESSAGE)
                return self.view
            try:
                await asyncio.to_thread(self.camera.switch_device)
            except DeviceAccessError:
                logger.warning("Camera switch failed", exc_info=True)
                self.view = Capturing(device_error=DEVICE_ERROR_MESSAGE)
            else:
                self.view = Capturing()
            return self.view

    async def capture_frame(self) -> asyncio.Task[None] | None:
        """Snapshot the camera and submit it.

        Device failures keep the machine in Capturing with the upload
        fallback offered and return ``None``.
        """
        async with self._device_lock:
            self._require("capture", Capturing)
            if self.camera is None:
                self.view = Capturing(device_error=NO_CAMERA_MESSAGE)
                return None
            try:
                image = await asyncio.to_thread(self.camera.capture)
            except DeviceAccessError:
                logger.warning("Camera capture failed", exc_info=True)
                self.view = Capturing(device_error=DEVICE_ERROR_MESSAGE)
                return None
            return await self._submit(image)

    async def submit(self, image: CapturedImage) -> asyncio.Task[None]:
        """Idle/Capturing -> Analyzing and schedule one analysis call."""
        async with self._device_lock:
            return await self._submit(image)

    def toggle_api_view(self, show: bool) -> View:
        """Show or hide the diagnostic overlay on Results."""
        self._require("toggle API view", Results)
        self.view = Results(scan=self.view.scan, show_api=show)
        return self.view

    def reset(self) -> View:
        """Results/Error -> Idle, discarding the result or message."""
        self._require("reset", Results, Error)
        self.view = Idle()
        return self.view

    async def wait(self) -> View:
        """Wait for the in-flight analysis, if any, and return the view."""
        if self._task is not None:
            await self._task
        return self.view

    async def aclose(self) -> None:
        """Cancel any in-flight analysis and release the camera."""
        task = self._task
        if task is not None:
            task.cancel()
            await asyncio.wait([task])
        async with self._device_lock:
            await self._release_camera()

    async def _submit(self, image: CapturedImage) -> asyncio.Task[None]:
        self._require("capture", Idle, Capturing)
        await self._release_camera()
        self.view = Analyzing(image=image)
        self._task = asyncio.get_running_loop().create_task(self._analyze(image))
        return self._task

    async def _analyze(self, image: CapturedImage) -> None:
        try:
            analysis = await self.analysis_service.analyze(image)
        except Exception:
            logger.exception("Food analysis failed")
            self.view = Error(message=ANALYSIS_FAILED_MESSAGE)
        else:
            self.view = Results(scan=ScanResult(image=image, analysis=analysis))
        finally:
            self._task = None

    async def _open_camera(self) -> str | None:
        if self.camera is None:
            return NO_CAMERA_MESSAGE
        try:
            await asyncio.to_thread(self.camera.open)
        except DeviceAccessError:
            logger.warning("Camera unavailable", exc_info=True)
            return DEVICE_ERROR_MESSAGE
        return None

    async def _release_camera(self) -> None:
        if self.camera is not None:
            await asyncio.to_thread(self.camera.close)

    def _require(self, trigger: str, *allowed: type) -> None:
        if not isinstance(self.view, allowed):
            raise InvalidTransitionError(trigger, self.view.state)
