"""OpenCV webcam capture provider."""

import logging

import cv2

from nutriscan.domain.capture import CapturedImage
from nutriscan.domain.errors import DeviceAccessError
from nutriscan.services.capture import CaptureProvider

logger = logging.getLogger(__name__)


class CV2CameraProvider(CaptureProvider):
    """Capture provider reading JPEG snapshots from a local webcam."""

    def __init__(self, index: int = 0, jpeg_quality: int = 80) -> None:
        self.index = index
        self.jpeg_quality = jpeg_quality
        self._cap = None

    @property
    def is_open(self) -> bool:
        return self._cap is not None and self._cap.isOpened()

    def open(self) -> None:
        if self.is_open:
            return
        self._cap = cv2.VideoCapture(self.index)
        if not self._cap.isOpened():
            self._cap.release()
            self._cap = None
            raise DeviceAccessError(f"Unable to open camera {self.index}")
        logger.info("Opened camera %s", self.index)

    def capture(self) -> CapturedImage:
        if self._cap is None or not self._cap.isOpened():
            raise DeviceAccessError("Camera is not open")
        ok, frame = self._cap.read()
        if not ok or frame is None:
            raise DeviceAccessError("Camera frame capture failed")
        ok, buf = cv2.imencode(
            ".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, self.jpeg_quality]
        )
        if not ok:
            raise DeviceAccessError("Camera frame could not be encoded")
        return CapturedImage(data=bytes(buf), mime_type="image/jpeg")

    def switch_device(self) -> None:
        """Move to the next device index, wrapping back to 0 when absent."""
        self.close()
        self.index += 1
        try:
            self.open()
        except DeviceAccessError:
            if self.index == 0:
                raise
            self.index = 0
            self.open()

    def close(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.info("Released camera %s", self.index)
