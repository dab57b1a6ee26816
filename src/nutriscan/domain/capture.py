"""Models for captured images and scan results."""

import base64
import binascii
from dataclasses import dataclass

from nutriscan.domain.analysis import FoodAnalysis


@dataclass(frozen=True)
class CapturedImage:
    """A still image with its MIME type."""

    data: bytes
    mime_type: str = "image/jpeg"

    def __post_init__(self) -> None:
        if not self.mime_type.startswith("image/"):
            raise ValueError(f"Unsupported MIME type: {self.mime_type}")
        if not self.data:
            raise ValueError("Image is empty")

    @property
    def base64_data(self) -> str:
        """Return the image bytes as base64 text."""
        return base64.b64encode(self.data).decode("utf-8")

    @property
    def data_url(self) -> str:
        """Return the image as a base64 data URL."""
        return f"data:{self.mime_type};base64,{self.base64_data}"

    @classmethod
    def from_data_url(cls, data_url: str) -> "CapturedImage":
        """Parse a ``data:<mime>;base64,<payload>`` URL."""
        header, sep, payload = data_url.partition(",")
        if not sep or not header.startswith("data:") or ";base64" not in header:
            raise ValueError("Expected a base64 data URL")
        mime_type = header[len("data:") :].split(";", 1)[0]
        try:
            data = base64.b64decode(payload, validate=True)
        except binascii.Error as exc:
            raise ValueError("Invalid base64 payload") from exc
        return cls(data=data, mime_type=mime_type)


@dataclass(frozen=True)
class ScanResult:
    """A captured image paired with its analysis."""

    image: CapturedImage
    analysis: FoodAnalysis
