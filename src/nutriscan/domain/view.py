"""View states for the scan flow."""

from dataclasses import dataclass
from enum import StrEnum
from typing import ClassVar

from nutriscan.domain.capture import CapturedImage, ScanResult


class ViewState(StrEnum):
    """Names of the top-level views."""

    IDLE = "IDLE"
    CAPTURING = "CAPTURING"
    ANALYZING = "ANALYZING"
    RESULTS = "RESULTS"
    ERROR = "ERROR"


@dataclass(frozen=True)
class Idle:
    """Home screen, nothing in flight."""

    state: ClassVar[ViewState] = ViewState.IDLE


@dataclass(frozen=True)
class Capturing:
    """Scanner is open; ``device_error`` set means upload is the fallback."""

    state: ClassVar[ViewState] = ViewState.CAPTURING
    device_error: str | None = None


@dataclass(frozen=True)
class Analyzing:
    """One analysis call is in flight for ``image``."""

    state: ClassVar[ViewState] = ViewState.ANALYZING
    image: CapturedImage


@dataclass(frozen=True)
class Results:
    """A finished scan; ``show_api`` overlays the diagnostic view."""

    state: ClassVar[ViewState] = ViewState.RESULTS
    scan: ScanResult
    show_api: bool = False


@dataclass(frozen=True)
class Error:
    """The last analysis failed."""

    state: ClassVar[ViewState] = ViewState.ERROR
    message: str


View = Idle | Capturing | Analyzing | Results | Error
