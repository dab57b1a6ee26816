"""Request models for the scanner API."""

from pydantic import BaseModel


class UploadRequest(BaseModel):
    """An image submitted as a data URL."""

    image: str


class ApiViewRequest(BaseModel):
    """Toggle for the diagnostic API overlay."""

    show: bool
