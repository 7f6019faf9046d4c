"""Async client facade for the Azure Face REST API."""

from faceapi.api import FaceServiceClient
from faceapi.config.settings import FaceSettings, get_settings

__all__ = ["FaceServiceClient", "FaceSettings", "get_settings"]

__version__ = "0.1.0"
