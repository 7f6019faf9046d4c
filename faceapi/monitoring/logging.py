"""Logging setup for applications using the face client."""

from __future__ import annotations

import logging

from faceapi.config.settings import FaceSettings, get_settings

TRANSPORT_LOGGERS = ("httpx", "httpcore")


def configure_logging(settings: FaceSettings | None = None, transport_level: int = logging.WARNING) -> None:
    """Configure the root logger at the settings' ``log_level``.

    The httpx and httpcore loggers are held at ``transport_level`` so that
    per-request lines do not drown the client's own failure logs at DEBUG.
    """

    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)
