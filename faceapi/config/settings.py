"""Face service configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def _load_env_file(path: str = ".env") -> None:
    """Populate os.environ from the provided .env file if it exists."""

    env_path = Path(path)
    if not env_path.exists():
        return

    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


@dataclass(frozen=True, slots=True)
class FaceSettings:
    """Connection settings for the remote face API."""

    endpoint: str
    api_key: str
    recognition_model: str = "recognition_03"
    detection_model: str = "detection_01"
    request_timeout: float = 30.0
    log_level: str = "INFO"


def _build_settings() -> FaceSettings:
    _load_env_file()

    return FaceSettings(
        endpoint=os.getenv("AZURE_FACE_ENDPOINT", ""),
        api_key=os.getenv("AZURE_FACE_KEY", ""),
        recognition_model=os.getenv("AZURE_FACE_RECOGNITION_MODEL", "recognition_03"),
        detection_model=os.getenv("AZURE_FACE_DETECTION_MODEL", "detection_01"),
        request_timeout=float(os.getenv("AZURE_FACE_REQUEST_TIMEOUT", "30")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )


@lru_cache(maxsize=1)
def get_settings() -> FaceSettings:
    """Return cached settings instance."""

    return _build_settings()
