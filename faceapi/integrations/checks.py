"""Connectivity checks for the remote face API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

from faceapi.api.face_client import FaceServiceClient
from faceapi.config.settings import get_settings


@dataclass(slots=True)
class IntegrationCheckResult:
    """Structured result describing the integration check outcome."""

    name: str
    success: bool
    message: str


async def _run_check(
    name: str,
    factory: Callable[[], Awaitable[bool]],
    success_message: str,
) -> IntegrationCheckResult:
    try:
        result = await factory()
    except Exception as exc:
        return IntegrationCheckResult(name=name, success=False, message=str(exc))

    if result:
        return IntegrationCheckResult(name=name, success=True, message=success_message)
    return IntegrationCheckResult(
        name=name,
        success=False,
        message="Service responded with non-success status.",
    )


async def check_face_service() -> IntegrationCheckResult:
    """Ping the face API and return the result."""

    async def _ping() -> bool:
        client = FaceServiceClient(get_settings())
        try:
            return await client.ping()
        finally:
            await client.close()

    return await _run_check(
        name="Azure Face",
        factory=_ping,
        success_message="Face API is reachable.",
    )


async def run_all_checks() -> list[IntegrationCheckResult]:
    """Execute all integration checks concurrently."""

    return list(await asyncio.gather(check_face_service()))
