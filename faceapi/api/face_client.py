"""Async wrapper around the Azure Face large person group endpoints."""

from __future__ import annotations

import asyncio
import functools
import json
import logging
import uuid
from typing import Any, Awaitable, BinaryIO, Callable, Mapping, TypeVar

import httpx

from faceapi.api.errors import AmbiguousMatchError, FaceServiceRequestError, NameConflictError
from faceapi.api.models import (
    DETECTION_ATTRIBUTES,
    DetectedFace,
    IdentifyResult,
    PersistedFace,
    Person,
    PersonGroup,
    TrainingStatus,
)
from faceapi.config.settings import FaceSettings

API_PATH = "/face/v1.0"
PAGE_SIZE = 1000
IDENTIFY_BATCH_SIZE = 10

_T = TypeVar("_T")


def _logged(func: Callable[..., Awaitable[_T]]) -> Callable[..., Awaitable[_T]]:
    """Log any failure of the wrapped operation and re-raise it unchanged."""

    @functools.wraps(func)
    async def wrapper(self: FaceServiceClient, *args: Any, **kwargs: Any) -> _T:
        try:
            return await func(self, *args, **kwargs)
        except Exception as exc:
            self._logger.exception("%s failed: %s", func.__name__, exc)
            raise

    return wrapper


class FaceServiceClient:
    """Authenticated request/response bridge to the remote face API.

    The client keeps no state besides its settings and the transport handle,
    so one instance can be shared by concurrent tasks. An injected
    ``httpx.AsyncClient`` is used as-is and never closed by this class.
    """

    def __init__(
        self,
        settings: FaceSettings,
        http_client: httpx.AsyncClient | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if not settings.endpoint or not settings.api_key:
            raise RuntimeError("Face API endpoint or key is not configured.")

        self._settings = settings
        self._base_url = settings.endpoint.rstrip("/") + API_PATH
        self._headers = {"Ocp-Apim-Subscription-Key": settings.api_key}
        self._logger = logger or logging.getLogger(__name__)
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=settings.request_timeout)

    async def __aenter__(self) -> FaceServiceClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""

        if self._owns_client:
            await self._client.aclose()

    async def _request_json(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json_body: Any = None,
        content: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        response = await self._client.request(
            method,
            f"{self._base_url}{path}",
            params=params,
            json=json_body,
            content=content,
            headers={**self._headers, **(headers or {})},
        )
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise self._request_error(exc.response) from exc
        if not response.content:
            return None
        return response.json()

    @staticmethod
    def _request_error(response: httpx.Response) -> FaceServiceRequestError:
        error_code = None
        try:
            error_code = response.json()["error"]["code"]
        except (ValueError, KeyError, TypeError):
            pass
        return FaceServiceRequestError(
            reason=response.reason_phrase,
            details=response.text,
            status_code=response.status_code,
            error_code=error_code,
        )

    async def _list_paged(self, path: str, id_field: str, params: Mapping[str, Any] | None = None) -> list[dict]:
        items: list[dict] = []
        start: str | None = None
        while True:
            page_params: dict[str, Any] = {**(params or {}), "top": PAGE_SIZE}
            if start is not None:
                page_params["start"] = start
            page = await self._request_json("GET", path, params=page_params) or []
            items.extend(page)
            if len(page) < PAGE_SIZE:
                return items
            start = page[-1][id_field]

    # Detection

    def _detect_params(self) -> dict[str, Any]:
        return {
            "returnFaceId": "true",
            "returnFaceLandmarks": "false",
            "returnFaceAttributes": ",".join(attribute.value for attribute in DETECTION_ATTRIBUTES),
            "recognitionModel": self._settings.recognition_model,
            "returnRecognitionModel": "true",
            "detectionModel": self._settings.detection_model,
        }

    async def _detect_url(self, image_url: str) -> list[DetectedFace]:
        payload = await self._request_json(
            "POST",
            "/detect",
            params=self._detect_params(),
            json_body={"url": image_url},
        )
        return [DetectedFace.model_validate(face) for face in payload or []]

    @_logged
    async def detect_faces(self, image_url: str) -> list[DetectedFace]:
        """Detect faces in the image at ``image_url`` with every supported attribute."""

        return await self._detect_url(image_url)

    @_logged
    async def detect_faces_in_stream(self, image: bytes | BinaryIO) -> list[DetectedFace]:
        """Detect faces in raw image bytes or a binary file object.

        File objects are read in a worker thread.
        """

        content = image if isinstance(image, bytes) else await asyncio.to_thread(image.read)
        payload = await self._request_json(
            "POST",
            "/detect",
            params=self._detect_params(),
            content=content,
            headers={"Content-Type": "application/octet-stream"},
        )
        return [DetectedFace.model_validate(face) for face in payload or []]

    # Large person groups

    async def _fetch_groups(self) -> list[PersonGroup]:
        raw = await self._list_paged(
            "/largepersongroups",
            "largePersonGroupId",
            params={"returnRecognitionModel": "true"},
        )
        return [PersonGroup.model_validate(group) for group in raw]

    async def _find_group_by_name(self, name: str) -> PersonGroup | None:
        matches = [group for group in await self._fetch_groups() if group.name == name]
        if len(matches) > 1:
            raise AmbiguousMatchError(f"{len(matches)} person groups are named {name!r}.")
        return matches[0] if matches else None

    @_logged
    async def list_groups(self) -> list[PersonGroup]:
        """Return every large person group of the subscription."""

        return await self._fetch_groups()

    @_logged
    async def get_group(self, group_id: str) -> PersonGroup:
        payload = await self._request_json(
            "GET",
            f"/largepersongroups/{group_id}",
            params={"returnRecognitionModel": "true"},
        )
        return PersonGroup.model_validate(payload)

    @_logged
    async def get_group_by_name(self, name: str) -> PersonGroup | None:
        """Return the group whose name matches exactly, or ``None``.

        Raises ``AmbiguousMatchError`` when several groups share the name.
        """

        return await self._find_group_by_name(name)

    @_logged
    async def create_group(self, name: str, ignore_duplicate_name: bool = False) -> str:
        """Create a group named ``name`` and return its generated id."""

        if not ignore_duplicate_name:
            existing = await self._fetch_groups()
            if any(group.name == name for group in existing):
                raise NameConflictError(f"A person group named {name!r} already exists.")

        group_id = str(uuid.uuid4())
        await self._request_json(
            "PUT",
            f"/largepersongroups/{group_id}",
            json_body={"name": name, "recognitionModel": self._settings.recognition_model},
        )
        self._logger.info("Created person group %s (%s)", group_id, name)
        return group_id

    @_logged
    async def delete_group(self, group_id: str) -> None:
        await self._request_json("DELETE", f"/largepersongroups/{group_id}")

    @_logged
    async def delete_groups_by_name(self, name: str) -> int:
        """Delete every group named ``name`` one by one and return how many were removed.

        Deletions are independent: a failure leaves earlier deletions in place.
        """

        deleted = 0
        for group in await self._fetch_groups():
            if group.name != name:
                continue
            await self._request_json("DELETE", f"/largepersongroups/{group.large_person_group_id}")
            deleted += 1
        return deleted

    @_logged
    async def train_group(self, group_id: str) -> None:
        """Start training the group. Training runs remotely; this does not wait for it."""

        await self._request_json("POST", f"/largepersongroups/{group_id}/train")

    @_logged
    async def get_training_status(self, group_id: str) -> TrainingStatus:
        payload = await self._request_json("GET", f"/largepersongroups/{group_id}/training")
        return TrainingStatus.model_validate(payload)

    # Persons

    async def _fetch_persons(self, group_id: str) -> list[Person]:
        raw = await self._list_paged(f"/largepersongroups/{group_id}/persons", "personId")
        return [Person.model_validate(person) for person in raw]

    async def _find_person_by_name(self, group_id: str, name: str) -> Person | None:
        matches = [person for person in await self._fetch_persons(group_id) if person.name == name]
        if len(matches) > 1:
            raise AmbiguousMatchError(f"{len(matches)} persons in group {group_id} are named {name!r}.")
        return matches[0] if matches else None

    @_logged
    async def list_persons(self, group_id: str) -> list[Person]:
        return await self._fetch_persons(group_id)

    @_logged
    async def get_person(self, group_id: str, person_id: str) -> Person:
        payload = await self._request_json("GET", f"/largepersongroups/{group_id}/persons/{person_id}")
        return Person.model_validate(payload)

    @_logged
    async def get_person_by_name(self, group_id: str, name: str) -> Person | None:
        """Same matching rules as ``get_group_by_name``, scoped to one group."""

        return await self._find_person_by_name(group_id, name)

    @_logged
    async def create_person(self, group_id: str, name: str, ignore_duplicate_name: bool = False) -> Person:
        if not ignore_duplicate_name:
            existing = await self._fetch_persons(group_id)
            if any(person.name == name for person in existing):
                raise NameConflictError(f"A person named {name!r} already exists in group {group_id}.")

        payload = await self._request_json(
            "POST",
            f"/largepersongroups/{group_id}/persons",
            json_body={"name": name},
        )
        return Person(person_id=payload["personId"], name=name)

    # Persisted faces

    @_logged
    async def add_face_to_person(self, group_id: str, person_id: str, image_url: str) -> PersistedFace:
        """Register the face at ``image_url`` for a person, remembering the URL as user data."""

        user_data = json.dumps({"SourceUrl": image_url})
        payload = await self._request_json(
            "POST",
            f"/largepersongroups/{group_id}/persons/{person_id}/persistedfaces",
            params={"userData": user_data, "detectionModel": self._settings.detection_model},
            json_body={"url": image_url},
        )
        return PersistedFace(persisted_face_id=payload["persistedFaceId"], user_data=user_data)

    @_logged
    async def get_face(self, group_id: str, person_id: str, face_id: str) -> PersistedFace:
        payload = await self._request_json(
            "GET",
            f"/largepersongroups/{group_id}/persons/{person_id}/persistedfaces/{face_id}",
        )
        return PersistedFace.model_validate(payload)

    # Identification

    @_logged
    async def identify_persons(
        self,
        image_url: str,
        group_id: str,
        *,
        max_candidates: int = 1,
        confidence_threshold: float | None = None,
    ) -> list[IdentifyResult]:
        """Detect faces in the image and identify all of them against a trained group.

        Face ids are sent together, split only by the remote limit of
        ``IDENTIFY_BATCH_SIZE`` ids per request.
        """

        faces = await self._detect_url(image_url)
        face_ids = [face.face_id for face in faces if face.face_id]
        results: list[IdentifyResult] = []
        for start in range(0, len(face_ids), IDENTIFY_BATCH_SIZE):
            body: dict[str, Any] = {
                "faceIds": face_ids[start:start + IDENTIFY_BATCH_SIZE],
                "largePersonGroupId": group_id,
                "maxNumOfCandidatesReturned": max_candidates,
            }
            if confidence_threshold is not None:
                body["confidenceThreshold"] = confidence_threshold
            payload = await self._request_json("POST", "/identify", json_body=body)
            results.extend(IdentifyResult.model_validate(item) for item in payload or [])
        return results

    @_logged
    async def ping(self) -> bool:
        """Return ``True`` when the service answers a group listing call."""

        payload = await self._request_json("GET", "/largepersongroups", params={"top": 1})
        return isinstance(payload, list)

