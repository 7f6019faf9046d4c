"""Shared fixtures: an in-memory stand-in for the remote face API."""

from __future__ import annotations

import json
import uuid
from typing import Any

import httpx
import pytest

from faceapi.api.face_client import FaceServiceClient
from faceapi.config.settings import FaceSettings


def _not_found(code: str) -> httpx.Response:
    return httpx.Response(404, json={"error": {"code": code, "message": f"{code}."}})


class FakeFaceApi:
    """Routes face API requests against in-memory groups, persons and faces."""

    def __init__(self) -> None:
        self.groups: dict[str, dict[str, Any]] = {}
        self.persons: dict[str, list[dict[str, Any]]] = {}
        self.faces: dict[str, dict[str, Any]] = {}
        self.detected: list[dict[str, Any]] = []
        self.requests: list[httpx.Request] = []

    def add_group(self, name: str) -> str:
        group_id = str(uuid.uuid4())
        self.groups[group_id] = {
            "largePersonGroupId": group_id,
            "name": name,
            "userData": None,
            "recognitionModel": "recognition_03",
        }
        self.persons[group_id] = []
        return group_id

    def add_person(self, group_id: str, name: str) -> str:
        person_id = str(uuid.uuid4())
        self.persons[group_id].append(
            {"personId": person_id, "name": name, "userData": None, "persistedFaceIds": []},
        )
        return person_id

    def requests_to(self, method: str, path_suffix: str) -> list[httpx.Request]:
        return [
            request
            for request in self.requests
            if request.method == method and request.url.path.endswith(path_suffix)
        ]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        parts = request.url.path.removeprefix("/face/v1.0/").split("/")
        body = None
        if request.headers.get("content-type", "").startswith("application/json"):
            body = json.loads(request.content)

        if parts == ["detect"]:
            return httpx.Response(200, json=self.detected)
        if parts == ["identify"]:
            return httpx.Response(
                200,
                json=[{"faceId": face_id, "candidates": []} for face_id in body["faceIds"]],
            )
        if parts[0] != "largepersongroups":
            return httpx.Response(404)
        if len(parts) == 1:
            return httpx.Response(200, json=list(self.groups.values()))

        group_id = parts[1]
        if len(parts) == 2:
            if request.method == "PUT":
                self.groups[group_id] = {
                    "largePersonGroupId": group_id,
                    "name": body["name"],
                    "userData": None,
                    "recognitionModel": body["recognitionModel"],
                }
                self.persons[group_id] = []
                return httpx.Response(200)
            if group_id not in self.groups:
                return _not_found("LargePersonGroupNotFound")
            if request.method == "DELETE":
                del self.groups[group_id]
                return httpx.Response(200)
            return httpx.Response(200, json=self.groups[group_id])

        if parts[2] == "train":
            return httpx.Response(202)
        if parts[2] == "training":
            return httpx.Response(
                200,
                json={
                    "status": "succeeded",
                    "createdDateTime": "2026-10-18T10:00:00Z",
                    "lastActionDateTime": "2026-10-18T10:00:05Z",
                    "lastSuccessfulTrainingDateTime": "2026-10-18T10:00:05Z",
                    "message": None,
                },
            )

        persons = self.persons[group_id]
        if len(parts) == 3:
            if request.method == "POST":
                return httpx.Response(200, json={"personId": self.add_person(group_id, body["name"])})
            return httpx.Response(200, json=persons)

        person = next((item for item in persons if item["personId"] == parts[3]), None)
        if person is None:
            return _not_found("PersonNotFound")
        if len(parts) == 4:
            return httpx.Response(200, json=person)
        if len(parts) == 5:
            face_id = str(uuid.uuid4())
            self.faces[face_id] = {
                "persistedFaceId": face_id,
                "userData": request.url.params.get("userData"),
            }
            person["persistedFaceIds"].append(face_id)
            return httpx.Response(200, json={"persistedFaceId": face_id})
        if parts[5] not in self.faces:
            return _not_found("PersistedFaceNotFound")
        return httpx.Response(200, json=self.faces[parts[5]])


def _detected_face(face_id: str | None = None) -> dict[str, Any]:
    """Build a detection payload entry shaped like the remote response."""

    return {
        "faceId": face_id or str(uuid.uuid4()),
        "recognitionModel": "recognition_03",
        "faceRectangle": {"top": 54, "left": 112, "width": 96, "height": 96},
        "faceAttributes": {
            "age": 31.0,
            "gender": "female",
            "smile": 0.82,
            "glasses": "NoGlasses",
            "headPose": {"pitch": 1.2, "roll": -3.4, "yaw": 5.0},
            "emotion": {"happiness": 0.82, "neutral": 0.18},
            "facialHair": {"moustache": 0.0, "beard": 0.0, "sideburns": 0.0},
        },
    }


@pytest.fixture
def detected_face():
    return _detected_face


@pytest.fixture
def settings() -> FaceSettings:
    return FaceSettings(endpoint="https://face.test/", api_key="test-key")


@pytest.fixture
def fake_api() -> FakeFaceApi:
    return FakeFaceApi()


@pytest.fixture
def face_client(settings: FaceSettings, fake_api: FakeFaceApi) -> FaceServiceClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_api))
    return FaceServiceClient(settings, http_client=http_client)
