"""Typed payloads exchanged with the face API."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FaceAttributeType(str, Enum):
    """Attributes the detection endpoint can return for every face."""

    ACCESSORIES = "accessories"
    AGE = "age"
    BLUR = "blur"
    EMOTION = "emotion"
    EXPOSURE = "exposure"
    FACIAL_HAIR = "facialHair"
    GENDER = "gender"
    GLASSES = "glasses"
    HAIR = "hair"
    HEAD_POSE = "headPose"
    MAKEUP = "makeup"
    NOISE = "noise"
    OCCLUSION = "occlusion"
    SMILE = "smile"


DETECTION_ATTRIBUTES: tuple[FaceAttributeType, ...] = tuple(FaceAttributeType)


class FaceApiModel(BaseModel):
    """Base model mapping snake_case fields onto the camelCase wire format."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FaceRectangle(FaceApiModel):
    top: int
    left: int
    width: int
    height: int


class HeadPose(FaceApiModel):
    pitch: float = 0.0
    roll: float = 0.0
    yaw: float = 0.0


class FaceAttributes(FaceApiModel):
    """Attribute values returned by detection; unknown keys are preserved."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    age: float | None = None
    gender: str | None = None
    smile: float | None = None
    glasses: str | None = None
    head_pose: HeadPose | None = None
    emotion: dict[str, float] | None = None
    facial_hair: dict[str, float] | None = None
    makeup: dict[str, bool] | None = None
    hair: dict[str, Any] | None = None
    occlusion: dict[str, bool] | None = None
    accessories: list[dict[str, Any]] | None = None
    blur: dict[str, Any] | None = None
    exposure: dict[str, Any] | None = None
    noise: dict[str, Any] | None = None


class DetectedFace(FaceApiModel):
    """A face found by a detection call. It is not persisted remotely."""

    face_id: str | None = None
    recognition_model: str | None = None
    face_rectangle: FaceRectangle
    face_landmarks: dict[str, Any] | None = None
    face_attributes: FaceAttributes | None = None


class PersonGroup(FaceApiModel):
    large_person_group_id: str
    name: str
    user_data: str | None = None
    recognition_model: str | None = None


class Person(FaceApiModel):
    person_id: str
    name: str | None = None
    user_data: str | None = None
    persisted_face_ids: list[str] = Field(default_factory=list)


class PersistedFace(FaceApiModel):
    persisted_face_id: str
    user_data: str | None = None


class IdentifyCandidate(FaceApiModel):
    person_id: str
    confidence: float


class IdentifyResult(FaceApiModel):
    """Candidates the service matched to a single detected face."""

    face_id: str
    candidates: list[IdentifyCandidate] = Field(default_factory=list)


class TrainingStatus(FaceApiModel):
    """Progress of a group training job (notstarted, running, succeeded, failed)."""

    status: str
    created_date_time: str | None = None
    last_action_date_time: str | None = None
    last_successful_training_date_time: str | None = None
    message: str | None = None
