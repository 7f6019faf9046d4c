"""Client for the remote face detection and recognition API."""

from .errors import AmbiguousMatchError, FaceServiceError, FaceServiceRequestError, NameConflictError
from .face_client import FaceServiceClient
from .models import (
    DetectedFace,
    FaceAttributeType,
    IdentifyResult,
    PersistedFace,
    Person,
    PersonGroup,
    TrainingStatus,
)

__all__ = [
    "AmbiguousMatchError",
    "DetectedFace",
    "FaceAttributeType",
    "FaceServiceClient",
    "FaceServiceError",
    "FaceServiceRequestError",
    "IdentifyResult",
    "NameConflictError",
    "PersistedFace",
    "Person",
    "PersonGroup",
    "TrainingStatus",
]
