from __future__ import annotations

import itertools
from pathlib import Path
from typing import Any, Dict, List, Tuple

import pytest
from PIL import Image

from faceindex.models import FaceMatch, FaceRecord


class FakeFaceCollection:
    """In-memory stand-in for Rekognition collections.

    ``face_counts`` maps an external image id to the number of faces the fake
    "detects" in it (default 1). ``similarity`` maps an unordered pair of
    external image ids to the similarity returned when searching between them.
    """

    def __init__(
        self,
        face_counts: Dict[str, int] | None = None,
        similarity: Dict[frozenset, float] | None = None,
    ) -> None:
        self.collections: Dict[str, List[FaceRecord]] = {}
        self.face_counts = face_counts or {}
        self.similarity = similarity or {}
        self.calls: List[Tuple[str, Any]] = []
        self._ids = itertools.count(1)

    def add_face(self, collection_id: str, external_image_id: str) -> FaceRecord:
        face = FaceRecord(f"face-{next(self._ids):04d}", external_image_id)
        self.collections[collection_id].append(face)
        return face

    def list_collections(self) -> List[str]:
        self.calls.append(("list_collections", None))
        return list(self.collections)

    def create_collection(self, collection_id: str) -> None:
        self.calls.append(("create_collection", collection_id))
        self.collections[collection_id] = []

    def delete_collection(self, collection_id: str) -> None:
        self.calls.append(("delete_collection", collection_id))
        del self.collections[collection_id]

    def list_faces(self, collection_id: str) -> List[FaceRecord]:
        self.calls.append(("list_faces", collection_id))
        return list(self.collections[collection_id])

    def index_faces(self, collection_id: str, image_bytes: bytes, external_image_id: str) -> Dict[str, Any]:
        self.calls.append(("index_faces", external_image_id))
        records = []
        for _ in range(self.face_counts.get(external_image_id, 1)):
            face = self.add_face(collection_id, external_image_id)
            records.append({"Face": {"FaceId": face.face_id, "ExternalImageId": external_image_id}})
        return {"FaceModelVersion": "6.0", "FaceRecords": records, "UnindexedFaces": []}

    def search_faces(self, collection_id: str, face: FaceRecord, match_threshold: float) -> List[FaceMatch]:
        self.calls.append(("search_faces", face.face_id))
        matches = []
        for other in self.collections[collection_id]:
            if other.face_id == face.face_id:
                continue
            score = self.similarity.get(frozenset((face.external_image_id, other.external_image_id)), 0.0)
            if score >= match_threshold:
                matches.append(
                    FaceMatch(face.face_id, face.external_image_id, other.face_id, other.external_image_id, score)
                )
        return matches

    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]


def write_image(path: Path, fmt: str = "JPEG") -> Path:
    Image.new("RGB", (16, 16), color=(200, 120, 80)).save(path, format=fmt)
    return path


@pytest.fixture
def fake_service() -> FakeFaceCollection:
    return FakeFaceCollection()


@pytest.fixture
def make_image():
    return write_image


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    for name in ("REKOGNITION_COLLECTION", "FACE_MATCH_THRESHOLD", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_REGION", "us-east-1")
