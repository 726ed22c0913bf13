"""Value types shared by the indexer, the reporter and the service adapter."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

DEFAULT_COLLECTION_ID = "ephemeral-faces-collection"
DEFAULT_MATCH_THRESHOLD = 80.0


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Resolved settings for one run; built once by ``config.resolve_run_config``."""

    source_dir: Path
    collection_id: str = DEFAULT_COLLECTION_ID
    match_threshold: float = DEFAULT_MATCH_THRESHOLD
    delete_after: bool = False
    force_recreate: bool = False
    save_json: bool = False
    verbose: bool = False
    region_name: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ImageFile:
    path: Path

    @property
    def filename(self) -> str:
        """The external image id this file is indexed under."""
        return self.path.name


@dataclass(frozen=True, slots=True)
class FaceRecord:
    face_id: str
    external_image_id: str

    @classmethod
    def from_api(cls, face: Mapping[str, Any]) -> "FaceRecord":
        return cls(
            face_id=face["FaceId"],
            external_image_id=face.get("ExternalImageId") or "",
        )


@dataclass(frozen=True, slots=True)
class FaceMatch:
    source_face_id: str
    source_external_image_id: str
    target_face_id: str
    target_external_image_id: str
    similarity: float

    @classmethod
    def from_api(cls, source: FaceRecord, match: Mapping[str, Any]) -> "FaceMatch":
        """Build a match from one ``FaceMatches`` entry of a SearchFaces response."""
        target = FaceRecord.from_api(match["Face"])
        return cls(
            source_face_id=source.face_id,
            source_external_image_id=source.external_image_id,
            target_face_id=target.face_id,
            target_external_image_id=target.external_image_id,
            similarity=float(match["Similarity"]),
        )


__all__ = [
    "DEFAULT_COLLECTION_ID",
    "DEFAULT_MATCH_THRESHOLD",
    "FaceMatch",
    "FaceRecord",
    "ImageFile",
    "RunConfig",
]
