"""Amazon Rekognition collection operations used by the indexer.

Everything above this module talks to a :class:`FaceCollectionService`; the
boto3-backed :class:`RekognitionFaceCollection` is the production
implementation, and tests substitute an in-memory one.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Iterable, List, Optional, Protocol

import boto3

from .models import FaceMatch, FaceRecord

logger = logging.getLogger(__name__)

# SearchFaces rejects anything larger.
MAX_SEARCH_FACES = 4096


class FaceCollectionService(Protocol):
    def list_collections(self) -> List[str]: ...

    def create_collection(self, collection_id: str) -> None: ...

    def delete_collection(self, collection_id: str) -> None: ...

    def list_faces(self, collection_id: str) -> List[FaceRecord]: ...

    def index_faces(
        self, collection_id: str, image_bytes: bytes, external_image_id: str
    ) -> Dict[str, Any]: ...

    def search_faces(
        self, collection_id: str, face: FaceRecord, match_threshold: float
    ) -> List[FaceMatch]: ...


def _aws_region() -> str:
    """Resolve AWS region for Rekognition calls.

    We look at AWS_REGION, AWS_DEFAULT_REGION, REGION in that order, falling
    back to us-east-1 if none are set.
    """
    return (
        os.getenv("AWS_REGION")
        or os.getenv("AWS_DEFAULT_REGION")
        or os.getenv("REGION")
        or "us-east-1"
    )


class RekognitionFaceCollection:
    """Thin wrapper around the boto3 Rekognition client."""

    def __init__(self, region_name: Optional[str] = None, client: Any = None) -> None:
        self._region = region_name or _aws_region()
        self._rekognition = client or boto3.client("rekognition", region_name=self._region)
        logger.info("Using Rekognition in region %s", self._region)

    def _paginate(self, operation: str, result_key: str, **params: Any) -> Iterable[Any]:
        call = getattr(self._rekognition, operation)
        token: Optional[str] = None
        while True:
            resp = call(NextToken=token, **params) if token else call(**params)
            yield from resp.get(result_key, [])
            token = resp.get("NextToken")
            if not token:
                break

    def list_collections(self) -> List[str]:
        return list(self._paginate("list_collections", "CollectionIds"))

    def create_collection(self, collection_id: str) -> None:
        resp = self._rekognition.create_collection(CollectionId=collection_id)
        logger.debug("Created collection %s: %s", collection_id, resp.get("CollectionArn"))

    def delete_collection(self, collection_id: str) -> None:
        self._rekognition.delete_collection(CollectionId=collection_id)

    def list_faces(self, collection_id: str) -> List[FaceRecord]:
        return [
            FaceRecord.from_api(face)
            for face in self._paginate("list_faces", "Faces", CollectionId=collection_id)
        ]

    def index_faces(
        self, collection_id: str, image_bytes: bytes, external_image_id: str
    ) -> Dict[str, Any]:
        """Detect and register every face in the image; returns the raw response."""
        return self._rekognition.index_faces(
            CollectionId=collection_id,
            Image={"Bytes": image_bytes},
            ExternalImageId=external_image_id,
            DetectionAttributes=["ALL"],
        )

    def search_faces(
        self, collection_id: str, face: FaceRecord, match_threshold: float
    ) -> List[FaceMatch]:
        resp = self._rekognition.search_faces(
            CollectionId=collection_id,
            FaceId=face.face_id,
            FaceMatchThreshold=match_threshold,
            MaxFaces=MAX_SEARCH_FACES,
        )
        return [FaceMatch.from_api(face, match) for match in resp.get("FaceMatches", [])]


__all__ = ["FaceCollectionService", "MAX_SEARCH_FACES", "RekognitionFaceCollection"]
