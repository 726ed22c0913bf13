"""All-pairs match report for the faces in a collection."""

from __future__ import annotations

import logging
from typing import Iterable, List, TextIO

from .models import FaceMatch, FaceRecord
from .rekognition import FaceCollectionService

logger = logging.getLogger(__name__)

# Face ids are 36-character UUIDs; image columns fit a typical camera filename.
COLUMNS = (
    ("Face ID", 36, "<"),
    ("Image", 20, "<"),
    ("Matched Face ID", 36, "<"),
    ("Matched Image", 20, "<"),
    ("Similarity", 10, ">"),
)


def _border() -> str:
    return "+" + "+".join("-" * (width + 2) for _, width, _ in COLUMNS) + "+"


def _row(values: Iterable[str]) -> str:
    cells = [f" {value:{align}{width}} " for value, (_, width, align) in zip(values, COLUMNS)]
    return "|" + "|".join(cells) + "|"


def format_match(match: FaceMatch) -> str:
    return _row(
        (
            match.source_face_id,
            match.source_external_image_id,
            match.target_face_id,
            match.target_external_image_id,
            f"{match.similarity:f}",
        )
    )


def format_table(matches: Iterable[FaceMatch]) -> List[str]:
    """Render the fixed-width table; overlong values widen their row instead of truncating."""
    border = _border()
    lines = [border, _row(name for name, _, _ in COLUMNS), border]
    lines.extend(format_match(match) for match in matches)
    lines.append(border)
    return lines


def find_matches(
    service: FaceCollectionService,
    collection_id: str,
    faces: Iterable[FaceRecord],
    match_threshold: float,
) -> List[FaceMatch]:
    """Search the collection once per face; every returned match is kept.

    A pair A/B appears twice when both searches return the other face.
    """
    matches: List[FaceMatch] = []
    for face in faces:
        found = service.search_faces(collection_id, face, match_threshold)
        logger.debug("%s (%s): %d match(es)", face.face_id, face.external_image_id, len(found))
        matches.extend(found)
    return matches


def print_match_report(
    service: FaceCollectionService,
    collection_id: str,
    match_threshold: float,
    out: TextIO,
) -> List[FaceMatch]:
    faces = service.list_faces(collection_id)
    matches = find_matches(service, collection_id, faces, match_threshold)
    for line in format_table(matches):
        print(line, file=out)
    return matches


__all__ = ["COLUMNS", "find_matches", "format_match", "format_table", "print_match_report"]
