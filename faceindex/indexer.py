"""Submit each new image in the source directory to IndexFaces."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import AbstractSet, Any, Dict, Iterable, TextIO

from .models import ImageFile, RunConfig
from .rekognition import FaceCollectionService

logger = logging.getLogger(__name__)

RESULTS_SUFFIX = "_results.json"


@dataclass(slots=True)
class IndexSummary:
    indexed: int = 0
    skipped: int = 0
    faces: int = 0


def results_path(image: ImageFile) -> Path:
    """Sidecar path for the raw response, e.g. ``a.jpg`` -> ``a.jpg_results.json``."""
    return image.path.with_name(image.filename + RESULTS_SUFFIX)


def _write_results(image: ImageFile, response: Dict[str, Any]) -> Path:
    path = results_path(image)
    # ResponseMetadata carries datetimes from the HTTP layer.
    path.write_text(json.dumps(response, indent=2, default=str) + "\n", encoding="utf-8")
    return path


def index_images(
    service: FaceCollectionService,
    cfg: RunConfig,
    images: Iterable[ImageFile],
    already_indexed: AbstractSet[str],
    out: TextIO,
) -> IndexSummary:
    """Index every image whose filename is not in ``already_indexed``.

    ``already_indexed`` is the set of external image ids in the collection
    before the loop started; it is not refreshed while indexing. Remote
    failures propagate and stop the loop.
    """
    summary = IndexSummary()
    for image in images:
        if image.filename in already_indexed:
            summary.skipped += 1
            if cfg.verbose:
                print(f"skipping {image.filename}: already indexed in {cfg.collection_id}", file=out)
            logger.debug("Skipped %s", image.path)
            continue

        image_bytes = image.path.read_bytes()
        started = time.perf_counter()
        response = service.index_faces(cfg.collection_id, image_bytes, image.filename)
        elapsed_ms = (time.perf_counter() - started) * 1000.0

        face_count = len(response.get("FaceRecords", []))
        summary.indexed += 1
        summary.faces += face_count

        if cfg.verbose or face_count != 1:
            print(f"found {face_count} faces in {image.filename} in {elapsed_ms:.0f} ms", file=out)

        unindexed = response.get("UnindexedFaces") or []
        if unindexed:
            logger.info("%d face(s) in %s were not indexed", len(unindexed), image.filename)

        if cfg.save_json:
            path = _write_results(image, response)
            logger.info("Wrote %s", path)

    return summary


__all__ = ["IndexSummary", "RESULTS_SUFFIX", "index_images", "results_path"]
