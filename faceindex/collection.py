"""Collection setup before indexing and teardown after reporting."""

from __future__ import annotations

import logging

from .rekognition import FaceCollectionService

logger = logging.getLogger(__name__)


def ensure_collection(
    service: FaceCollectionService, collection_id: str, force_recreate: bool = False
) -> bool:
    """Make sure ``collection_id`` exists, optionally emptying it first.

    Returns True when the collection was (re)created by this call and False
    when an existing collection is reused with its faces intact.
    """
    if collection_id in service.list_collections():
        if not force_recreate:
            logger.info("Reusing existing collection %s", collection_id)
            return False
        logger.info("Recreating collection %s", collection_id)
        service.delete_collection(collection_id)
    else:
        logger.info("Creating collection %s", collection_id)

    service.create_collection(collection_id)
    return True


def delete_collection(service: FaceCollectionService, collection_id: str) -> None:
    logger.info("Deleting collection %s", collection_id)
    service.delete_collection(collection_id)


__all__ = ["delete_collection", "ensure_collection"]
