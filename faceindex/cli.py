"""Command-line entry point: index a directory of faces and report matches.

Examples
--------
Index ./people into the default collection and show matches above 80%:
    index-faces ./people

Start from an empty collection, keep the raw responses and clean up after:
    index-faces --forceRecreate --saveImageData --delete ./people
"""

from __future__ import annotations

import logging
import sys
import time
from typing import Optional, Sequence, TextIO

from botocore.exceptions import BotoCoreError, ClientError

from .collection import delete_collection, ensure_collection
from .config import UsageError, build_parser, resolve_run_config
from .images import find_images
from .indexer import index_images
from .logging_utils import configure_logging
from .models import RunConfig
from .rekognition import FaceCollectionService, RekognitionFaceCollection
from .report import print_match_report

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = -1
EXIT_REMOTE_FAILURE = 1


def run(cfg: RunConfig, service: FaceCollectionService, out: TextIO) -> int:
    """Execute one indexing run against ``service``; remote errors propagate."""
    started = time.perf_counter()

    images = find_images(cfg.source_dir)
    if not images:
        print(f"No JPEG or PNG images found in {cfg.source_dir}", file=out)
        return EXIT_OK

    ensure_collection(service, cfg.collection_id, cfg.force_recreate)
    already_indexed = {face.external_image_id for face in service.list_faces(cfg.collection_id)}
    logger.info("%d image(s) already in %s", len(already_indexed), cfg.collection_id)

    summary = index_images(service, cfg, images, already_indexed, out)
    matches = print_match_report(service, cfg.collection_id, cfg.match_threshold, out)

    if cfg.delete_after:
        delete_collection(service, cfg.collection_id)

    elapsed = time.perf_counter() - started
    print(
        f"indexed {summary.indexed} image(s) with {summary.faces} face(s), "
        f"skipped {summary.skipped}, reported {len(matches)} match(es) in {elapsed:.2f} s",
        file=out,
    )
    return EXIT_OK


def main(
    argv: Optional[Sequence[str]] = None,
    service: Optional[FaceCollectionService] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    out = out or sys.stdout
    err = err or sys.stderr

    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if len(args.directories) != 1:
        parser.print_help(file=out)
        return EXIT_OK

    try:
        cfg = resolve_run_config(args)
    except UsageError as exc:
        print(f"error: {exc}", file=err)
        return EXIT_USAGE

    try:
        if service is None:
            service = RekognitionFaceCollection(region_name=cfg.region_name)
        return run(cfg, service, out)
    except (BotoCoreError, ClientError, OSError) as exc:
        logger.error("Aborting: %s", exc)
        return EXIT_REMOTE_FAILURE


if __name__ == "__main__":
    sys.exit(main())
