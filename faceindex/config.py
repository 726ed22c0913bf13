"""Command-line parsing and run configuration for the face indexer.

Settings are layered, lowest precedence first:

    built-in defaults < config/face_indexer.yaml (or --config) < environment < flags

The environment variables read are ``REKOGNITION_COLLECTION``,
``FACE_MATCH_THRESHOLD`` and the usual AWS region variables.
"""

from __future__ import annotations

import argparse
import math
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .models import DEFAULT_COLLECTION_ID, DEFAULT_MATCH_THRESHOLD, RunConfig

CONFIG_FILENAME = "face_indexer.yaml"


class UsageError(ValueError):
    """Bad command-line input; reported before any remote call is made."""


# ---------------------------------------------------------------------------
# Defaults file
# ---------------------------------------------------------------------------


def find_config_file(filename: str = CONFIG_FILENAME) -> Path:
    """Locate a config file by walking up from this module's directory."""

    here = Path(__file__).resolve()
    for parent in [here.parent] + list(here.parents):
        candidate = parent / "config" / filename
        if candidate.exists():
            return candidate
    return here.parent.parent / "config" / filename


def load_defaults(path: Path) -> Dict[str, Any]:
    """Read the YAML defaults mapping; a missing file means no overrides."""

    if not path.exists():
        return {}

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise UsageError(f"could not parse config file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise UsageError(f"config file {path} must define a mapping")
    return data


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="index-faces",
        description=(
            "Index every JPEG/PNG face image in a directory into an Amazon "
            "Rekognition collection, then print all face matches above a "
            "similarity threshold."
        ),
    )
    parser.add_argument(
        "directories",
        nargs="*",
        metavar="directoryOfImagesWithFaces",
        help="Directory holding the images to index.",
    )
    parser.add_argument(
        "--collectionId",
        dest="collection_id",
        default=None,
        help=f"Rekognition collection to index into (default: {DEFAULT_COLLECTION_ID}).",
    )
    parser.add_argument(
        "--matchConfidenceThreshold",
        dest="match_threshold",
        default=None,
        help=f"Minimum similarity, 0-100, for a match to be reported (default: {DEFAULT_MATCH_THRESHOLD:g}).",
    )
    parser.add_argument(
        "--delete",
        dest="delete_after",
        action="store_true",
        help="Delete the collection after the match report is printed.",
    )
    parser.add_argument(
        "--forceRecreate",
        dest="force_recreate",
        action="store_true",
        help="Delete and recreate the collection if it already exists.",
    )
    parser.add_argument(
        "--saveImageData",
        dest="save_json",
        action="store_true",
        help="Write each raw IndexFaces response to <image>_results.json next to the image.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Report every image and skip; repeat for debug logging.",
    )
    parser.add_argument(
        "--region",
        default=None,
        help="AWS region for Rekognition calls (default: AWS_REGION or us-east-1).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"YAML file with defaults (default: config/{CONFIG_FILENAME}).",
    )
    return parser


def _parse_threshold(raw: Any) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise UsageError(f"matchConfidenceThreshold must be a number, got {raw!r}") from exc
    if math.isnan(value) or not 0.0 <= value <= 100.0:
        raise UsageError(f"matchConfidenceThreshold must be between 0 and 100, got {raw}")
    return value


def _first(*values: Any) -> Any:
    for value in values:
        if value is not None and value != "":
            return value
    return None


def resolve_run_config(
    args: argparse.Namespace,
    env: Optional[Mapping[str, str]] = None,
) -> RunConfig:
    """Validate parsed flags against the defaults layers and freeze them.

    ``args.directories`` must already hold exactly one entry.
    """

    env = os.environ if env is None else env
    defaults = load_defaults(args.config if args.config is not None else find_config_file())

    threshold = _parse_threshold(
        _first(
            args.match_threshold,
            env.get("FACE_MATCH_THRESHOLD"),
            defaults.get("match_threshold"),
            DEFAULT_MATCH_THRESHOLD,
        )
    )

    source_dir = Path(args.directories[0]).expanduser()
    if not source_dir.is_dir():
        raise UsageError(f"directory does not exist: {source_dir}")

    return RunConfig(
        source_dir=source_dir,
        collection_id=_first(
            args.collection_id,
            env.get("REKOGNITION_COLLECTION"),
            defaults.get("collection_id"),
            DEFAULT_COLLECTION_ID,
        ),
        match_threshold=threshold,
        delete_after=args.delete_after,
        force_recreate=args.force_recreate,
        save_json=args.save_json,
        verbose=args.verbose > 0,
        region_name=_first(
            args.region,
            env.get("AWS_REGION"),
            env.get("AWS_DEFAULT_REGION"),
            env.get("REGION"),
            defaults.get("region"),
        ),
    )


__all__ = [
    "UsageError",
    "build_parser",
    "find_config_file",
    "load_defaults",
    "resolve_run_config",
]
