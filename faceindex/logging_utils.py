"""Logging setup for the face indexer command line.

Report lines (face counts, the match table, the run summary) are printed to
stdout by the CLI; this only configures the diagnostic log on stderr.
"""

from __future__ import annotations

import logging
import os
from typing import Final


LOG_FORMAT: Final[str] = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT: Final[str] = "%Y-%m-%d %H:%M:%S"

# botocore logs every Rekognition request at DEBUG, including the raw image
# bytes sent to IndexFaces; PIL logs each chunk it parses while sniffing.
SDK_LOGGERS: Final[tuple[str, ...]] = ("boto3", "botocore", "urllib3", "PIL")


def resolve_level(verbosity: int, env_level: str | None = None) -> int:
    """``LOG_LEVEL`` wins when it names a real level; otherwise -v / -vv decide."""

    if env_level:
        named = logging.getLevelName(env_level.upper())
        if isinstance(named, int):
            return named

    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(verbosity: int = 0) -> int:
    """Configure the root logger and return the level in effect."""

    level = resolve_level(verbosity, os.environ.get("LOG_LEVEL"))
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT, force=True)

    # SDK output appears only at -vv or LOG_LEVEL=DEBUG.
    sdk_level = logging.DEBUG if level <= logging.DEBUG else max(logging.WARNING, level)
    for name in SDK_LOGGERS:
        logging.getLogger(name).setLevel(sdk_level)
    return level


__all__ = ["configure_logging", "resolve_level"]
