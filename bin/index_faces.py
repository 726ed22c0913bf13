#!/usr/bin/env python3
"""Index a directory of face images into Rekognition and print all matches."""

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))
from faceindex.cli import main


if __name__ == "__main__":
    sys.exit(main())
