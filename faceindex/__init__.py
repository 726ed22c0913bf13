"""Batch-index face images into an Amazon Rekognition collection and report matches."""

__version__ = "0.1.0"
