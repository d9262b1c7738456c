"""
errors.py

Error kinds raised while generating a package skeleton. All errors surface to the
caller immediately; nothing here retries or rolls back.
"""

from __future__ import annotations


class SkeletonError(RuntimeError):
    pass


class InvalidNameError(SkeletonError):
    """A package or model name failed validation."""


class SourceNotFoundError(SkeletonError):
    """A model file (or package directory) to read from does not exist."""


class AlreadyExistsError(SkeletonError):
    """The destination already exists and overwrite was not requested."""


class WriteFailureError(SkeletonError):
    """An I/O error occurred while writing the skeleton."""
