"""
stanpkg package

Generates skeletons for R packages that embed Stan models, as a CLI-first utility.

Key responsibilities are split across modules:
- `descriptor.py`: the typed DESCRIPTION manifest, name validation, DCF rendering
- `config.py`: YAML config / environment overrides for descriptor fields
- `templates.py`: embedded skeleton templates (no global registry)
- `renderer.py`: deterministic template rendering/copying into an output directory
- `generator.py`: skeleton generation and model-file registration
- `cli.py`: CLI entrypoint
"""

from __future__ import annotations

from stanpkg.errors import (
    AlreadyExistsError,
    InvalidNameError,
    SkeletonError,
    SourceNotFoundError,
    WriteFailureError,
)
from stanpkg.generator import add_models, generate, required_entries

__all__ = [
    "AlreadyExistsError",
    "InvalidNameError",
    "SkeletonError",
    "SourceNotFoundError",
    "WriteFailureError",
    "__version__",
    "add_models",
    "generate",
    "required_entries",
]

__version__ = "0.1.0"
