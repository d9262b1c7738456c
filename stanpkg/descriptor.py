"""
descriptor.py

Responsibility: the typed package descriptor written to `DESCRIPTION`.

The descriptor is the single source of truth for manifest fields; templates receive
it as explicit parameters rather than free-form key/value interpolation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from stanpkg.errors import InvalidNameError

# R package names: letters, digits and '.', start with a letter, no trailing '.'.
_PACKAGE_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9.]*[A-Za-z0-9]$")
# Model names become R and C++ symbols.
_MODEL_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

DEFAULT_DEPENDS: tuple[str, ...] = ("R (>= 3.4.0)",)
DEFAULT_IMPORTS: tuple[str, ...] = (
    "methods",
    "Rcpp (>= 0.12.0)",
    "RcppParallel (>= 5.0.1)",
    "rstan (>= 2.18.1)",
    "rstantools (>= 2.1.1)",
)
DEFAULT_LINKING_TO: tuple[str, ...] = (
    "BH (>= 1.66.0)",
    "Rcpp (>= 0.12.0)",
    "RcppEigen (>= 0.3.3.3.0)",
    "RcppParallel (>= 5.0.1)",
    "rstan (>= 2.18.1)",
    "StanHeaders (>= 2.18.0)",
)


def validate_package_name(name: str) -> str:
    if not isinstance(name, str) or not _PACKAGE_NAME_RE.fullmatch(name):
        raise InvalidNameError(
            f"Invalid package name: {name!r} (must start with a letter, contain only letters, "
            "digits and '.', be at least two characters and not end with '.')"
        )
    return name


def validate_model_name(name: str) -> str:
    if not _MODEL_NAME_RE.fullmatch(name):
        raise InvalidNameError(f"Invalid model name: {name!r} (must be a valid R/C++ identifier)")
    return name


@dataclass(frozen=True)
class PackageDescriptor:
    """Manifest fields for a generated package."""

    name: str
    title: str
    version: str = "0.0.0.9000"
    author: str = "Who wrote it"
    maintainer: str = "Who to complain to <yourfault@somewhere.net>"
    description: str = "More about what it does (maybe more than one line)."
    license: str = "GPL (>= 3)"
    depends: tuple[str, ...] = DEFAULT_DEPENDS
    imports: tuple[str, ...] = DEFAULT_IMPORTS
    linking_to: tuple[str, ...] = DEFAULT_LINKING_TO
    system_requirements: str = "GNU make"
    needs_compilation: bool = True


def default_descriptor(name: str) -> PackageDescriptor:
    validate_package_name(name)
    return PackageDescriptor(name=name, title=f"The '{name}' package.")


def _dcf_list(values: tuple[str, ...]) -> str:
    if not values:
        return ""
    return "\n" + ",\n".join(f"    {v}" for v in values)


def _dcf_scalar(value: str) -> str:
    # Continuation lines are indented; an empty one is written as " ." per DCF.
    first, *rest = value.strip().splitlines() or [""]
    return "\n".join([first] + [f"    {line.strip()}" if line.strip() else "    ." for line in rest])


def render_dcf(descriptor: PackageDescriptor) -> str:
    """
    Serialize the descriptor in Debian control file format, as R expects for DESCRIPTION.

    List fields are written one entry per continuation line; empty lists are omitted.
    Multi-line scalar fields are folded onto indented continuation lines.
    """
    fields: list[tuple[str, str]] = [
        ("Package", descriptor.name),
        ("Type", "Package"),
        ("Title", _dcf_scalar(descriptor.title)),
        ("Version", descriptor.version),
        ("Author", _dcf_scalar(descriptor.author)),
        ("Maintainer", _dcf_scalar(descriptor.maintainer)),
        ("Description", _dcf_scalar(descriptor.description)),
        ("License", _dcf_scalar(descriptor.license)),
        ("Depends", _dcf_list(descriptor.depends)),
        ("Imports", _dcf_list(descriptor.imports)),
        ("LinkingTo", _dcf_list(descriptor.linking_to)),
        ("SystemRequirements", _dcf_scalar(descriptor.system_requirements)),
        ("NeedsCompilation", "yes" if descriptor.needs_compilation else "no"),
        ("Encoding", "UTF-8"),
        ("Biarch", "true"),
    ]
    lines = [f"{key}: {value}" if not value.startswith("\n") else f"{key}:{value}" for key, value in fields if value]
    return "\n".join(lines) + "\n"
