"""
generator.py

Responsibility: Create a Stan-backed R package skeleton on disk.

Flow of `generate`:
1) Validate the package name, then every model file, then the destination
2) Render the fixed skeleton templates (DESCRIPTION, NAMESPACE, ...)
3) Copy model files into `inst/stan` and record them in `R/stanmodels.R`
4) Optionally render a user template directory on top

Nothing is written until validation passes, including the names of models already
in `inst/stan` and the overlay directory. Filesystem errors during writing are
raised as `WriteFailureError`; there is no rollback.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from stanpkg.descriptor import PackageDescriptor, default_descriptor, render_dcf, validate_model_name, validate_package_name
from stanpkg.errors import AlreadyExistsError, InvalidNameError, SourceNotFoundError, WriteFailureError
from stanpkg.renderer import render_paths, render_template_dir, render_templates
from stanpkg.templates import (
    ARTIFACT_DIR,
    EXECUTABLE_PATHS,
    MODEL_SOURCE_DIR,
    SKELETON_TEMPLATES,
    STANMODELS_PATH,
    STANMODELS_TEMPLATE,
)

logger = logging.getLogger(__name__)

MODEL_SUFFIX = ".stan"


def required_entries(name: str, templates: Mapping[str, str] = SKELETON_TEMPLATES) -> frozenset[str]:
    """
    Relative paths (POSIX style) every skeleton contains, whatever models are added.
    Directories carry a trailing '/'. Template paths may only use `name`.
    """
    files = set(render_paths(templates, {"name": name}))
    entries = set(files)
    for rel in files | {f"{MODEL_SOURCE_DIR}/x", f"{ARTIFACT_DIR}/x"}:
        entries.update(f"{parent.as_posix()}/" for parent in Path(rel).parents if parent != Path("."))
    return frozenset(entries)


def _model_name(path: Path) -> str:
    return path.stem


def _check_model_files(model_files: Iterable[str | Path]) -> list[tuple[str, Path]]:
    """
    Resolve model files to (model_name, path) pairs, sorted by name.
    """
    seen: dict[str, Path] = {}
    for raw in model_files:
        path = Path(raw)
        if not path.is_file():
            raise SourceNotFoundError(f"Model file does not exist: {path}")
        if not os.access(path, os.R_OK):
            raise SourceNotFoundError(f"Model file is not readable: {path}")
        if path.suffix != MODEL_SUFFIX:
            raise InvalidNameError(f"Model file must have a {MODEL_SUFFIX!r} extension: {path}")
        name = validate_model_name(_model_name(path))
        if name in seen:
            raise InvalidNameError(f"Duplicate model name {name!r}: {seen[name]} and {path}")
        seen[name] = path
    return sorted(seen.items())


def _existing_models(model_dir: Path) -> list[str]:
    if not model_dir.is_dir():
        return []
    return sorted(_model_name(p) for p in model_dir.iterdir() if p.is_file() and p.suffix == MODEL_SUFFIX)


def _planned_models(model_dir: Path, models: list[tuple[str, Path]]) -> list[str]:
    """
    Every model name the package will hold once `models` are copied in.
    Names already on disk are validated too, before anything is written.
    """
    existing = _existing_models(model_dir)
    for name in existing:
        validate_model_name(name)
    return sorted(set(existing) | {name for name, _path in models})


def _make_executable(path: Path) -> None:
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def _copy_models(models: list[tuple[str, Path]], model_dir: Path) -> None:
    for name, src in models:
        dst = model_dir / f"{name}{MODEL_SUFFIX}"
        if dst.exists() and dst.samefile(src):
            continue
        shutil.copyfile(src, dst)
        logger.debug("Copied model %s -> %s", src, dst)


def _write_stanmodels(root: Path, models: list[str]) -> None:
    render_templates(
        templates={STANMODELS_PATH: STANMODELS_TEMPLATE},
        destination_dir=root,
        context={"models": models},
    )


def _build_context(descriptor: PackageDescriptor, models: list[str]) -> dict[str, Any]:
    return {
        "name": descriptor.name,
        "descriptor": descriptor,
        "dcf": render_dcf(descriptor),
        "models": models,
    }


def generate(
    target_name: str,
    destination_path: str | Path,
    model_files: Iterable[str | Path] = (),
    overwrite: bool = False,
    *,
    descriptor: PackageDescriptor | None = None,
    template_dir: str | Path | None = None,
    templates: Mapping[str, str] = SKELETON_TEMPLATES,
) -> Path:
    """
    Generate the package skeleton `destination_path/target_name` and return its path.

    With `overwrite`, the skeleton files are rewritten in place; other files already
    in the directory are left as they are.
    """
    validate_package_name(target_name)
    if descriptor is None:
        descriptor = default_descriptor(target_name)
    elif descriptor.name != target_name:
        raise InvalidNameError(f"Descriptor name {descriptor.name!r} does not match {target_name!r}")

    models = _check_model_files(model_files)
    if template_dir is not None and not Path(template_dir).is_dir():
        raise SourceNotFoundError(f"Template directory does not exist: {template_dir}")

    dest = Path(destination_path)
    if not dest.is_dir():
        raise SourceNotFoundError(f"Destination directory does not exist: {dest}")
    root = dest / target_name
    if root.exists() and not overwrite:
        raise AlreadyExistsError(f"Destination already exists: {root} (use overwrite to replace)")
    if root.exists() and not root.is_dir():
        raise AlreadyExistsError(f"Destination exists and is not a directory: {root}")

    model_dir = root / MODEL_SOURCE_DIR
    model_names = _planned_models(model_dir, models)
    context = _build_context(descriptor, model_names)

    try:
        root.mkdir(exist_ok=True)
        model_dir.mkdir(parents=True, exist_ok=True)
        (root / ARTIFACT_DIR).mkdir(parents=True, exist_ok=True)
        _copy_models(models, model_dir)
        render_templates(templates=templates, destination_dir=root, context=context)
        for rel in EXECUTABLE_PATHS:
            if (root / rel).exists():
                _make_executable(root / rel)
        if model_names:
            _write_stanmodels(root, model_names)
        if template_dir is not None:
            render_template_dir(template_dir=template_dir, destination_dir=root, context=context)
    except OSError as e:
        raise WriteFailureError(f"Failed writing package skeleton under {root}: {e}") from e

    logger.info("Created package skeleton %s with %d model(s)", root, len(model_names))
    return root


def add_models(
    package_dir: str | Path,
    model_files: Iterable[str | Path],
    overwrite: bool = False,
) -> list[str]:
    """
    Copy model files into an existing skeleton and regenerate `R/stanmodels.R`.

    Returns the names of every model in the package after the copy.
    """
    root = Path(package_dir)
    if not (root / "DESCRIPTION").is_file():
        raise SourceNotFoundError(f"Not a package directory (no DESCRIPTION): {root}")

    models = _check_model_files(model_files)
    model_dir = root / MODEL_SOURCE_DIR
    if not overwrite:
        for name, _path in models:
            if (model_dir / f"{name}{MODEL_SUFFIX}").exists():
                raise AlreadyExistsError(f"Model already exists: {model_dir / (name + MODEL_SUFFIX)}")
    names = _planned_models(model_dir, models)

    try:
        model_dir.mkdir(parents=True, exist_ok=True)
        _copy_models(models, model_dir)
        _write_stanmodels(root, names)
    except OSError as e:
        raise WriteFailureError(f"Failed adding models under {root}: {e}") from e

    logger.info("Package %s now has %d model(s)", root, len(names))
    return names
