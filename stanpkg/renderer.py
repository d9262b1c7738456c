"""
renderer.py

Responsibility: Deterministically render templates into a destination directory.

Rules:
- Render templates in sorted path order to ensure deterministic output.
- Output paths are templates too (e.g. `R/{{ name }}-package.R`).
- Undefined context values are errors, never silent blanks.
- For a template directory overlay, UTF-8 text files with Jinja2 markers are
  rendered; everything else is copied byte-for-byte.

This module intentionally does NOT know about package names, Stan or CLI parsing.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, StrictUndefined, TemplateError

logger = logging.getLogger(__name__)


class RenderError(RuntimeError):
    pass


@dataclass(frozen=True)
class RenderResult:
    rendered_files: int
    copied_files: int
    paths: tuple[str, ...] = ()


def _continue_lines(value: Any, prefix: str) -> str:
    """Prefix every line after the first, e.g. to keep a comment block intact."""
    first, *rest = str(value).strip().splitlines() or [""]
    return "\n".join([first] + [f"{prefix}{line}".rstrip() for line in rest])


def _environment() -> Environment:
    env = Environment(
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
    )
    env.filters["continue_lines"] = _continue_lines
    return env


def _write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="\n") as fh:
        fh.write(text)


def _is_binary_file(path: Path) -> bool:
    """
    Best-effort: treat a file as binary if it cannot be decoded as UTF-8.
    """
    try:
        path.read_text(encoding="utf-8")
        return False
    except UnicodeDecodeError:
        return True


def _iter_template_files(template_dir: Path) -> list[Path]:
    """
    Return all files under template_dir, in deterministic lexicographic order
    (relative path ordering).
    """
    files: list[Path] = []
    for root, _dirs, filenames in os.walk(template_dir):
        root_path = Path(root)
        for name in filenames:
            files.append(root_path / name)
    files.sort(key=lambda p: str(p.relative_to(template_dir)).replace(os.sep, "/"))
    return files


def _render_path(env: Environment, rel: str, context: Mapping[str, Any]) -> str:
    out = env.from_string(rel).render(**context) if "{{" in rel else rel
    parts = Path(out).parts
    if not out or Path(out).is_absolute() or ".." in parts:
        raise RenderError(f"Rendered template path escapes destination: {rel!r} -> {out!r}")
    return out


def render_paths(templates: Mapping[str, str], context: Mapping[str, Any]) -> tuple[str, ...]:
    """
    Render only the output paths of a template mapping, in the order they would be written.
    """
    env = _environment()
    try:
        return tuple(_render_path(env, rel, context) for rel in sorted(templates))
    except TemplateError as e:
        raise RenderError("Failed rendering template paths") from e


def render_templates(
    *,
    templates: Mapping[str, str],
    destination_dir: str | Path,
    context: Mapping[str, Any],
) -> RenderResult:
    """
    Render a mapping of relative path -> template text into destination_dir.

    Paths and contents are both rendered with the same context. OSError from the
    filesystem propagates unchanged so callers can classify it.
    """
    dst_dir = Path(destination_dir)
    env = _environment()
    written: list[str] = []

    for rel in sorted(templates):
        try:
            out_rel = _render_path(env, rel, context)
            text = env.from_string(templates[rel]).render(**context)
        except TemplateError as e:
            raise RenderError(f"Failed rendering template: {rel}") from e
        _write_text(dst_dir / out_rel, text)
        logger.debug("Rendered %s", out_rel)
        written.append(out_rel)

    return RenderResult(rendered_files=len(written), copied_files=0, paths=tuple(written))


def render_template_dir(
    *,
    template_dir: str | Path,
    destination_dir: str | Path,
    context: Mapping[str, Any],
) -> RenderResult:
    """
    Render/copy a template directory into destination_dir.

    - Creates destination directories as needed.
    - Copies file permissions from template files.
    """
    tpl_dir = Path(template_dir).resolve()
    dst_dir = Path(destination_dir).resolve()

    if not tpl_dir.exists() or not tpl_dir.is_dir():
        raise RenderError(f"Template directory not found: {tpl_dir}")

    env = _environment()
    rendered = 0
    copied = 0
    written: list[str] = []

    for src_path in _iter_template_files(tpl_dir):
        rel = src_path.relative_to(tpl_dir).as_posix()
        try:
            out_rel = _render_path(env, rel, context)
        except TemplateError as e:
            raise RenderError(f"Failed rendering template path: {rel}") from e
        dst_path = dst_dir / out_rel
        dst_path.parent.mkdir(parents=True, exist_ok=True)

        # Copy binary files byte-for-byte.
        if _is_binary_file(src_path):
            shutil.copy2(src_path, dst_path)
            copied += 1
            written.append(out_rel)
            continue

        text = src_path.read_text(encoding="utf-8")
        if ("{{" in text) or ("{%" in text) or ("{#" in text):
            try:
                out = env.from_string(text).render(**context)
            except TemplateError as e:
                raise RenderError(f"Failed rendering template file: {rel}") from e
            _write_text(dst_path, out)
            shutil.copystat(src_path, dst_path)
            rendered += 1
        else:
            shutil.copy2(src_path, dst_path)
            copied += 1
        logger.debug("Wrote overlay file %s", out_rel)
        written.append(out_rel)

    return RenderResult(rendered_files=rendered, copied_files=copied, paths=tuple(written))
