"""
config.py

Responsibility: Load descriptor overrides from a YAML config file and the environment.

Accepted inputs:
- A plain YAML file (`.yaml` / `.yml`) whose top level is a mapping.
- A markdown file that begins with YAML frontmatter delimited by '---'.

Precedence (highest first): CLI flags, config file, environment, built-in defaults.
"""

from __future__ import annotations

import dataclasses
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from stanpkg.descriptor import PackageDescriptor

logger = logging.getLogger(__name__)

ENV_AUTHOR = "STANPKG_AUTHOR"
ENV_MAINTAINER = "STANPKG_MAINTAINER"

_STR_KEYS = frozenset({"title", "version", "author", "maintainer", "description", "license", "system_requirements"})
_LIST_KEYS = frozenset({"depends", "imports", "linking_to"})


class ConfigError(ValueError):
    pass


def _parse_yaml_frontmatter(text: str) -> tuple[dict[str, Any] | None, str]:
    """
    If the markdown begins with YAML frontmatter delimited by '---', parse it.
    Returns (frontmatter_dict_or_none, remaining_markdown_text).
    """
    if not text.startswith("---\n"):
        return None, text

    end = text.find("\n---\n", 4)
    if end == -1:
        raise ConfigError("YAML frontmatter starts with '---' but no closing '---' was found.")

    fm_text = text[4:end]
    rest = text[end + len("\n---\n") :]
    data = yaml.safe_load(fm_text) or {}
    if not isinstance(data, dict):
        raise ConfigError("YAML frontmatter must be a mapping/object at the top level.")
    return data, rest


def _normalize(data: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in data.items():
        key = str(key).replace("-", "_")
        if key in _STR_KEYS:
            if value is None:
                continue
            out[key] = str(value).strip()
        elif key in _LIST_KEYS:
            if value is None:
                value = []
            if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
                raise ConfigError(f"`{key}` must be a list of strings.")
            out[key] = tuple(v.strip() for v in value)
        else:
            raise ConfigError(f"Unknown config key: {key!r}")
    return out


def load_config(config_path: str | Path) -> dict[str, Any]:
    """
    Read descriptor overrides from a YAML file or markdown frontmatter.

    Recognized keys: title, version, author, maintainer, description, license,
    system_requirements (strings) and depends, imports, linking_to (lists of strings).
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"Config file does not exist: {path}")
    text = path.read_text(encoding="utf-8")

    frontmatter, _rest = _parse_yaml_frontmatter(text)
    if frontmatter is not None:
        data = frontmatter
    else:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Config file is not valid YAML: {path}") from e
        if not isinstance(data, dict):
            raise ConfigError("Config must be a mapping/object at the top level.")

    logger.debug("Loaded config from %s", path)
    return _normalize(data)


def env_overrides(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    env = os.environ if environ is None else environ
    out: dict[str, Any] = {}
    if env.get(ENV_AUTHOR):
        out["author"] = env[ENV_AUTHOR]
    if env.get(ENV_MAINTAINER):
        out["maintainer"] = env[ENV_MAINTAINER]
    return out


def apply_overrides(descriptor: PackageDescriptor, *layers: Mapping[str, Any]) -> PackageDescriptor:
    """
    Return a new descriptor with each override layer applied in order (later wins).

    `name` cannot be overridden; it always comes from the requested package name.
    """
    merged: dict[str, Any] = {}
    for layer in layers:
        merged.update(_normalize(layer))
    return dataclasses.replace(descriptor, **merged)
