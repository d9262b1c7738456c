"""
cli.py

Responsibility: CLI entrypoint for stanpkg.

Commands:
- `create`: build the descriptor (defaults <- env <- config <- flags) and generate a skeleton
- `add-models`: copy more Stan files into an existing skeleton

This module should orchestrate behavior but keep concerns isolated:
- Descriptor / naming: `descriptor.py`
- Config loading: `config.py`
- Filesystem work: `generator.py`
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from stanpkg import __version__
from stanpkg.config import ConfigError, apply_overrides, env_overrides, load_config
from stanpkg.descriptor import default_descriptor
from stanpkg.errors import SkeletonError
from stanpkg.generator import add_models, generate
from stanpkg.renderer import RenderError

logger = logging.getLogger(__name__)


def _flag_overrides(args: argparse.Namespace) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key in ("title", "pkg_version", "author", "maintainer", "description", "license"):
        value = getattr(args, key, None)
        if value is not None:
            out["version" if key == "pkg_version" else key] = value
    return out


def create_cmd(args: argparse.Namespace) -> int:
    descriptor = default_descriptor(args.name)
    file_overrides = load_config(args.config) if args.config else {}
    descriptor = apply_overrides(descriptor, env_overrides(), file_overrides, _flag_overrides(args))

    root = generate(
        args.name,
        Path(args.path),
        args.stan_files,
        bool(args.overwrite),
        descriptor=descriptor,
        template_dir=args.templates_dir,
    )
    print(root)
    return 0


def add_models_cmd(args: argparse.Namespace) -> int:
    names = add_models(Path(args.package_dir), args.stan_files, bool(args.overwrite))
    for name in names:
        print(name)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="stanpkg", description="Generate skeletons for R packages with Stan models")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("-v", "--verbose", action="store_true", help="Log each file written")
    sub = p.add_subparsers(dest="command", required=True)

    c = sub.add_parser("create", help="Create a new package skeleton")
    c.add_argument("name", help="Package name")
    c.add_argument("--path", default=".", help="Directory to create the package in (default: .)")
    c.add_argument(
        "--stan-file",
        dest="stan_files",
        action="append",
        default=[],
        help="Stan model file to copy into inst/stan (repeatable)",
    )
    c.add_argument("--overwrite", action="store_true", help="Rewrite skeleton files in an existing directory")
    c.add_argument("--config", default=None, help="YAML file (or markdown with YAML frontmatter) with DESCRIPTION fields")
    c.add_argument("--templates-dir", default=None, help="Extra template directory rendered over the skeleton")
    c.add_argument("--title", default=None, help="DESCRIPTION Title")
    c.add_argument("--pkg-version", dest="pkg_version", default=None, help="DESCRIPTION Version")
    c.add_argument("--author", default=None, help="DESCRIPTION Author (or set env STANPKG_AUTHOR)")
    c.add_argument("--maintainer", default=None, help="DESCRIPTION Maintainer (or set env STANPKG_MAINTAINER)")
    c.add_argument("--description", default=None, help="DESCRIPTION Description")
    c.add_argument("--license", default=None, help="DESCRIPTION License")
    c.set_defaults(func=create_cmd)

    a = sub.add_parser("add-models", help="Add Stan model files to an existing package")
    a.add_argument("package_dir", help="Package directory (contains DESCRIPTION)")
    a.add_argument("stan_files", nargs="+", help="Stan model files")
    a.add_argument("--overwrite", action="store_true", help="Replace models that already exist")
    a.set_defaults(func=add_models_cmd)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return int(args.func(args))
    except (SkeletonError, ConfigError, RenderError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
