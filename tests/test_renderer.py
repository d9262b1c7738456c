from __future__ import annotations

from pathlib import Path

import pytest

from stanpkg.renderer import RenderError, render_paths, render_template_dir, render_templates


def test_render_templates_renders_paths_and_contents(tmp_path: Path) -> None:
    result = render_templates(
        templates={"R/{{ name }}.R": "# {{ name }}\n", "b.txt": "plain\n"},
        destination_dir=tmp_path,
        context={"name": "demo"},
    )

    assert result.paths == ("R/demo.R", "b.txt")
    assert (tmp_path / "R" / "demo.R").read_text(encoding="utf-8") == "# demo\n"
    assert (tmp_path / "b.txt").read_text(encoding="utf-8") == "plain\n"


def test_undefined_variable_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(RenderError):
        render_templates(templates={"a.txt": "{{ missing }}"}, destination_dir=tmp_path, context={})
    assert not (tmp_path / "a.txt").exists()


def test_path_cannot_escape_destination(tmp_path: Path) -> None:
    with pytest.raises(RenderError):
        render_templates(templates={"{{ name }}/x": "x"}, destination_dir=tmp_path, context={"name": ".."})


def test_render_template_dir_missing(tmp_path: Path) -> None:
    with pytest.raises(RenderError):
        render_template_dir(template_dir=tmp_path / "nope", destination_dir=tmp_path / "out", context={})


def test_render_template_dir_counts(tmp_path: Path) -> None:
    tpl = tmp_path / "tpl"
    tpl.mkdir()
    (tpl / "README.md").write_text("# {{ name }}\n", encoding="utf-8")
    (tpl / "LICENSE").write_text("GPL\n", encoding="utf-8")

    result = render_template_dir(template_dir=tpl, destination_dir=tmp_path / "out", context={"name": "demo"})

    assert result.rendered_files == 1
    assert result.copied_files == 1
    assert (tmp_path / "out" / "README.md").read_text(encoding="utf-8") == "# demo\n"


def test_continue_lines_filter(tmp_path: Path) -> None:
    render_templates(
        templates={"doc.R": "#' @description {{ text | continue_lines(\"#' \") }}\nNULL\n"},
        destination_dir=tmp_path,
        context={"text": "One.\n\nTwo."},
    )
    assert (tmp_path / "doc.R").read_text(encoding="utf-8") == "#' @description One.\n#'\n#' Two.\nNULL\n"


def test_render_paths(tmp_path: Path) -> None:
    paths = render_paths({"b/{{ name }}.R": "", "a.txt": ""}, {"name": "demo"})
    assert paths == ("a.txt", "b/demo.R")
    assert list(tmp_path.iterdir()) == []
