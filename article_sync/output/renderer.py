"""
Report rendering for merge request comments and commit messages.

This module renders a RunSummary through Jinja2 templates stored next to it
and writes the results to files for CI tooling to pick up.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from ..core.types import RunSummary


_ENV = Environment(
    loader=FileSystemLoader(str(Path(__file__).parent / "templates")),
    autoescape=select_autoescape(["html"]),
    undefined=StrictUndefined,
)


def _render(template_name: str, summary: RunSummary) -> str:
    template = _ENV.get_template(template_name)
    return template.render(created=summary.created, updated=summary.updated)


def render_comment(summary: RunSummary) -> str:
    """Render the merge request comment listing new and updated articles.

    New articles are listed by title only since they have no URL until
    they are created; updated articles link to their published URL.
    """
    return _render("comment.md.j2", summary)


def render_commit(summary: RunSummary) -> str:
    """Render the commit message recorded after a sync run."""
    return _render("commit.txt.j2", summary)


def write_report(path: Path, text: str) -> Path:
    """Write rendered text to `path`, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path
