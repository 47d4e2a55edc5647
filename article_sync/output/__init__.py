"""Output rendering for sync reports."""

from .renderer import render_comment, render_commit, write_report

__all__ = ["render_comment", "render_commit", "write_report"]
