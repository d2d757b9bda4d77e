"""Title slugs and the "In Progress" title marker."""

from __future__ import annotations

import re

IN_PROGRESS_MARKER = "(In Progress)"

_MARKER_RE = re.compile(r"\s*[\(\[]\s*in\s+progress\s*[\)\]]\s*$", re.IGNORECASE)
_NON_WORD_RE = re.compile(r"[\W_]+")


def has_in_progress_marker(title: str) -> bool:
    return _MARKER_RE.search(title) is not None


def strip_in_progress_marker(title: str) -> str:
    """Remove a trailing "(In Progress)" or "[In Progress]" marker, if any."""
    return _MARKER_RE.sub("", title).rstrip()


def add_in_progress_marker(title: str) -> str:
    return f"{strip_in_progress_marker(title)} {IN_PROGRESS_MARKER}"


def slugify(title: str) -> str:
    """Lower-case *title* and join its letter/digit runs with hyphens.

    Unicode letters are kept, as in Jekyll's default slug mode. The
    in-progress marker is ignored so toggling it keeps the slug stable.
    """
    base = strip_in_progress_marker(title).lower()
    return _NON_WORD_RE.sub("-", base).strip("-")
