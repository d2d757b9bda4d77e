"""Errors raised by the content store."""

from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError


class ContentStoreError(Exception):
    """Base class for content store failures."""


class NotFound(ContentStoreError, LookupError):
    """Raised when no post matches a lookup identifier."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Post not found: {identifier}")
        self.identifier = identifier


class InvalidPost(ContentStoreError, ValueError):
    """Raised when a post file or record violates the front-matter contract."""

    def __init__(self, reason: str, source: str | Path | None = None) -> None:
        where = f"{source}: " if source is not None else ""
        super().__init__(f"{where}{reason}")
        self.reason = reason
        self.source = str(source) if source is not None else None

    @classmethod
    def from_validation_error(
        cls, exc: ValidationError, source: str | Path | None = None
    ) -> InvalidPost:
        parts = []
        for err in exc.errors():
            loc = ".".join(str(p) for p in err["loc"]) or "post"
            parts.append(f"{loc}: {err['msg']}")
        return cls("; ".join(parts), source)


class DuplicatePost(ContentStoreError):
    """Raised when two posts derive the same identifier."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Duplicate post identifier: {identifier}")
        self.identifier = identifier
