"""Pydantic model for a blog post and its front-matter fields."""

from __future__ import annotations

import datetime as dt
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from content_store.slug import has_in_progress_marker, slugify

_ISO_DATE_PREFIX = re.compile(r"^\s*(\d{4}-\d{2}-\d{2})")

FRONT_MATTER_FIELDS = ("layout", "title", "date", "description", "img", "tags")


class Post(BaseModel):
    """A dated article: front-matter metadata plus an opaque body.

    Unknown front-matter keys are kept as extras so they survive a save.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    layout: str = Field(default="post", description="Rendering template selector")
    title: str = Field(description="Article title")
    date: dt.date = Field(description="Publication date")
    description: str = Field(default="", description="Short summary shown in listings")
    img: str | None = Field(default=None, description="Associated image path")
    tags: list[str] = Field(default_factory=list, description="Ordered tag list")
    body: str = Field(default="", description="Formatted article text, opaque to the store")

    @field_validator("title", "description", "img", mode="before")
    @classmethod
    def _scalar_to_str(cls, v: Any, info: ValidationInfo) -> Any:
        # YAML reads `title: 1984` as an int
        if isinstance(v, (int, float, dt.date)) and not isinstance(v, bool):
            return v.isoformat() if isinstance(v, dt.date) else str(v)
        if v is None and info.field_name == "description":
            return ""
        return v

    @field_validator("title")
    @classmethod
    def _title_not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be empty")
        if not slugify(v):
            raise ValueError("title must contain a letter or digit outside the marker")
        return v

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, v: Any) -> Any:
        # bool is an int subclass; neither is a calendar date here
        if isinstance(v, (bool, int, float)):
            raise ValueError("date must be a calendar date, not a number")
        if isinstance(v, dt.datetime):
            return v.date()
        if isinstance(v, str):
            # Jekyll allows "2021-10-29 10:00:00 -0400"; only the day matters
            match = _ISO_DATE_PREFIX.match(v)
            if not match:
                raise ValueError(f"date {v!r} is not an ISO calendar date")
            return dt.date.fromisoformat(match.group(1))
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return v.split()
        if isinstance(v, (list, tuple)):
            return [str(tag) for tag in v if tag is not None]
        return v

    @field_validator("body", mode="before")
    @classmethod
    def _strip_body(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @property
    def slug(self) -> str:
        return slugify(self.title)

    @property
    def identifier(self) -> str:
        """Stable key: ``YYYY-MM-DD-<title-slug>``."""
        return f"{self.date.isoformat()}-{self.slug}"

    @property
    def in_progress(self) -> bool:
        return has_in_progress_marker(self.title)

    @property
    def extra_front_matter(self) -> dict[str, Any]:
        return dict(self.model_extra or {})

    def front_matter(self) -> dict[str, Any]:
        """Metadata block in canonical key order, extras last."""
        data = self.model_dump(exclude={"body"})
        meta: dict[str, Any] = {}
        for key in FRONT_MATTER_FIELDS:
            if key == "img" and data[key] is None:
                continue
            meta[key] = data[key]
        meta.update(self.extra_front_matter)
        return meta

    def revised(self, **changes: Any) -> Post:
        """Return a re-validated copy with *changes* applied.

        Keys must name a model field or an extra key the post already has.
        """
        unknown = sorted(set(changes) - set(Post.model_fields) - set(self.extra_front_matter))
        if unknown:
            raise ValueError(f"unknown post field(s): {', '.join(unknown)}")
        return Post.model_validate({**self.model_dump(), **changes})
