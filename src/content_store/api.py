"""Read-only HTTP endpoints consumed by the external renderer."""

import datetime as dt
from typing import Any

import structlog
from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field

from content_store.errors import ContentStoreError, DuplicatePost, NotFound
from content_store.models import Post
from content_store.store import ContentStore

log = structlog.get_logger()

router = APIRouter()


class PostSummary(BaseModel):
    """Listing entry for a post, without its body."""

    model_config = ConfigDict(frozen=True)

    identifier: str = Field(description="Stable key: YYYY-MM-DD-<title-slug>")
    title: str
    date: dt.date
    description: str
    img: str | None = None
    tags: list[str] = Field(default_factory=list)
    in_progress: bool = Field(description="Title carries the In Progress marker")

    @classmethod
    def from_post(cls, post: Post) -> "PostSummary":
        return cls(
            identifier=post.identifier,
            title=post.title,
            date=post.date,
            description=post.description,
            img=post.img,
            tags=post.tags,
            in_progress=post.in_progress,
        )


class PostDetail(PostSummary):
    """Full post including layout, body and extra front-matter keys."""

    layout: str
    body: str
    extra: dict[str, Any] = Field(default_factory=dict, description="Unrecognized front-matter")

    @classmethod
    def from_post(cls, post: Post) -> "PostDetail":
        summary = PostSummary.from_post(post)
        return cls(
            **summary.model_dump(),
            layout=post.layout,
            body=post.body,
            extra=post.extra_front_matter,
        )


def _store(request: Request) -> ContentStore:
    store: ContentStore = request.app.state.store
    return store


@router.get("/posts", response_model=list[PostSummary])
async def list_posts(request: Request) -> list[PostSummary]:
    return [PostSummary.from_post(p) for p in _store(request).list_posts()]


@router.get("/posts/{identifier}", response_model=PostDetail)
async def get_post(request: Request, identifier: str) -> PostDetail:
    try:
        post = _store(request).get_post(identifier)
    except NotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return PostDetail.from_post(post)


@router.post("/reload")
async def reload_posts(request: Request) -> dict[str, str | int]:
    """Re-read the content directory and swap in the new store.

    On failure the current store keeps serving.
    """
    settings = request.app.state.settings
    try:
        store = ContentStore.from_directory(
            settings.content_dir, settings.post_glob, strict=settings.strict_front_matter
        )
    except ContentStoreError as exc:
        await log.awarning("reload_failed", error=str(exc))
        status = 409 if isinstance(exc, DuplicatePost) else 422
        raise HTTPException(status_code=status, detail=str(exc)) from exc
    request.app.state.store = store
    await log.ainfo("posts_reloaded", count=len(store))
    return {"status": "reloaded", "count": len(store)}
