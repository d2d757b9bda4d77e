"""Shared test constants, fixtures, and factory functions."""

import datetime as dt
import logging
from collections.abc import AsyncIterator, Iterator
from pathlib import Path
from typing import Any

import pytest
import structlog
from httpx import ASGITransport, AsyncClient

from content_store.config import Settings
from content_store.front_matter import write_post_file
from content_store.main import app
from content_store.models import Post
from content_store.store import ContentStore

# -- Constants --

REPO_ROOT = Path(__file__).resolve().parent.parent
SAMPLE_POSTS_DIR = REPO_ROOT / "posts"
SAMPLE_POST_COUNT = 2

RAILS_POST_ID = "2021-10-29-background-jobs-in-rails"
RAILS_POST_TITLE = "Background Jobs in Rails"
RAILS_POST_DATE = dt.date(2021, 10, 29)
RAILS_POST_TAGS = ["Ruby", "Rails", "Sidekiq", "ActiveJob", "Redis"]
TESTING_POST_ID = "2021-11-12-testing-background-jobs-in-rails"

HELLO_ID = "2024-01-15-hello-world"
SECOND_ID = "2024-02-01-second-post"

POST_TEXT = """---
layout: post
title: Hello World
date: 2024-01-15
description: First post
img: hello.png
tags: [Intro, Meta]
---

Welcome to the blog.
"""


# -- Factories --


def make_post(**overrides: Any) -> Post:
    """Create a Post with test defaults. Override any field."""
    defaults: dict[str, Any] = {
        "title": "Hello World",
        "date": dt.date(2024, 1, 15),
        "description": "First post",
        "img": "hello.png",
        "tags": ["Intro", "Meta"],
        "body": "Welcome to the blog.",
    }
    return Post(**(defaults | overrides))


def make_settings(**overrides: Any) -> Settings:
    """Create a Settings instance with test defaults. Override any field."""
    defaults: dict[str, Any] = {"content_dir": SAMPLE_POSTS_DIR}
    return Settings(**(defaults | overrides))


def write_post(directory: Path, post: Post, name: str | None = None) -> Path:
    """Write *post* into *directory*, named after its identifier by default."""
    path = directory / (name or f"{post.identifier}.md")
    write_post_file(post, path)
    return path


# -- Fixtures --


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo configure_logging(), which binds handlers to the current stderr."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """Directory with two valid posts: Hello World and Second Post."""
    root = tmp_path / "posts"
    root.mkdir()
    write_post(root, make_post())
    write_post(
        root,
        make_post(title="Second Post", date=dt.date(2024, 2, 1), img=None, tags=[]),
    )
    return root


@pytest.fixture
def store(content_dir: Path) -> ContentStore:
    return ContentStore.from_directory(content_dir)


@pytest.fixture
def env_vars(monkeypatch: pytest.MonkeyPatch, content_dir: Path) -> None:
    """Point CONTENT_DIR at the temporary content directory."""
    monkeypatch.setenv("CONTENT_DIR", str(content_dir))
    monkeypatch.delenv("OTEL_EXPORTER_OTLP_ENDPOINT", raising=False)


@pytest.fixture
async def client(env_vars: None, content_dir: Path) -> AsyncIterator[AsyncClient]:
    """AsyncClient wired to the FastAPI app with a store over content_dir."""
    app.state.settings = make_settings(content_dir=content_dir)
    app.state.store = ContentStore.from_directory(content_dir)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
