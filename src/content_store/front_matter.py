"""Read and write posts as Markdown files with YAML front-matter."""

from __future__ import annotations

from pathlib import Path

import frontmatter  # type: ignore[import-untyped]
import yaml
from pydantic import ValidationError

from content_store.errors import InvalidPost
from content_store.models import Post

_ENCODING = "utf-8"


def parse_post(text: str, source: str | Path | None = None) -> Post:
    """Parse Markdown text with a front-matter block into a Post.

    Raises:
        InvalidPost: If the block is missing or malformed, or a field is invalid.
    """
    try:
        parsed = frontmatter.loads(text)
    except yaml.YAMLError as exc:
        raise InvalidPost(f"malformed YAML front-matter: {exc}", source) from exc

    meta = {str(k): v for k, v in parsed.metadata.items()}
    if not meta:
        raise InvalidPost("no YAML front-matter", source)
    if "body" in meta:
        raise InvalidPost("'body' is reserved and cannot be a front-matter key", source)

    try:
        return Post.model_validate({**meta, "body": parsed.content})
    except ValidationError as exc:
        raise InvalidPost.from_validation_error(exc, source) from exc


def dump_post(post: Post) -> str:
    """Serialize a Post; parse_post(dump_post(p)) == p."""
    doc = frontmatter.Post(post.body)
    doc.metadata.update(post.front_matter())
    text: str = frontmatter.dumps(doc, sort_keys=False)
    return text if text.endswith("\n") else text + "\n"


def load_post_file(path: Path) -> Post:
    try:
        text = path.read_text(encoding=_ENCODING)
    except UnicodeDecodeError as exc:
        raise InvalidPost(f"not valid UTF-8: {exc}", path) from exc
    return parse_post(text, source=path)


def write_post_file(post: Post, path: Path) -> None:
    path.write_text(dump_post(post), encoding=_ENCODING)
