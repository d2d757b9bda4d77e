"""In-memory content store backed by a directory of post files."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from content_store.errors import ContentStoreError, DuplicatePost, InvalidPost, NotFound
from content_store.front_matter import load_post_file, write_post_file
from content_store.metrics import post_lookups_total, posts_loaded_total, posts_skipped_total
from content_store.models import Post
from content_store.slug import add_in_progress_marker, strip_in_progress_marker
from content_store.telemetry import get_tracer

log = structlog.get_logger()

_tracer = get_tracer(__name__)

DEFAULT_PATTERN = "*.md"


class ContentStore:
    """Ordered collection of posts keyed by identifier.

    A store built with a *root* directory persists author edits back to disk.
    Posts are only ever added or replaced, never removed.
    """

    def __init__(self, posts: Iterable[Post] = (), root: Path | None = None) -> None:
        self._root = root
        self._posts: dict[str, Post] = {}
        self._paths: dict[str, Path] = {}
        for post in posts:
            self._add(post)

    @classmethod
    def from_directory(
        cls, path: str | Path, pattern: str = DEFAULT_PATTERN, strict: bool = True
    ) -> ContentStore:
        """Load every post file in *path* matching *pattern* (non-recursive).

        Raises:
            ContentStoreError: If *path* is not a directory.
            InvalidPost: In strict mode, on the first file that fails to parse.
            DuplicatePost: If two files derive the same identifier.
        """
        root = Path(path)
        if not root.is_dir():
            raise ContentStoreError(f"Content directory not found: {root}")

        store = cls(root=root)
        skipped = 0
        with _tracer.start_as_current_span(
            "content_store.load", attributes={"root": str(root), "strict": strict}
        ):
            for file in sorted(root.glob(pattern)):
                if not file.is_file():
                    continue
                try:
                    post = load_post_file(file)
                except InvalidPost as exc:
                    if strict:
                        raise
                    skipped += 1
                    posts_skipped_total.add(1)
                    log.warning("post_parse_skipped", path=str(file), reason=exc.reason)
                    continue
                store._add(post, file)

        posts_loaded_total.add(len(store))
        log.info("posts_loaded", count=len(store), skipped=skipped, root=str(root))
        return store

    @property
    def root(self) -> Path | None:
        return self._root

    def _add(self, post: Post, path: Path | None = None) -> None:
        if post.identifier in self._posts:
            raise DuplicatePost(post.identifier)
        self._posts[post.identifier] = post
        if path is not None:
            self._paths[post.identifier] = path

    def list_posts(self) -> list[Post]:
        """All posts, newest first; same-day posts ordered by identifier."""
        by_id = sorted(self._posts.values(), key=lambda p: p.identifier)
        return sorted(by_id, key=lambda p: p.date, reverse=True)

    def get_post(self, identifier: str) -> Post:
        post = self._posts.get(identifier)
        if post is None:
            post_lookups_total.add(1, {"result": "miss"})
            log.debug("post_lookup_missed", identifier=identifier)
            raise NotFound(identifier)
        post_lookups_total.add(1, {"result": "hit"})
        return post

    def path_for(self, identifier: str) -> Path | None:
        """File backing *identifier*, or where a new post would be written."""
        if identifier in self._paths:
            return self._paths[identifier]
        if self._root is None:
            return None
        return self._root / f"{identifier}.md"

    def _check_target(self, identifier: str, path: Path) -> None:
        """Refuse to write over a file that belongs to another post."""
        if self._paths.get(identifier) == path:
            return
        owner = next((k for k, p in self._paths.items() if p == path), None)
        if owner is not None or path.exists():
            raise ContentStoreError(
                f"Refusing to overwrite {path}: it holds {owner or 'an unloaded file'}"
            )

    def save_post(self, post: Post) -> Path | None:
        """Add or replace *post*; write it to disk when the store has a root.

        Raises:
            ContentStoreError: If the target file belongs to a different post.
        """
        path = self.path_for(post.identifier)
        if path is not None:
            self._check_target(post.identifier, path)
            write_post_file(post, path)
            self._paths[post.identifier] = path
            log.info("post_saved", identifier=post.identifier, path=str(path))
        self._posts[post.identifier] = post
        return path

    def revise_post(self, identifier: str, **changes: Any) -> Post:
        """Apply field *changes* to an existing post and save it.

        A change to the title or date moves the post to its new identifier
        but keeps its file. The file is written before the store changes.

        Raises:
            NotFound: If *identifier* is unknown.
            InvalidPost: If the changes name an unknown field or break an invariant.
            DuplicatePost: If the new identifier belongs to another post.
        """
        current = self.get_post(identifier)
        try:
            revised = current.revised(**changes)
        except ValidationError as exc:
            raise InvalidPost.from_validation_error(exc, self.path_for(identifier)) from exc
        except ValueError as exc:
            raise InvalidPost(str(exc), self.path_for(identifier)) from exc

        if revised.identifier == identifier:
            self.save_post(revised)
            return revised

        if revised.identifier in self._posts:
            raise DuplicatePost(revised.identifier)
        path = self._paths.get(identifier)
        if path is None:
            self.save_post(revised)
        else:
            write_post_file(revised, path)
            self._paths[revised.identifier] = self._paths.pop(identifier)
            self._posts[revised.identifier] = revised
            log.info("post_saved", identifier=revised.identifier, path=str(path))
        del self._posts[identifier]
        return revised

    def mark_in_progress(self, identifier: str, in_progress: bool = True) -> Post:
        """Add or remove the "(In Progress)" title marker."""
        title = self.get_post(identifier).title
        if in_progress:
            return self.revise_post(identifier, title=add_in_progress_marker(title))
        return self.revise_post(identifier, title=strip_in_progress_marker(title))

    def __len__(self) -> int:
        return len(self._posts)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._posts

    def __iter__(self) -> Iterator[Post]:
        return iter(self.list_posts())
