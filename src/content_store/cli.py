"""Command-line interface for authoring and checking posts.

Usage:
    content-store list
    content-store show 2021-10-29-background-jobs-in-rails
    content-store validate
    content-store new --title "Testing Background Jobs" --tag Ruby --tag Rails
    content-store mark-in-progress 2021-10-29-background-jobs-in-rails [--done]

The content directory comes from CONTENT_DIR unless --content-dir is given.
"""

from __future__ import annotations

import argparse
import datetime as dt
import sys
from collections.abc import Sequence
from pathlib import Path

import structlog
from pydantic import ValidationError

from content_store.config import Settings
from content_store.errors import ContentStoreError, InvalidPost, NotFound
from content_store.front_matter import dump_post
from content_store.models import Post
from content_store.slug import add_in_progress_marker
from content_store.store import ContentStore
from content_store.telemetry import configure_logging

log = structlog.get_logger()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="content-store",
        description="List, inspect, validate and edit blog posts.",
    )
    parser.add_argument(
        "--content-dir",
        type=Path,
        default=None,
        help="Directory of post files (default: $CONTENT_DIR or posts/)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List posts, newest first")

    show = sub.add_parser("show", help="Print a post with its front-matter")
    show.add_argument("identifier")

    sub.add_parser("validate", help="Strictly load every post and report problems")

    new = sub.add_parser("new", help="Create an empty post")
    new.add_argument("--title", required=True)
    new.add_argument("--date", type=dt.date.fromisoformat, default=None, help="YYYY-MM-DD")
    new.add_argument("--description", default="")
    new.add_argument("--img", default=None)
    new.add_argument(
        "--tag", dest="tags", action="append", default=[], help="Can be repeated."
    )
    new.add_argument("--in-progress", action="store_true", help="Mark the title In Progress")

    mark = sub.add_parser("mark-in-progress", help="Toggle the In Progress title marker")
    mark.add_argument("identifier")
    mark.add_argument("--done", action="store_true", help="Remove the marker instead")
    return parser


def _load(settings: Settings, content_dir: Path, strict: bool | None = None) -> ContentStore:
    return ContentStore.from_directory(
        content_dir,
        settings.post_glob,
        strict=settings.strict_front_matter if strict is None else strict,
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = Settings()
    configure_logging(settings.log_level)
    content_dir: Path = args.content_dir or settings.content_dir

    try:
        if args.command == "list":
            for post in _load(settings, content_dir).list_posts():
                print(f"{post.identifier}\t{post.title}")
            return 0

        if args.command == "show":
            print(dump_post(_load(settings, content_dir).get_post(args.identifier)), end="")
            return 0

        if args.command == "validate":
            store = _load(settings, content_dir, strict=True)
            print(f"{len(store)} posts OK")
            return 0

        if args.command == "new":
            store = _load(settings, content_dir)
            title = add_in_progress_marker(args.title) if args.in_progress else args.title
            try:
                post = Post(
                    title=title,
                    date=args.date or dt.date.today(),
                    description=args.description,
                    img=args.img,
                    tags=args.tags,
                )
            except ValidationError as exc:
                raise InvalidPost.from_validation_error(exc) from exc
            if post.identifier in store:
                print(f"Post already exists: {post.identifier}", file=sys.stderr)
                return 1
            path = store.save_post(post)
            print(path)
            return 0

        if args.command == "mark-in-progress":
            store = _load(settings, content_dir)
            post = store.mark_in_progress(args.identifier, in_progress=not args.done)
            print(f"{post.identifier}\t{post.title}")
            return 0
    except NotFound as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except ContentStoreError as exc:
        log.error("command_failed", command=args.command, error=str(exc))
        print(str(exc), file=sys.stderr)
        return 1

    return 2


if __name__ == "__main__":
    sys.exit(main())
