"""Corpus-level checks.

Each check turns what used to be a manual pull-request review item into an
:class:`~postcorpus.types.Issue`. A broken post never aborts the run: the
exception that prevented loading it becomes an error issue and the remaining
posts are still checked.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import unquote, urlparse

from postcorpus.config import ValidationSettings
from postcorpus.exceptions import (
    CorpusError,
    FrontmatterParsingError,
    MissingFrontmatterError,
    PostParsingError,
    PostValidationError,
)
from postcorpus.types import Issue, Post, Severity, ValidationReport
from postcorpus.utils import is_valid_slug

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from postcorpus.store import ContentStore

logger = logging.getLogger(__name__)


def _error(code: str, message: str, path: Path | None, slug: str | None = None) -> Issue:
    return Issue(code=code, severity=Severity.ERROR, message=message, path=path, slug=slug)


def _warning(code: str, message: str, path: Path | None, slug: str | None = None) -> Issue:
    return Issue(code=code, severity=Severity.WARNING, message=message, path=path, slug=slug)


def issue_from_exception(path: Path, exc: CorpusError) -> Issue:
    """Translate a loading failure into an error issue."""
    if isinstance(exc, MissingFrontmatterError):
        return _error("missing-frontmatter", "Entry file has no front matter header", path)
    if isinstance(exc, FrontmatterParsingError):
        return _error("invalid-frontmatter", exc.reason, path)
    if isinstance(exc, PostValidationError):
        return _error("invalid-field", "; ".join(exc.errors), path)
    if isinstance(exc, PostParsingError):
        return _error("unreadable", exc.reason, path)
    return _error("invalid-post", str(exc), path)


# --- Per-post checks ---
def check_slug(post: Post, settings: ValidationSettings, now: datetime) -> Iterator[Issue]:
    if not is_valid_slug(post.slug):
        yield _error(
            "invalid-slug",
            f"Slug {post.slug!r} must be lowercase letters, digits and single hyphens",
            post.path,
            post.slug,
        )
    directory = post.directory
    if directory is not None and directory.name != post.slug:
        yield _warning(
            "slug-mismatch",
            f"Slug {post.slug!r} differs from directory name {directory.name!r}",
            post.path,
            post.slug,
        )


def check_description(post: Post, settings: ValidationSettings, now: datetime) -> Iterator[Issue]:
    if settings.require_description and not post.description:
        yield _warning("missing-description", "Post has no description", post.path, post.slug)


def check_date(post: Post, settings: ValidationSettings, now: datetime) -> Iterator[Issue]:
    if not settings.allow_future_dates and post.date > now:
        yield _warning("future-date", f"Post is dated in the future ({post.iso_date})", post.path, post.slug)


def check_body(post: Post, settings: ValidationSettings, now: datetime) -> Iterator[Issue]:
    if not post.body.strip():
        yield _warning("empty-body", "Post body is empty", post.path, post.slug)


def check_image(post: Post, settings: ValidationSettings, now: datetime) -> Iterator[Issue]:
    if not settings.check_images or not post.image or post.directory is None:
        return
    parsed = urlparse(post.image)
    # Remote and site-absolute references belong to the site generator.
    if parsed.scheme or parsed.netloc or post.image.startswith("/"):
        return
    if not (post.directory / unquote(parsed.path)).exists():
        yield _warning("missing-image", f"Image {post.image!r} not found next to the entry file", post.path, post.slug)


DEFAULT_CHECKS: tuple[Callable[[Post, ValidationSettings, datetime], Iterable[Issue]], ...] = (
    check_slug,
    check_description,
    check_date,
    check_body,
    check_image,
)


# --- Corpus-wide checks ---
def find_duplicate_slugs(posts: Iterable[Post]) -> Iterator[Issue]:
    """Slugs become URL paths, so two posts differing only in case still collide."""
    by_slug: dict[str, list[Post]] = defaultdict(list)
    for post in posts:
        by_slug[post.slug.casefold()].append(post)

    for group in by_slug.values():
        if len(group) < 2:
            continue
        others = ", ".join(str(post.path) for post in group)
        for post in group:
            yield _error("duplicate-slug", f"Slug {post.slug!r} is shared by: {others}", post.path, post.slug)


def validate_corpus(
    store: ContentStore,
    settings: ValidationSettings | None = None,
    *,
    now: datetime | None = None,
) -> ValidationReport:
    """Run every check over the store and collect the findings."""
    settings = settings or ValidationSettings()
    now = now or datetime.now(UTC)
    report = ValidationReport(root=store.root, strict=settings.strict)

    posts: list[Post] = []
    for entry_path, result in store.iter_posts():
        report.post_count += 1
        if isinstance(result, CorpusError):
            report.add(issue_from_exception(entry_path, result))
            continue
        posts.append(result)
        for check in DEFAULT_CHECKS:
            for issue in check(result, settings, now):
                report.add(issue)

    for issue in find_duplicate_slugs(posts):
        report.add(issue)

    for directory in store.orphan_directories():
        report.add(
            _warning(
                "empty-directory",
                f"Directory has Markdown files but no {store.entry_filename}",
                directory,
            )
        )

    logger.info(
        "Checked %d posts under %s: %d errors, %d warnings",
        report.post_count,
        store.root,
        len(report.errors),
        len(report.warnings),
    )
    return report
