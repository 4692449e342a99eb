"""The content store: one directory per post, each holding an entry file."""

from __future__ import annotations

import logging
import shutil
from collections import defaultdict
from collections.abc import Iterable, Iterator
from datetime import UTC, datetime, tzinfo
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from postcorpus.exceptions import (
    CorpusError,
    DuplicateSlugError,
    PostExistsError,
    PostNotFoundError,
    PostParsingError,
    PostValidationError,
    PostWriteError,
)
from postcorpus.frontmatter import parse_post, render_post
from postcorpus.types import Post
from postcorpus.utils import is_valid_slug, slugify

if TYPE_CHECKING:
    from postcorpus.config import CorpusConfig

logger = logging.getLogger(__name__)

TaxonomyKind = Literal["tags", "categories"]

DEFAULT_ENTRY_FILENAME = "index.md"


def _is_hidden(relative: Path) -> bool:
    return any(part.startswith((".", "_")) for part in relative.parts)


class ContentStore:
    """Reads posts laid out as ``<root>/<post-dir>/<entry_filename>``.

    The store never rewrites an existing entry file. The only write path is
    :meth:`create`, which scaffolds a brand new post directory.
    """

    def __init__(
        self,
        root: Path,
        *,
        entry_filename: str = DEFAULT_ENTRY_FILENAME,
        timezone: tzinfo = UTC,
    ) -> None:
        self.root = Path(root)
        self.entry_filename = entry_filename
        self.timezone = timezone

    @classmethod
    def from_config(cls, config: CorpusConfig) -> ContentStore:
        return cls(
            config.paths.abs_posts_dir,
            entry_filename=config.paths.entry_filename,
            timezone=config.validation.tzinfo,
        )

    def __repr__(self) -> str:
        return f"ContentStore(root={str(self.root)!r}, entry_filename={self.entry_filename!r})"

    # --- Discovery ---
    def discover(self) -> list[Path]:
        """Return every entry file below the root, sorted by path.

        Directories whose name starts with ``.`` or ``_`` are skipped, and an
        entry file directly in the root is not a post.
        """
        if not self.root.is_dir():
            logger.warning("Content root %s does not exist", self.root)
            return []

        entries = []
        for candidate in self.root.rglob(self.entry_filename):
            if not candidate.is_file() or candidate.parent == self.root:
                continue
            if _is_hidden(candidate.parent.relative_to(self.root)):
                continue
            entries.append(candidate)
        return sorted(entries)

    def orphan_directories(self) -> list[Path]:
        """Directories holding Markdown files but no entry file, outside any post."""
        if not self.root.is_dir():
            return []

        post_dirs = [entry.parent for entry in self.discover()]
        orphans = set()
        for markdown in self.root.rglob("*.md"):
            directory = markdown.parent
            if directory == self.root or _is_hidden(directory.relative_to(self.root)):
                continue
            if any(directory == post_dir or post_dir in directory.parents for post_dir in post_dirs):
                continue
            if any(directory in post_dir.parents for post_dir in post_dirs):
                continue
            orphans.add(directory)
        return sorted(orphans)

    # --- Loading ---
    def load(self, entry_path: Path) -> Post:
        """Parse one entry file.

        Raises:
            PostParsingError: If the file cannot be read or decoded.
            FrontmatterError: If the header is missing or malformed.
            PostValidationError: If a field is missing or malformed.

        """
        try:
            text = entry_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise PostParsingError(entry_path, str(exc)) from exc

        return parse_post(text, default_slug=entry_path.parent.name, path=entry_path, timezone=self.timezone)

    def iter_posts(self) -> Iterator[tuple[Path, Post | CorpusError]]:
        """Yield each entry path with its post, or the error that prevented loading it."""
        for entry_path in self.discover():
            try:
                yield entry_path, self.load(entry_path)
            except CorpusError as exc:
                logger.debug("Skipping %s: %s", entry_path, exc)
                yield entry_path, exc

    def posts(self) -> list[Post]:
        """All posts that load cleanly, newest first."""
        loaded = [result for _, result in self.iter_posts() if isinstance(result, Post)]
        return sort_posts(loaded)

    def get(self, slug: str) -> Post:
        """Look up a post by slug (case-insensitive).

        Raises:
            PostNotFoundError: If no post has the slug.
            DuplicateSlugError: If several posts share it.

        """
        wanted = slug.casefold()
        matches = [post for post in self.posts() if post.slug.casefold() == wanted]
        if not matches:
            raise PostNotFoundError(slug)
        if len(matches) > 1:
            raise DuplicateSlugError(slug, [post.path for post in matches if post.path])
        return matches[0]

    def taxonomy(self, kind: TaxonomyKind = "tags") -> dict[str, list[str]]:
        """Map each tag (or category) to the sorted slugs of the posts using it."""
        if kind not in ("tags", "categories"):
            msg = f"Unknown taxonomy kind: {kind!r}"
            raise ValueError(msg)

        terms: dict[str, set[str]] = defaultdict(set)
        for post in self.posts():
            for term in getattr(post, kind):
                terms[term].add(post.slug)
        return {term: sorted(slugs) for term, slugs in sorted(terms.items(), key=lambda item: item[0].casefold())}

    # --- Scaffolding ---
    def create(
        self,
        title: str,
        *,
        slug: str | None = None,
        description: str | None = None,
        date: datetime | None = None,
        tags: Iterable[str] = (),
        categories: Iterable[str] = (),
        image: str | None = None,
        links: Iterable[str] = (),
        body: str = "",
    ) -> Post:
        """Scaffold a new post directory with its entry file.

        Raises:
            PostValidationError: If the slug is not a valid URL slug or a field is invalid.
            PostExistsError: If the directory exists or another post uses the slug.
            PostWriteError: If the entry file cannot be written; the new directory is removed.

        """
        final_slug = slug or slugify(title)
        if not is_valid_slug(final_slug):
            msg = f"slug: {final_slug!r} must be lowercase letters, digits and single hyphens"
            raise PostValidationError([msg])

        directory = self.root / final_slug
        if directory.exists():
            raise PostExistsError(final_slug, directory)
        for existing in self.posts():
            if existing.slug.casefold() == final_slug.casefold():
                raise PostExistsError(final_slug, existing.path or directory)

        entry_path = directory / self.entry_filename
        published = date or datetime.now(self.timezone).replace(microsecond=0)
        try:
            post = Post(
                slug=final_slug,
                title=title,
                description=description,
                date=published,
                tags=list(tags),
                categories=list(categories),
                image=image,
                links=list(links),
                body=body.strip(),
                path=entry_path,
            )
        except ValueError as exc:
            raise PostValidationError([str(exc)], entry_path) from exc

        directory.mkdir(parents=True)
        try:
            entry_path.write_text(render_post(post, include_slug=False), encoding="utf-8")
        except OSError as exc:
            # An empty post directory would block this slug.
            shutil.rmtree(directory, ignore_errors=True)
            raise PostWriteError(entry_path, str(exc)) from exc
        logger.info("Created post %s at %s", final_slug, entry_path)
        return post


def sort_posts(posts: Iterable[Post]) -> list[Post]:
    """Newest first; posts sharing a timestamp are ordered by slug."""
    by_slug = sorted(posts, key=lambda post: post.slug)
    return sorted(by_slug, key=lambda post: post.date, reverse=True)
