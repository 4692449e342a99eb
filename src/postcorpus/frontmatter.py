"""Helpers for parsing and rendering YAML front matter of post entry files."""

from __future__ import annotations

import logging
from datetime import UTC
from typing import TYPE_CHECKING, Any

import yaml
from frontmatter.default_handlers import YAMLHandler
from pydantic import ValidationError

from postcorpus.dates import format_timestamp, parse_timestamp
from postcorpus.exceptions import (
    FrontmatterParsingError,
    InvalidDateError,
    MissingFrontmatterError,
    PostValidationError,
)
from postcorpus.types import Post

if TYPE_CHECKING:
    from datetime import tzinfo
    from pathlib import Path

logger = logging.getLogger(__name__)

KNOWN_FIELDS = ("title", "slug", "description", "date", "categories", "tags", "image", "links")

_handler = YAMLHandler()


class _HeaderLoader(yaml.SafeLoader):
    """SafeLoader that leaves timestamps as text for :func:`parse_timestamp`."""


_HeaderLoader.add_constructor("tag:yaml.org,2002:timestamp", _HeaderLoader.construct_yaml_str)


def split_frontmatter(text: str, *, path: Path | None = None) -> tuple[dict[str, Any], str]:
    """Split an entry file into its metadata mapping and body.

    Args:
        text: Full entry file content.
        path: Source path, only used in error messages.

    Returns:
        Tuple of (metadata dict, body string). The body has surrounding
        whitespace stripped, the same way python-frontmatter loads content.

    Raises:
        MissingFrontmatterError: If the text does not open with a ``---`` header.
        FrontmatterParsingError: If the header is unterminated, invalid YAML,
            or not a mapping.

    """
    text = text.lstrip("\ufeff")
    if not _handler.detect(text):
        raise MissingFrontmatterError(path)

    try:
        raw, body = _handler.split(text)
    except ValueError as exc:
        raise FrontmatterParsingError("header is not terminated by '---'", path) from exc

    try:
        metadata = _handler.load(raw, Loader=_HeaderLoader)
    except (yaml.YAMLError, ValueError) as exc:
        raise FrontmatterParsingError(str(exc), path) from exc

    if metadata is None:
        logger.debug("Empty front matter header in %s", path or "<text>")
        metadata = {}
    if not isinstance(metadata, dict):
        msg = f"header must be a mapping, got {type(metadata).__name__}"
        raise FrontmatterParsingError(msg, path)

    return {str(key): value for key, value in metadata.items()}, body.strip()


def _format_validation_error(exc: ValidationError) -> list[str]:
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "post"
        message = error["msg"].removeprefix("Value error, ")
        messages.append(f"{field}: {message}")
    return messages


def post_from_metadata(
    metadata: dict[str, Any],
    body: str,
    *,
    default_slug: str,
    path: Path | None = None,
    timezone: tzinfo = UTC,
) -> Post:
    """Map a front matter mapping onto a :class:`Post`.

    Every field problem is collected so a single error lists all of them.

    Raises:
        PostValidationError: If any field is missing or malformed.

    """
    errors: list[str] = []
    data: dict[str, Any] = {
        "slug": metadata.get("slug") or default_slug,
        "body": body,
        "path": path,
        "extra": {key: value for key, value in metadata.items() if key not in KNOWN_FIELDS},
    }
    for key in ("title", "description", "categories", "tags", "image", "links"):
        if key in metadata:
            data[key] = metadata[key]

    if "title" not in metadata:
        errors.append("title: field is required")

    if "date" not in metadata:
        errors.append("date: field is required")
    else:
        try:
            data["date"] = parse_timestamp(metadata["date"], timezone=timezone)
        except InvalidDateError as exc:
            errors.append(f"date: {exc}")

    try:
        post = Post.model_validate(data)
    except ValidationError as exc:
        reported = {message.split(":", 1)[0] for message in errors}
        errors.extend(m for m in _format_validation_error(exc) if m.split(":", 1)[0] not in reported)
        raise PostValidationError(errors, path) from exc

    if errors:
        raise PostValidationError(errors, path)
    return post


def parse_post(
    text: str,
    *,
    default_slug: str,
    path: Path | None = None,
    timezone: tzinfo = UTC,
) -> Post:
    """Parse a full entry file into a :class:`Post`.

    ``default_slug`` is used when the header carries no explicit ``slug``;
    the content store passes the post directory name.
    """
    metadata, body = split_frontmatter(text, path=path)
    return post_from_metadata(metadata, body, default_slug=default_slug, path=path, timezone=timezone)


def render_frontmatter(post: Post, *, include_slug: bool = True) -> str:
    """Render the YAML header of a post, including the ``---`` delimiters."""
    data: dict[str, Any] = {"title": post.title}
    if include_slug:
        data["slug"] = post.slug
    if post.description:
        data["description"] = post.description
    data["date"] = format_timestamp(post.date)
    if post.categories:
        data["categories"] = sorted(post.categories)
    if post.tags:
        data["tags"] = sorted(post.tags)
    if post.image:
        data["image"] = post.image
    if post.links:
        data["links"] = list(post.links)
    data.update(post.extra)

    dumped = yaml.safe_dump(data, allow_unicode=True, sort_keys=False, default_flow_style=False, width=1000)
    return f"---\n{dumped}---\n"


def render_post(post: Post, *, include_slug: bool = True) -> str:
    """Render a post back into entry file text: header, blank line, body."""
    header = render_frontmatter(post, include_slug=include_slug)
    if not post.body:
        return header
    return f"{header}\n{post.body.strip()}\n"
