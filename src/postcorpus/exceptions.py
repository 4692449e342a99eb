"""Exceptions raised while reading, checking and scaffolding posts."""

from pathlib import Path


class CorpusError(Exception):
    """Base exception for all postcorpus errors."""


class FrontmatterError(CorpusError):
    """Base class for front matter problems."""


class MissingFrontmatterError(FrontmatterError):
    """Raised when an entry file does not start with a front matter header."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        where = f" in '{path}'" if path else ""
        super().__init__(f"No front matter header found{where}.")


class FrontmatterParsingError(FrontmatterError):
    """Raised when YAML front matter is invalid."""

    def __init__(self, reason: str, path: Path | None = None) -> None:
        self.reason = reason
        self.path = path
        where = f" in '{path}'" if path else ""
        super().__init__(f"Invalid YAML front matter{where}: {reason}")


class PostParsingError(CorpusError):
    """Raised when an entry file cannot be read."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to read post at '{path}': {reason}")


class PostValidationError(CorpusError):
    """Raised when front matter cannot be mapped onto a post."""

    def __init__(self, errors: list[str], path: Path | None = None) -> None:
        self.errors = errors
        self.path = path
        where = f" at '{path}'" if path else ""
        super().__init__(f"Invalid post{where}: " + "; ".join(errors))


class InvalidDateError(CorpusError, ValueError):
    """Raised when a value is not a well-formed timestamp."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Not a valid timestamp: {value!r}")


class PostNotFoundError(CorpusError):
    """Raised when no post has the requested slug."""

    def __init__(self, slug: str) -> None:
        self.slug = slug
        super().__init__(f"Post with slug '{slug}' not found.")


class DuplicateSlugError(CorpusError):
    """Raised when a slug resolves to more than one post."""

    def __init__(self, slug: str, paths: list[Path]) -> None:
        self.slug = slug
        self.paths = paths
        listed = ", ".join(str(p) for p in paths)
        super().__init__(f"Slug '{slug}' is used by {len(paths)} posts: {listed}")


class PostExistsError(CorpusError):
    """Raised when scaffolding would overwrite an existing post."""

    def __init__(self, slug: str, path: Path) -> None:
        self.slug = slug
        self.path = path
        super().__init__(f"Post '{slug}' already exists at '{path}'.")


class ConfigLoadError(CorpusError):
    """Raised when the configuration file cannot be loaded or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load config at '{path}': {reason}")


class PostWriteError(CorpusError):
    """Raised when a scaffolded entry file cannot be written."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write post at '{path}': {reason}")
