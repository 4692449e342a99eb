"""Core data types for postcorpus."""

from datetime import datetime
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_serializer, field_validator

from postcorpus.dates import format_timestamp


def _as_term_list(value: Any, field_name: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple, set, frozenset)):
        msg = f"{field_name} must be a string or a list of strings, got {type(value).__name__}"
        raise ValueError(msg)
    terms = []
    for item in value:
        if not isinstance(item, (str, int, float)) or isinstance(item, bool):
            msg = f"{field_name} entries must be strings, got {type(item).__name__}"
            raise ValueError(msg)
        term = str(item).strip()
        if term:
            terms.append(term)
    return terms


# --- Content Domain ---
class Post(BaseModel):
    """A single article entry: front matter fields plus the Markdown body."""

    model_config = ConfigDict(frozen=True)

    slug: str = Field(min_length=1)
    title: str = Field(min_length=1)
    date: datetime
    description: str | None = None
    categories: frozenset[str] = Field(default_factory=frozenset)
    tags: frozenset[str] = Field(default_factory=frozenset)
    links: tuple[str, ...] = ()
    image: str | None = None
    body: str = ""
    extra: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)
    path: Path | None = Field(default=None, exclude=True)

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(value)
        return value.strip() if isinstance(value, str) else value

    @field_validator("description", "image", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value

    @field_validator("categories", "tags", mode="before")
    @classmethod
    def _coerce_terms(cls, value: Any, info: ValidationInfo) -> frozenset[str]:
        return frozenset(_as_term_list(value, info.field_name))

    @field_validator("links", mode="before")
    @classmethod
    def _coerce_links(cls, value: Any) -> tuple[str, ...]:
        # Order matters for attribution, so duplicates are dropped but order kept.
        return tuple(dict.fromkeys(_as_term_list(value, "links")))

    @field_validator("extra")
    @classmethod
    def _freeze_extra(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_serializer("extra")
    def _dump_extra(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return dict(value)

    @field_validator("date")
    @classmethod
    def _require_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            msg = "date must be timezone-aware"
            raise ValueError(msg)
        return value

    def __hash__(self) -> int:
        # Extra header values may be unhashable lists.
        return hash((self.slug, self.title, self.date, self.path))

    @property
    def directory(self) -> Path | None:
        return self.path.parent if self.path else None

    @property
    def iso_date(self) -> str:
        return format_timestamp(self.date)


# --- Validation Domain ---
class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Issue(BaseModel):
    """A single finding produced by a corpus check."""

    code: str
    severity: Severity
    message: str
    path: Path | None = None
    slug: str | None = None


class ValidationReport(BaseModel):
    """Outcome of checking every post in a content store."""

    root: Path
    post_count: int = 0
    issues: list[Issue] = Field(default_factory=list)
    strict: bool = False

    @property
    def errors(self) -> list[Issue]:
        return [issue for issue in self.issues if issue.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Issue]:
        return [issue for issue in self.issues if issue.severity == Severity.WARNING]

    @property
    def ok(self) -> bool:
        if self.errors:
            return False
        return not (self.strict and self.warnings)

    def add(self, issue: Issue) -> None:
        self.issues.append(issue)

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly summary, issues sorted by path then code."""
        ordered = sorted(self.issues, key=lambda i: (str(i.path or ""), i.code, i.slug or ""))
        return {
            "root": str(self.root),
            "ok": self.ok,
            "strict": self.strict,
            "post_count": self.post_count,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "issues": [issue.model_dump(mode="json") for issue in ordered],
        }
