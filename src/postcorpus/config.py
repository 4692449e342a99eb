from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PathsSettings(BaseModel):
    """Path configuration.

    ``posts_dir`` is relative to ``content_root`` unless absolute.
    content_root defaults to current working directory.
    """

    content_root: Path = Field(
        default_factory=Path.cwd,
        description="Root directory of the corpus (defaults to current working directory)",
    )
    posts_dir: Path = Field(default=Path("posts"), description="Directory holding one sub-directory per post")
    entry_filename: str = Field(default="index.md", description="Name of the entry file inside each post directory")

    @property
    def abs_posts_dir(self) -> Path:
        if self.posts_dir.is_absolute():
            return self.posts_dir
        return self.content_root / self.posts_dir


class ValidationSettings(BaseModel):
    """Which corpus checks run and how strictly they are reported."""

    require_description: bool = Field(default=True, description="Warn when a post has no description")
    allow_future_dates: bool = Field(default=False, description="Accept posts dated in the future")
    check_images: bool = Field(default=True, description="Warn when a relative image path does not exist")
    strict: bool = Field(default=False, description="Treat warnings as failures")
    timezone: str = Field(default="UTC", description="Timezone applied to naive post dates")

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            msg = f"Unknown timezone: {value!r}"
            raise ValueError(msg) from exc
        return value

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


class CorpusConfig(BaseSettings):
    """Root configuration for postcorpus.

    Supports environment variable overrides with the pattern:
    POSTCORPUS_SECTION__KEY (e.g., POSTCORPUS_VALIDATION__STRICT)
    """

    paths: PathsSettings = Field(default_factory=PathsSettings)
    validation: ValidationSettings = Field(default_factory=ValidationSettings)

    model_config = SettingsConfigDict(
        extra="ignore",
        env_prefix="POSTCORPUS_",
        env_nested_delimiter="__",
    )
