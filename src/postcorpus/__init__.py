"""postcorpus: load, check and scaffold a Markdown blog post corpus."""

from postcorpus.store import ContentStore
from postcorpus.types import Issue, Post, Severity, ValidationReport
from postcorpus.validation import validate_corpus

__version__ = "0.1.0"
__all__ = [
    "ContentStore",
    "Issue",
    "Post",
    "Severity",
    "ValidationReport",
    "validate_corpus",
]
