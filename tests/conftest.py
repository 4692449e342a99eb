from __future__ import annotations

from pathlib import Path

import pytest

from postcorpus.store import ContentStore
from tests.samples import DATACLASSES, FSTRINGS, WALRUS, write_post


@pytest.fixture
def posts_dir(tmp_path: Path) -> Path:
    """A small, valid corpus laid out as ``<tmp>/posts/<slug>/index.md``."""
    root = tmp_path / "posts"
    write_post(root, "walrus-operator", WALRUS)
    entry = write_post(root, "f-strings", FSTRINGS)
    (entry.parent / "cover.png").write_bytes(b"\x89PNG")
    write_post(root, "dataclasses", DATACLASSES)
    return root


@pytest.fixture
def store(posts_dir: Path) -> ContentStore:
    return ContentStore(posts_dir)
