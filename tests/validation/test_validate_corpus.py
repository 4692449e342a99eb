"""Corpus-level checks: unique slugs, parseable front matter, well-formed dates."""

from datetime import UTC, datetime

import pytest

from postcorpus.config import ValidationSettings
from postcorpus.store import ContentStore
from postcorpus.types import Severity
from postcorpus.validation import find_duplicate_slugs, validate_corpus
from tests.samples import WALRUS, write_post

NOW = datetime(2024, 6, 1, tzinfo=UTC)


def _codes(report):
    return sorted(issue.code for issue in report.issues)


def _run(posts_dir, **settings):
    return validate_corpus(ContentStore(posts_dir), ValidationSettings(**settings), now=NOW)


def test_clean_corpus_passes(posts_dir):
    report = _run(posts_dir)

    assert report.ok
    assert report.post_count == 3
    assert report.issues == []


def test_duplicate_slugs_are_errors_on_every_post(posts_dir):
    write_post(posts_dir / "2019", "walrus-operator", WALRUS)

    report = _run(posts_dir)

    duplicates = [issue for issue in report.issues if issue.code == "duplicate-slug"]
    assert len(duplicates) == 2
    assert all(issue.severity == Severity.ERROR for issue in duplicates)
    assert not report.ok


def test_slugs_differing_only_in_case_collide(posts_dir):
    write_post(posts_dir, "other", WALRUS.replace("title:", "slug: Walrus-Operator\ntitle:"))

    report = _run(posts_dir)

    assert _codes(report).count("duplicate-slug") == 2
    assert "invalid-slug" in _codes(report)
    assert "slug-mismatch" in _codes(report)


def test_missing_frontmatter(posts_dir):
    write_post(posts_dir, "no-header", "# Only a heading\n")

    report = _run(posts_dir)

    assert _codes(report) == ["missing-frontmatter"]
    assert report.errors[0].path == posts_dir / "no-header" / "index.md"
    assert report.post_count == 4


def test_invalid_frontmatter(posts_dir):
    write_post(posts_dir, "bad-yaml", "---\ntitle: [oops\n---\nbody\n")

    assert _codes(_run(posts_dir)) == ["invalid-frontmatter"]


@pytest.mark.parametrize(
    "date_line",
    [
        "date: someday",
        "date: 2021-02-30x",
        "date: 2021-02-30",
        "date: 2021-13-01",
        "date: '5'",
        "date: [2021]",
        "",
    ],
)
def test_malformed_or_missing_date(posts_dir, date_line):
    write_post(posts_dir, "dateless", f"---\ntitle: Dateless\n{date_line}\n---\nbody\n")

    report = _run(posts_dir)

    assert _codes(report) == ["invalid-field"]
    assert "date" in report.errors[0].message


def test_future_dates_are_warnings_unless_allowed(posts_dir):
    write_post(posts_dir, "tomorrow", "---\ntitle: Soon\ndescription: d\ndate: 2030-01-01\n---\nbody\n")

    report = _run(posts_dir)
    assert _codes(report) == ["future-date"]
    assert report.ok

    assert _run(posts_dir, allow_future_dates=True).issues == []


def test_missing_description_can_be_disabled(posts_dir):
    write_post(posts_dir, "terse", "---\ntitle: Terse\ndate: 2020-01-01\n---\nbody\n")

    assert _codes(_run(posts_dir)) == ["missing-description"]
    assert _run(posts_dir, require_description=False).issues == []


def test_missing_image_and_empty_body(posts_dir):
    write_post(posts_dir, "lonely", "---\ntitle: L\ndescription: d\ndate: 2020-01-01\nimage: hero.jpg\n---\n")

    assert _codes(_run(posts_dir)) == ["empty-body", "missing-image"]
    assert _codes(_run(posts_dir, check_images=False)) == ["empty-body"]


def test_percent_encoded_image_path_is_decoded(posts_dir):
    entry = write_post(
        posts_dir,
        "spaced",
        "---\ntitle: S\ndescription: d\ndate: 2020-01-01\nimage: my%20cover.png\n---\nbody\n",
    )
    (entry.parent / "my cover.png").write_bytes(b"\x89PNG")

    assert _run(posts_dir).issues == []


def test_remote_images_are_not_checked(posts_dir):
    write_post(
        posts_dir,
        "remote",
        "---\ntitle: R\ndescription: d\ndate: 2020-01-01\nimage: https://example.com/a.png\n---\nbody\n",
    )

    assert _run(posts_dir).issues == []


def test_orphan_directory_is_reported(posts_dir):
    (posts_dir / "half-done").mkdir()
    (posts_dir / "half-done" / "draft.md").write_text("wip", encoding="utf-8")

    report = _run(posts_dir)

    assert _codes(report) == ["empty-directory"]
    assert report.warnings[0].path == posts_dir / "half-done"


def test_strict_mode_fails_on_warnings(posts_dir):
    write_post(posts_dir, "terse", "---\ntitle: Terse\ndate: 2020-01-01\n---\nbody\n")

    assert not _run(posts_dir, strict=True).ok


def test_find_duplicate_slugs_ignores_unique(store):
    assert list(find_duplicate_slugs(store.posts())) == []
