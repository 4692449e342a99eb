import json

from typer.testing import CliRunner

from postcorpus.cli import app
from tests.samples import WALRUS, write_post

runner = CliRunner()


def test_validate_clean_corpus(tmp_path, posts_dir):
    result = runner.invoke(app, ["validate", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert "3 post(s), 0 error(s), 0 warning(s)" in result.output


def test_validate_json_report(tmp_path, posts_dir):
    write_post(posts_dir / "2019", "walrus-operator", WALRUS)

    result = runner.invoke(app, ["--log-level", "WARNING", "validate", str(tmp_path), "--json"])

    assert result.exit_code == 1
    report = json.loads(result.stdout)
    assert report["ok"] is False
    assert report["post_count"] == 4
    assert {issue["code"] for issue in report["issues"]} == {"duplicate-slug"}


def test_validate_strict_flag(tmp_path, posts_dir):
    write_post(posts_dir, "terse", "---\ntitle: Terse\ndate: 2020-01-01\n---\nbody\n")

    assert runner.invoke(app, ["validate", str(tmp_path)]).exit_code == 0
    assert runner.invoke(app, ["validate", str(tmp_path), "--strict"]).exit_code == 1


def test_validate_uses_config_file(tmp_path, posts_dir):
    write_post(posts_dir, "terse", "---\ntitle: Terse\ndate: 2020-01-01\n---\nbody\n")
    (tmp_path / ".postcorpus").mkdir()
    (tmp_path / ".postcorpus" / "config.yml").write_text("validation:\n  strict: true\n", encoding="utf-8")

    assert runner.invoke(app, ["validate", str(tmp_path)]).exit_code == 1


def test_broken_config_exits_with_error(tmp_path):
    (tmp_path / ".postcorpus").mkdir()
    (tmp_path / ".postcorpus" / "config.yml").write_text("- nope\n", encoding="utf-8")

    result = runner.invoke(app, ["validate", str(tmp_path)])

    assert result.exit_code == 1
    assert "Error" in result.output


def test_list_filters_by_tag(tmp_path, posts_dir):
    result = runner.invoke(app, ["list", str(tmp_path), "--tag", "syntax"])

    assert result.exit_code == 0, result.output
    assert "f-strings" in result.output
    assert "walrus-operator" in result.output
    assert "dataclasses" not in result.output


def test_show_post(tmp_path, posts_dir):
    result = runner.invoke(app, ["show", "dataclasses", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert "2020-11-02T08:00:00Z" in result.output
    assert "author" in result.output


def test_show_unknown_post(tmp_path, posts_dir):
    result = runner.invoke(app, ["show", "nope", str(tmp_path)])

    assert result.exit_code == 1
    assert "not found" in result.output


def test_taxonomy_counts(tmp_path, posts_dir):
    result = runner.invoke(app, ["taxonomy", str(tmp_path), "--kind", "categories"])

    assert result.exit_code == 0, result.output
    assert "python" in result.output
    assert "stdlib" in result.output


def test_taxonomy_rejects_unknown_kind(tmp_path, posts_dir):
    assert runner.invoke(app, ["taxonomy", str(tmp_path), "--kind", "authors"]).exit_code == 2


def test_new_scaffolds_post(tmp_path, posts_dir):
    result = runner.invoke(
        app,
        ["new", "Context Managers", str(tmp_path), "-d", "with statements", "-t", "stdlib", "-c", "python"],
    )

    assert result.exit_code == 0, result.output
    entry = posts_dir / "context-managers" / "index.md"
    assert entry.is_file()
    text = entry.read_text(encoding="utf-8")
    assert "title: Context Managers" in text
    assert "description: with statements" in text


def test_new_refuses_existing_post(tmp_path, posts_dir):
    result = runner.invoke(app, ["new", "Dataclasses", str(tmp_path)])

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_bracketed_terms_are_printed_verbatim(tmp_path, posts_dir):
    write_post(
        posts_dir,
        "generics",
        "---\ntitle: Generics\ndescription: see [docs]\ndate: 2023-01-01\n"
        "categories: ['typing[x]']\ntags: ['list[int]', 'x[/y]']\n---\nbody\n",
    )

    listed = runner.invoke(app, ["list", str(tmp_path), "--tag", "list[int]"])
    shown = runner.invoke(app, ["show", "generics", str(tmp_path)])
    counted = runner.invoke(app, ["taxonomy", str(tmp_path)])

    for result in (listed, shown, counted):
        assert result.exit_code == 0, result.output
        assert "list[int]" in result.output
        assert "x[/y]" in result.output
    assert "see [docs]" in shown.output
    assert "typing[x]" in shown.output
