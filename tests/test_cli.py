"""End-to-end CLI tests.

Each test gets its own HOME so the store lives at <tmp>/home/.templates and
the working directory is <tmp>.
"""
import json

import pytest
from pathlib import Path
from typer.testing import CliRunner
from tmpl import __version__
from tmpl.cli import app

runner = CliRunner()


@pytest.fixture
def home(tmp_path, monkeypatch):
    h = tmp_path / "home"
    h.mkdir()
    monkeypatch.setenv("HOME", str(h))
    monkeypatch.delenv("TMPL_STORE", raising=False)
    monkeypatch.chdir(tmp_path)
    return h


@pytest.fixture
def store_dir(home):
    return home / ".templates"


@pytest.fixture
def src(tmp_path):
    d = tmp_path / "src"
    d.mkdir()
    (d / "f.txt").write_text("hello", encoding="utf-8")
    return d


def _lines(res):
    return [line.rstrip() for line in res.output.splitlines()]


def test_cli_help():
    res = runner.invoke(app, ["--help"])
    assert res.exit_code == 0
    assert "directory templates" in res.output


def test_help_command():
    res = runner.invoke(app, ["help"])
    assert res.exit_code == 0
    assert "tmpl save <template_name> <directory_to_save>" in res.output
    assert "tmpl tag (add|remove)" in res.output


def test_cli_version():
    for args in (["--version"], ["version"]):
        res = runner.invoke(app, args)
        assert res.exit_code == 0
        assert f"tmpl version: {__version__}" in res.output


def test_save_then_list(home, store_dir, src):
    res = runner.invoke(app, ["save", "alpha", "./src"])
    assert res.exit_code == 0, res.output
    assert "Template saved successfully!" in res.output
    assert (store_dir / "alpha" / "f.txt").read_text(encoding="utf-8") == "hello"

    res = runner.invoke(app, ["list"])
    assert res.exit_code == 0
    assert f"Available templates in {store_dir}" in res.output
    assert "- alpha" in _lines(res)


def test_save_with_tags_filtered_list(home, src):
    res = runner.invoke(app, ["save", "beta", "./src", "--tags", "web,api"])
    assert res.exit_code == 0, res.output
    runner.invoke(app, ["save", "plain", "./src"])

    res = runner.invoke(app, ["list", "--tags", "api"])
    assert res.exit_code == 0
    lines = _lines(res)
    assert "- beta [Tags: web, api]" in lines
    assert "- plain" not in lines

    res = runner.invoke(app, ["list", "--tags", "db"])
    assert res.exit_code == 0
    assert "beta" not in res.output
    assert "No templates found with tags: db" in res.output


def test_make_excludes_sidecar(home, store_dir, tmp_path):
    gamma = store_dir / "gamma"
    gamma.mkdir(parents=True)
    (gamma / ".meta").write_text("Tags:x\n", encoding="utf-8")
    (gamma / "main.c").write_text("int main(void) { return 0; }\n", encoding="utf-8")

    res = runner.invoke(app, ["make", "gamma", "out"])
    assert res.exit_code == 0, res.output
    assert "Template created successfully!" in res.output
    assert (tmp_path / "out" / "main.c").exists()
    assert not (tmp_path / "out" / ".meta").exists()


def test_make_refuses_existing_destination(home, src, tmp_path):
    runner.invoke(app, ["save", "gamma", "./src"])
    out = tmp_path / "out"
    out.mkdir()
    (out / "keep.txt").write_text("mine", encoding="utf-8")

    res = runner.invoke(app, ["make", "gamma", "out"])
    assert res.exit_code == 1
    assert "Folder already exists with the name:" in res.output
    assert sorted(p.name for p in out.iterdir()) == ["keep.txt"]
    assert (out / "keep.txt").read_text(encoding="utf-8") == "mine"


def test_tag_add_remove_round_trip(home, src):
    runner.invoke(app, ["save", "delta", "./src"])

    res = runner.invoke(app, ["tag", "add", "delta", "a,b,c"])
    assert res.exit_code == 0, res.output
    assert "Tags updated for delta: a, b, c" in res.output

    res = runner.invoke(app, ["tag", "remove", "delta", "b"])
    assert res.exit_code == 0
    assert "Tags updated for delta: a, c" in res.output

    res = runner.invoke(app, ["list"])
    assert "- delta [Tags: a, c]" in _lines(res)


def test_tag_remove_last_tag(home, src):
    runner.invoke(app, ["save", "delta", "./src", "--tags", "a"])
    res = runner.invoke(app, ["tag", "remove", "delta", "a"])
    assert "Tags updated for delta: (none)" in res.output
    assert "- delta" in _lines(runner.invoke(app, ["list"]))


def test_delete_is_observable(home, src):
    runner.invoke(app, ["save", "alpha", "./src"])
    runner.invoke(app, ["save", "other", "./src"])

    res = runner.invoke(app, ["delete", "alpha"])
    assert res.exit_code == 0
    assert "Template deleted successfully!" in res.output

    res = runner.invoke(app, ["list"])
    assert "- alpha" not in _lines(res)
    assert "- other" in _lines(res)

    res = runner.invoke(app, ["make", "alpha", "new"])
    assert res.exit_code == 1
    assert "Template doesn't exist!" in res.output


def test_save_twice_reports_collision(home, src):
    assert runner.invoke(app, ["save", "alpha", "./src"]).exit_code == 0
    res = runner.invoke(app, ["save", "alpha", "./src"])
    assert res.exit_code == 1
    assert "Template with that name already exists!" in res.output


def test_delete_missing(home):
    res = runner.invoke(app, ["delete", "ghost"])
    assert res.exit_code == 1
    assert "Template doesn't exist!" in res.output


def test_tag_missing_template(home):
    res = runner.invoke(app, ["tag", "add", "ghost", "a"])
    assert res.exit_code == 1
    assert "Template doesn't exist!" in res.output


def test_make_without_store(home, store_dir):
    res = runner.invoke(app, ["make", "alpha", "out"])
    assert res.exit_code == 1
    assert "No templates found in:" in res.output


def test_list_without_store(home, store_dir):
    res = runner.invoke(app, ["list"])
    assert res.exit_code == 0
    assert f"No templates found in {store_dir}" in res.output
    assert not store_dir.exists()


def test_list_json(home, store_dir, src):
    runner.invoke(app, ["save", "beta", "./src", "--tags", "web,api"])
    res = runner.invoke(app, ["list", "--json"])
    assert res.exit_code == 0
    data = json.loads(res.output)
    assert data == [{"name": "beta", "path": str(store_dir / "beta"), "tags": ["web", "api"]}]


def test_save_missing_source(home, store_dir):
    res = runner.invoke(app, ["save", "alpha", "./nope"])
    assert res.exit_code == 1
    assert "Source directory doesn't exist" in res.output
    assert not store_dir.exists()


def test_store_override(home, src, tmp_path, monkeypatch):
    monkeypatch.setenv("TMPL_STORE", str(tmp_path / "custom"))
    res = runner.invoke(app, ["save", "alpha", "./src"])
    assert res.exit_code == 0
    assert (tmp_path / "custom" / "alpha" / "f.txt").exists()
    assert not (home / ".templates").exists()


@pytest.mark.parametrize(
    "args",
    [
        ["save", "alpha"],
        ["save", "alpha", "./src", "extra"],
        ["make", "alpha"],
        ["delete"],
        ["delete", "alpha", "beta"],
        ["tag", "add", "alpha"],
        ["tag", "rename", "alpha", "a"],
        ["frobnicate"],
        [],
    ],
)
def test_usage_errors_do_not_touch_store(home, store_dir, src, args):
    res = runner.invoke(app, args)
    assert res.exit_code != 0
    assert not store_dir.exists()


def test_invalid_template_name(home, store_dir, src):
    res = runner.invoke(app, ["save", "..", "./src"])
    assert res.exit_code == 2
    assert not store_dir.exists()


def test_missing_home_is_fatal(tmp_path, monkeypatch, src):
    monkeypatch.delenv("HOME", raising=False)
    monkeypatch.delenv("TMPL_STORE", raising=False)
    monkeypatch.setattr("tmpl.util.paths._is_windows", lambda: False)
    monkeypatch.chdir(tmp_path)
    res = runner.invoke(app, ["list"])
    assert res.exit_code == 2
    assert "HOME is not set" in res.output


def test_verbose_logs_to_stderr(home, src):
    res = runner.invoke(app, ["--verbose", "save", "alpha", "./src"])
    assert res.exit_code == 0
    assert "Template saved successfully!" in res.output
    assert "DEBUG: Copying" in res.output


def test_quiet_by_default(home, src):
    res = runner.invoke(app, ["save", "alpha", "./src"])
    assert "DEBUG:" not in res.output
