from __future__ import annotations

import json
import shlex
import sys
from pathlib import Path

from rich.text import Text
from typer.testing import CliRunner

from conftest import register, requires_git
from docbuilder.cli import app
from docbuilder.store import PackageStore
from test_repository import make_source_repo
from test_update_job import WRITE_INDEX

runner = CliRunner()


def plain(output: str) -> str:
    return Text.from_ansi(output).plain


def _args(tmp_path: Path) -> list:
    return ["--registry", str(tmp_path / "packages.json"), "--cache-dir", str(tmp_path / "cache")]


def test_named_missing_package_exits_nonzero(tmp_path: Path) -> None:
    result = runner.invoke(app, ["sami:build", "foo", *_args(tmp_path)])

    assert result.exit_code == 1
    assert "not found" in plain(result.output)


def test_disabled_package_is_skipped(tmp_path: Path) -> None:
    store = PackageStore(tmp_path / "packages.json")
    register(store, 1, "bar", tmp_path / "docs", enabled=False)

    result = runner.invoke(app, ["sami:build", "bar", *_args(tmp_path)])

    assert result.exit_code == 0
    assert "Package bar is disabled. Skipping..." in plain(result.output)
    log = (tmp_path / "cache" / "logs" / "build.jsonl").read_text().splitlines()
    assert json.loads(log[0])["status"] == "skipped_disabled"


def test_batch_with_nothing_enabled(tmp_path: Path) -> None:
    result = runner.invoke(app, ["sami:build", *_args(tmp_path)])

    assert result.exit_code == 0
    assert "No packages are enabled" in plain(result.output)


def test_invalid_registry_exits_nonzero(tmp_path: Path) -> None:
    (tmp_path / "packages.json").write_text("{broken")

    result = runner.invoke(app, ["packages", *_args(tmp_path)])

    assert result.exit_code == 1


def test_packages_lists_registry(tmp_path: Path) -> None:
    store = PackageStore(tmp_path / "packages.json")
    register(store, 1, "bar", tmp_path / "docs")

    result = runner.invoke(app, ["packages", *_args(tmp_path)])

    assert result.exit_code == 0
    assert "bar" in plain(result.output)


def test_version() -> None:
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "docbuilder" in plain(result.output)


@requires_git
def test_build_clones_and_generates(tmp_path: Path, monkeypatch) -> None:
    source = make_source_repo(tmp_path / "source")
    store = PackageStore(tmp_path / "packages.json")
    bar = register(store, 3, "bar", tmp_path / "docs", ssh_url=str(source))
    command = shlex.join([sys.executable, "-c", WRITE_INDEX]) + " {build_dir} {name}"
    monkeypatch.setenv("DOCBUILDER_DOC_COMMAND", command)

    result = runner.invoke(app, ["sami:build", "bar", *_args(tmp_path)])

    assert result.exit_code == 0, result.output
    clone_dir = (tmp_path / "cache" / "cloned_project" / "acme" / "bar").resolve()
    assert (clone_dir / "docs" / "index.rst").exists()
    assert store.find_doc_configuration(bar).repository_path == str(clone_dir)
    assert (tmp_path / "docs" / "acme" / "bar" / "build" / "index.html").read_text() == "bar"


@requires_git
def test_named_clone_failure_exits_nonzero(tmp_path: Path) -> None:
    store = PackageStore(tmp_path / "packages.json")
    bar = register(store, 3, "bar", tmp_path / "docs", ssh_url=str(tmp_path / "missing"))

    result = runner.invoke(app, ["sami:build", "bar", *_args(tmp_path)])

    assert result.exit_code == 1
    assert store.find_doc_configuration(bar).repository_path is None
