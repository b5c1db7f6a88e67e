from pathlib import Path

import pytest
from typer.testing import CliRunner

from cargo_add.cli import app
from cargo_add.manifest import Manifest

runner = CliRunner()


@pytest.fixture
def manifest_file(tmp_path: Path) -> Path:
    file = tmp_path / "Cargo.toml"
    file.write_text('[package]\nname = "x"\nversion = "0.1.0"\n', encoding="utf-8")
    return file


def test_cli_help() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "cargo-add" in result.stdout


@pytest.mark.parametrize(
    "args",
    [[], ["add"], ["invalid", "arguments", "here"]],
)
def test_invalid_arguments_show_notice_and_usage(args: list[str]) -> None:
    result = runner.invoke(app, args)

    assert result.exit_code != 0
    assert "invalid argument" in result.output.lower()
    assert "usage:" in result.output.lower()


def test_unknown_option_shows_usage() -> None:
    result = runner.invoke(app, ["add", "pkg", "--invalid", "arguments"])

    assert result.exit_code != 0
    assert "invalid argument" in result.output.lower()
    assert "usage:" in result.output.lower()


def test_nonexistent_manifest_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["add", "pkg", "--manifest-path", "this-file-doesnt-exist.txt"])

    assert result.exit_code == 1
    assert "no such file or directory" in result.output.lower()


def test_add_dependency(manifest_file: Path) -> None:
    result = runner.invoke(app, ["add", "serde", "--vers", "1.0", "--manifest-path", str(manifest_file)])

    assert result.exit_code == 0
    content = manifest_file.read_text(encoding="utf-8")
    assert content.startswith("[package]\n")
    assert Manifest.from_str(content).data["dependencies"] == {"serde": "1.0"}


def test_add_dev_dependency_from_working_directory(
    manifest_file: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    nested = manifest_file.parent / "tests"
    nested.mkdir()
    monkeypatch.chdir(nested)

    result = runner.invoke(app, ["add", "tempfile", "--dev"])

    assert result.exit_code == 0
    data = Manifest.open(manifest_file).data
    assert data["dev-dependencies"] == {"tempfile": "*"}
    assert "dependencies" not in data


def test_add_optional_git_build_dependency(manifest_file: Path) -> None:
    result = runner.invoke(
        app,
        [
            "add",
            "cc",
            "--build",
            "--git",
            "https://github.com/rust-lang/cc-rs",
            "--optional",
            "--manifest-path",
            str(manifest_file),
        ],
    )

    assert result.exit_code == 0
    assert Manifest.open(manifest_file).data["build-dependencies"] == {
        "cc": {"git": "https://github.com/rust-lang/cc-rs", "optional": True}
    }


def test_dev_and_build_are_exclusive(manifest_file: Path) -> None:
    result = runner.invoke(app, ["add", "cc", "--dev", "--build", "--manifest-path", str(manifest_file)])

    assert result.exit_code != 0
    assert "dependencies" not in Manifest.open(manifest_file).data


def test_conflicting_sources_are_rejected(manifest_file: Path) -> None:
    result = runner.invoke(
        app,
        ["add", "serde", "--vers", "1.0", "--path", "../serde", "--manifest-path", str(manifest_file)],
    )

    assert result.exit_code == 1
    assert "invalid argument" in result.output.lower()


def test_manifest_not_found(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["add", "serde"])

    assert result.exit_code == 1
    assert "could not find" in result.output.lower()


def test_manifest_with_invalid_utf8(tmp_path: Path) -> None:
    file = tmp_path / "Cargo.toml"
    file.write_bytes(b'[package]\nname = "\xff"\n')

    result = runner.invoke(app, ["add", "serde", "--manifest-path", str(file)])

    assert result.exit_code == 1
    assert "not valid utf-8" in result.output.lower()
    assert file.read_bytes() == b'[package]\nname = "\xff"\n'
