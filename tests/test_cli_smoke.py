"""
CLI smoke tests with a fake backend.

Tests basic CLI functionality and command wiring without requiring a real
storage account. CLIContext.from_env is patched to hand commands a
filesystem over FakeBlobBackend.
"""
from __future__ import annotations

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from blobfs.cli import app
from blobfs.cli_context import CLIContext
from blobfs.filesystem import AzureFileSystem
from tests.helpers.data import LOREM_IPSUM, OBJECT_PATH


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def cli_backend(backend):
    backend.put("test-container/dir/a.txt", b"a")
    backend.put("test-container/dir/sub/b.txt", b"bb")
    return backend


@pytest.fixture(autouse=True)
def cli_context(options, cli_backend):
    """Patch context creation so commands use the fake backend."""
    def make_context():
        return CLIContext(options=options, _filesystem=AzureFileSystem(options, backend=cli_backend))

    with patch("blobfs.cli.CLIContext.from_env", side_effect=make_context) as mock_from_env:
        yield mock_from_env


class TestCat:
    """Test the cat command."""

    def test_cat_whole_object(self, runner):
        result = runner.invoke(app, ["cat", OBJECT_PATH])

        assert result.exit_code == 0
        assert result.stdout_bytes == LOREM_IPSUM

    def test_cat_range(self, runner):
        result = runner.invoke(app, ["cat", OBJECT_PATH, "--offset", "7", "--length", "5"])

        assert result.exit_code == 0
        assert result.stdout_bytes == LOREM_IPSUM[7:12]

    def test_cat_offset_only(self, runner):
        result = runner.invoke(app, ["cat", OBJECT_PATH, "--offset", "400"])

        assert result.exit_code == 0
        assert result.stdout_bytes == LOREM_IPSUM[400:]

    def test_cat_missing(self, runner):
        result = runner.invoke(app, ["cat", "test-container/nope"])

        assert result.exit_code == 1
        assert "Error: Path does not exist" in result.output

    def test_cat_uri_rejected(self, runner):
        result = runner.invoke(app, ["cat", "abfs://test-container/test-object-name"])
        assert result.exit_code == 2

    def test_cat_container_rejected(self, runner):
        result = runner.invoke(app, ["cat", "test-container"])
        assert result.exit_code == 2

    def test_cat_offset_past_end(self, runner):
        result = runner.invoke(app, ["cat", OBJECT_PATH, "--offset", str(len(LOREM_IPSUM) + 1)])
        assert result.exit_code == 2

    def test_backend_closed_after_command(self, runner, cli_backend):
        runner.invoke(app, ["cat", OBJECT_PATH])
        assert cli_backend.closed


class TestStat:
    """Test the stat command."""

    def test_stat_file(self, runner):
        result = runner.invoke(app, ["stat", OBJECT_PATH])

        assert result.exit_code == 0
        assert f"Path: {OBJECT_PATH}" in result.stdout
        assert "Type: file" in result.stdout
        assert f"({len(LOREM_IPSUM)} bytes)" in result.stdout
        assert "Metadata" in result.stdout
        assert "Content-Hash" in result.stdout
        assert "BlockBlob" in result.stdout

    def test_stat_directory(self, runner):
        result = runner.invoke(app, ["stat", "test-container/dir"])

        assert result.exit_code == 0
        assert "Type: dir" in result.stdout
        assert "Metadata" not in result.stdout

    def test_stat_missing(self, runner):
        result = runner.invoke(app, ["stat", "test-container/nope"])

        assert result.exit_code == 0
        assert "Type: missing" in result.stdout


class TestLs:
    """Test the ls command."""

    def test_ls_root(self, runner):
        result = runner.invoke(app, ["ls"])

        assert result.exit_code == 0
        assert "test-container/" in result.stdout

    def test_ls_container(self, runner):
        result = runner.invoke(app, ["ls", "test-container"])

        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert lines[0].startswith("dir")
        assert lines[0].endswith("test-container/dir/")
        assert lines[1].startswith("file")
        assert lines[1].endswith(OBJECT_PATH)
        assert "447 B" in lines[1]

    def test_ls_recursive(self, runner):
        result = runner.invoke(app, ["ls", "test-container/dir", "-r"])

        assert result.exit_code == 0
        assert "test-container/dir/sub/b.txt" in result.stdout
        assert "test-container/dir/sub/" in result.stdout

    def test_ls_missing_container(self, runner):
        result = runner.invoke(app, ["ls", "nope"])
        assert result.exit_code == 1

    def test_ls_file(self, runner):
        result = runner.invoke(app, ["ls", OBJECT_PATH])
        assert result.exit_code == 2


class TestConfiguration:
    """Test failures while loading configuration."""

    def test_missing_account(self, runner, cli_context):
        cli_context.side_effect = ValueError("AZURE_STORAGE_ACCOUNT environment variable is required")

        result = runner.invoke(app, ["ls"])

        assert result.exit_code == 2
        assert "AZURE_STORAGE_ACCOUNT" in result.output


def test_help_lists_commands(runner):
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    for command in ("cat", "stat", "ls"):
        assert command in result.stdout
