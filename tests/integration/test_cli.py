"""Integration tests for the secret-files CLI."""

import json
import logging
import sys
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from secret_files.cli import cli

CHILD_SCRIPT = """
import json, os, sys
path = os.environ["TOOL_CREDENTIALS"]
with open(path) as f:
    contents = f.read()
with open(sys.argv[1], "w") as f:
    json.dump({"argv": sys.argv[2:], "path": path, "contents": contents}, f)
"""


@pytest.fixture(autouse=True)
def restore_root_handlers():
    """Drop handlers the CLI attached to the root logger during a test."""
    root_logger = logging.getLogger()
    before = list(root_logger.handlers)
    yield
    for handler in list(root_logger.handlers):
        if handler not in before:
            root_logger.removeHandler(handler)
            handler.close()


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Config with one file provisioned from TOOL_SECRET."""
    monkeypatch.setenv("TOOL_SECRET", "hunter2")
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.dump(
            {
                "fields": {"credentials": {"env": "TOOL_SECRET"}},
                "files": [
                    {
                        "name": "tool",
                        "field": "credentials",
                        "filename": "credentials",
                        "path_env_var": "TOOL_CREDENTIALS",
                        "args": ["--credentials={{ .Path }}"],
                    }
                ],
            }
        )
    )
    return path


@pytest.mark.integration
class TestInitCommand:
    """Tests for 'secret-files init'."""

    def test_writes_example(self, tmp_path: Path) -> None:
        config = tmp_path / "conf" / "config.yaml"

        result = CliRunner().invoke(cli, ["--config", str(config), "init"])

        assert result.exit_code == 0, result.output
        assert config.exists()

    def test_refuses_overwrite(self, config_file: Path) -> None:
        result = CliRunner().invoke(cli, ["--config", str(config_file), "init"])

        assert result.exit_code != 0
        assert "already exists" in result.output

    def test_force_overwrites(self, config_file: Path) -> None:
        result = CliRunner().invoke(cli, ["--config", str(config_file), "init", "--force"])

        assert result.exit_code == 0, result.output
        assert "kube" in config_file.read_text()


@pytest.mark.integration
class TestDescribeCommand:
    """Tests for 'secret-files describe'."""

    def test_lists_files(self, config_file: Path) -> None:
        result = CliRunner().invoke(cli, ["--config", str(config_file), "describe"])

        assert result.exit_code == 0, result.output
        assert "tool (field: credentials)" in result.output
        assert "temp dir as credentials" in result.output
        assert "TOOL_CREDENTIALS" in result.output

    def test_missing_config(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(cli, ["--config", str(tmp_path / "none.yaml"), "describe"])

        assert result.exit_code == 1
        assert "Configuration file not found" in result.output


@pytest.mark.integration
class TestExecCommand:
    """Tests for 'secret-files exec'."""

    def test_runs_command_with_secret(self, config_file: Path, tmp_path: Path) -> None:
        report_file = tmp_path / "report.json"

        result = CliRunner().invoke(
            cli,
            [
                "--config", str(config_file), "exec", "--",
                sys.executable, "-c", CHILD_SCRIPT, str(report_file),
            ],
        )

        assert result.exit_code == 0, result.output
        report = json.loads(report_file.read_text())
        assert report["contents"] == "hunter2"
        assert report["path"].endswith("/credentials")
        assert report["argv"] == [f"--credentials={report['path']}"]
        assert not Path(report["path"]).exists()

    def test_exit_code_passed_through(self, config_file: Path) -> None:
        result = CliRunner().invoke(
            cli,
            ["--config", str(config_file), "exec", "--", sys.executable, "-c", "raise SystemExit(4)"],
        )

        assert result.exit_code == 4

    def test_dry_run(self, config_file: Path) -> None:
        result = CliRunner().invoke(
            cli, ["--config", str(config_file), "exec", "--dry-run", "--", "tool", "login"]
        )

        assert result.exit_code == 0, result.output
        assert "[DRY RUN]" in result.output
        assert "TOOL_CREDENTIALS=" in result.output
        assert "run:  tool login --credentials=" in result.output
        assert "hunter2" not in result.output

    def test_missing_secret_reported(
        self, config_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("TOOL_SECRET")

        result = CliRunner().invoke(
            cli, ["--config", str(config_file), "exec", "--", "tool"]
        )

        assert result.exit_code == 1
        assert "no value present in the item for field 'credentials'" in result.output

    def test_fixed_path_is_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """A secret file that cannot be written is reported, not a traceback."""
        monkeypatch.setenv("TOOL_SECRET", "hunter2")
        occupied = tmp_path / "occupied"
        occupied.mkdir()
        config = tmp_path / "config.yaml"
        config.write_text(
            yaml.dump(
                {
                    "fields": {"credentials": {"env": "TOOL_SECRET"}},
                    "files": [
                        {"name": "tool", "field": "credentials", "fixed_path": str(occupied)}
                    ],
                }
            )
        )

        result = CliRunner().invoke(
            cli, ["--config", str(config), "exec", "--", sys.executable, "-c", "pass"]
        )

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "Error:" in result.output
        assert "Is a directory" in result.output
        assert "command not found" not in result.output

    def test_unknown_command(self, config_file: Path) -> None:
        result = CliRunner().invoke(
            cli, ["--config", str(config_file), "exec", "--", "definitely-not-a-real-command-xyz"]
        )

        assert result.exit_code == 127
