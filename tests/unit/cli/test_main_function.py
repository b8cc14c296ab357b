"""Test main() orchestration and exit codes."""

import argparse
import pytest
from unittest.mock import patch, MagicMock

from target_determinator.main import main
from target_determinator.pattern import parse_pattern
from target_determinator.utilities.affected_targets import Context
from target_determinator.exceptions import (
    TargetDeterminatorError, ValidationError, LabelParseError, ConfigurationError,
    ProcessError, FileSystemError,
)


@pytest.fixture(autouse=True)
def in_tmp_dir(monkeypatch, tmp_path):
    """main() writes its log file to the current directory."""
    monkeypatch.chdir(tmp_path)


def make_args(command="drive"):
    return argparse.Namespace(
        command=command,
        before_revision="main",
        working_directory="/ws",
        bazel="/usr/bin/bazel",
        bazel_query_options="--config=ci",
        targets="//...",
        target_pattern=parse_pattern("//..."),
        manual_test_mode="skip",
        log="INFO",
    )


@pytest.fixture
def mock_handlers():
    with patch("target_determinator.main.handle_drive") as mock_drive, \
         patch("target_determinator.main.handle_affected") as mock_affected:
        yield {"drive": mock_drive, "affected": mock_affected}


class TestMainSuccess:

    def test_drive(self, mock_handlers):
        args = make_args("drive")
        with patch("target_determinator.main.parse_cmdline_args", return_value=args):
            assert main() == 0

        mock_handlers["drive"].assert_called_once_with(
            Context(workspace_path="/ws", bazel_path="/usr/bin/bazel", query_options="--config=ci"), args
        )
        mock_handlers["affected"].assert_not_called()

    def test_affected(self, mock_handlers):
        with patch("target_determinator.main.parse_cmdline_args", return_value=make_args("affected")):
            assert main() == 0

        mock_handlers["affected"].assert_called_once()

    def test_writes_log_file(self, mock_handlers, tmp_path):
        with patch("target_determinator.main.parse_cmdline_args", return_value=make_args()):
            main()

        assert (tmp_path / "target-determinator-log.txt").exists()

    def test_unknown_command(self, mock_handlers):
        with patch("target_determinator.main.parse_cmdline_args", return_value=make_args("query")):
            assert main() == 1


class TestMainErrors:

    @pytest.mark.parametrize("error", [
        ValidationError("Baseline commit does not exist: main"),
        ConfigurationError("bad"),
        FileSystemError("disk full"),
        TargetDeterminatorError("wrapped"),
        RuntimeError("unexpected"),
    ])
    def test_handler_errors_exit_1(self, mock_handlers, error):
        mock_handlers["drive"].side_effect = error
        with patch("target_determinator.main.parse_cmdline_args", return_value=make_args()):
            assert main() == 1

    def test_bazel_exit_code_is_propagated(self, mock_handlers):
        mock_handlers["drive"].side_effect = ProcessError("bazel test failed with exit code 3", code=3)
        with patch("target_determinator.main.parse_cmdline_args", return_value=make_args()):
            assert main() == 3

    def test_process_error_without_code(self, mock_handlers):
        mock_handlers["drive"].side_effect = ProcessError("Git operation failed")
        with patch("target_determinator.main.parse_cmdline_args", return_value=make_args()):
            assert main() == 1

    def test_invalid_pattern_before_logging(self, mock_handlers, capsys):
        with patch("target_determinator.main.parse_cmdline_args",
                   side_effect=LabelParseError("label parse error: empty name: '//foo:'")):
            assert main() == 1

        assert "empty name" in capsys.readouterr().err
        mock_handlers["drive"].assert_not_called()


class TestQueryOptionsPassThrough:

    def test_options_reach_bazel_query(self, mock_handlers, tmp_path):
        argv = [
            'target-determinator',
            '--working-directory', str(tmp_path),
            '--bazel-query-options=--config=ci --noshow_progress',
            'affected', 'main',
        ]
        with patch('sys.argv', argv):
            assert main() == 0

        context = mock_handlers["affected"].call_args[0][0]
        assert context.query_options == "--config=ci --noshow_progress"

        with patch("target_determinator.utilities.bazel_query.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
            context.bazel_query().query("//...")

        cmd = mock_run.call_args[0][0]
        assert cmd[-2:] == ["--config=ci", "--noshow_progress"]
        assert mock_run.call_args[1]["cwd"] == str(tmp_path)
