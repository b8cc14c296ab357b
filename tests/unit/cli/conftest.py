import pytest
from unittest.mock import patch


@pytest.fixture
def arg_parser():
    """Parse an argument list without touching the real sys.argv."""
    def _parse(args_list):
        from target_determinator.cli import parse_cmdline_args
        with patch('sys.argv', ['target-determinator'] + args_list):
            return parse_cmdline_args()
    return _parse


@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.delenv('TARGET_DETERMINATOR_WORKSPACE', raising=False)
    monkeypatch.delenv('BAZEL_PATH', raising=False)
