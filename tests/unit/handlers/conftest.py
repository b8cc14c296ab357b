import argparse
import pytest

from target_determinator.label import parse_label
from target_determinator.pattern import parse_pattern
from target_determinator.utilities.affected_targets import Context
from target_determinator.utilities.bazel_query import QueriedTarget
from target_determinator.utilities.git_utils import LabelledGitRev


@pytest.fixture
def context():
    return Context(workspace_path="/ws", bazel_path="/usr/bin/bazel", query_options="")


@pytest.fixture
def revision():
    return LabelledGitRev(label="main", sha="0123456789abcdef0123456789abcdef01234567")


@pytest.fixture
def make_params():
    """Builds the namespace parse_cmdline_args would return."""
    def _make(command="drive", targets="//...", manual_test_mode="skip"):
        params = argparse.Namespace(
            command=command,
            before_revision="main",
            working_directory="/ws",
            bazel="/usr/bin/bazel",
            bazel_query_options="",
            targets=targets,
            target_pattern=parse_pattern(targets),
            log="INFO",
        )
        if command == "drive":
            params.manual_test_mode = manual_test_mode
        return params
    return _make


@pytest.fixture
def make_target():
    def _make(label_str, rule_class="cc_library", tags=()):
        return QueriedTarget(label=parse_label(label_str), rule_class=rule_class, tags=tuple(tags))
    return _make


@pytest.fixture
def fake_walk():
    """A walk_affected_targets replacement that reports the given targets when they match."""
    def _make(targets):
        def _walk(context, revision_before, pattern, callback):
            count = 0
            for target in targets:
                if pattern.matches(target.label):
                    callback(target)
                    count += 1
            return count
        return _walk
    return _make
