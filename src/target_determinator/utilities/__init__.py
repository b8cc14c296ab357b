"""
Utilities package for target-determinator.

This package contains the git and Bazel integrations, the affected target
walk, build invocation helpers and error handling.
"""

from .error_handling import format_and_print_error, handler_error_wrapper
from .git_utils import GitUtils, LabelledGitRev
from .bazel_query import BazelQuery, QueriedTarget
from .affected_targets import Context, walk_affected_targets
from .build_workflows import write_target_pattern_file, run_bazel, format_duration

__all__ = [
    # Error handling
    'format_and_print_error',
    'handler_error_wrapper',
    # Git utilities
    'GitUtils',
    'LabelledGitRev',
    # Bazel utilities
    'BazelQuery',
    'QueriedTarget',
    # Affected targets
    'Context',
    'walk_affected_targets',
    # Build invocation
    'write_target_pattern_file',
    'run_bazel',
    'format_duration',
]
