# target_determinator/handlers/affected.py

import logging
import argparse
from typing import TYPE_CHECKING

from ..pattern import Pattern
from ..utilities.error_handling import handler_error_wrapper
from ..utilities.git_utils import GitUtils
from ..utilities.affected_targets import walk_affected_targets

if TYPE_CHECKING:
    from ..utilities.affected_targets import Context
    from ..utilities.bazel_query import QueriedTarget

logger = logging.getLogger("target-determinator")


@handler_error_wrapper
def handle_affected(context: "Context", params: argparse.Namespace) -> int:
    """
    Handler for the 'affected' command. Prints the canonical pattern of every
    affected target selected by --targets, one per line on stdout.

    Returns:
        int: Number of targets printed
    """
    revision_before = GitUtils.resolve_revision(context.workspace_path, params.before_revision)
    logger.info(f"Discovering targets affected since {revision_before}")

    def print_target(target: "QueriedTarget") -> None:
        print(Pattern.for_label(target.label))

    return walk_affected_targets(context, revision_before, params.target_pattern, print_target)
