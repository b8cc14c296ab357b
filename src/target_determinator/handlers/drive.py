# target_determinator/handlers/drive.py

import os
import logging
import argparse
from typing import List, TYPE_CHECKING

from ..label import Label
from ..utilities.error_handling import handler_error_wrapper
from ..utilities.git_utils import GitUtils
from ..utilities.affected_targets import walk_affected_targets
from ..utilities.build_workflows import write_target_pattern_file, run_bazel

if TYPE_CHECKING:
    from ..utilities.affected_targets import Context
    from ..utilities.bazel_query import QueriedTarget

logger = logging.getLogger("target-determinator")


@handler_error_wrapper
def handle_drive(context: "Context", params: argparse.Namespace) -> bool:
    """
    Handler for the 'drive' command. Builds, or tests if any test is among
    them, exactly the targets affected since the before-revision.

    `bazel test` errors when given only non-test targets, and both verbs error
    when given no targets at all, so the verb and the decision to run Bazel
    at all are made here.
    """
    revision_before = GitUtils.resolve_revision(context.workspace_path, params.before_revision)

    targets: List[Label] = []
    command_verb = "build"

    def collect(target: "QueriedTarget") -> None:
        nonlocal command_verb
        if params.manual_test_mode == "skip" and target.is_manual:
            logger.debug(f"Skipping {target.label}: tagged manual")
            return
        targets.append(target.label)
        if target.is_test:
            command_verb = "test"

    logger.info("Discovering affected targets")
    walk_affected_targets(context, revision_before, params.target_pattern, collect)

    if not targets:
        logger.info("No targets were affected, not running Bazel")
        return True

    logger.info(f"Discovered {len(targets)} affected targets")

    target_pattern_file = write_target_pattern_file(targets)
    try:
        logger.info(f"Running {command_verb} on {len(targets)} targets")
        run_bazel(context.bazel_path, command_verb, target_pattern_file, context.workspace_path)
    finally:
        os.remove(target_pattern_file)

    return True
