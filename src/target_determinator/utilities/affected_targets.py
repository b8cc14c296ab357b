# target_determinator/utilities/affected_targets.py

import logging
from dataclasses import dataclass
from typing import Callable

from ..pattern import Pattern
from .bazel_query import BazelQuery, QueriedTarget
from .git_utils import GitUtils, LabelledGitRev

logger = logging.getLogger("target-determinator")


@dataclass(frozen=True)
class Context:
    """Where and how to talk to Bazel."""
    workspace_path: str = "."
    bazel_path: str = "bazel"
    query_options: str = ""

    def bazel_query(self) -> BazelQuery:
        return BazelQuery(self.bazel_path, self.workspace_path, self.query_options)


def query_universe(pattern: Pattern) -> str:
    """The recursive pattern covering every target of the pattern's repository."""
    return str(Pattern(repo=pattern.repo, recursive=True))


def walk_affected_targets(
    context: Context,
    revision_before: LabelledGitRev,
    pattern: Pattern,
    callback: Callable[[QueriedTarget], None],
) -> int:
    """
    Calls ``callback`` for every target affected since ``revision_before`` that ``pattern`` selects.

    Args:
        context: Workspace and Bazel settings
        revision_before: Revision to compare the working tree against
        pattern: Only targets whose label matches this pattern are reported
        callback: Invoked once per selected target

    Returns:
        int: Number of targets passed to the callback
    """
    changed_files = GitUtils.get_changed_files_since_commit(context.workspace_path, revision_before.sha)
    if not changed_files:
        logger.info(f"No files changed since {revision_before}")
        return 0

    universe = query_universe(pattern)
    affected = context.bazel_query().query_affected(universe, changed_files)
    logger.debug(f"{len(affected)} targets in {universe} depend on changed files")

    reported = 0
    for target in affected:
        if not pattern.matches(target.label):
            logger.debug(f"Skipping {target.label}: not selected by {pattern}")
            continue
        callback(target)
        reported += 1

    logger.info(f"{reported} affected targets match {pattern}")
    return reported
