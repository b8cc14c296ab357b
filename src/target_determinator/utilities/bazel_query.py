# target_determinator/utilities/bazel_query.py

import json
import logging
import posixpath
import subprocess
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..exceptions import LabelParseError, ProcessError, ProcessTimeoutError
from ..label import Label, parse_label

logger = logging.getLogger("target-determinator")


@dataclass(frozen=True)
class QueriedTarget:
    """A rule target as reported by ``bazel query --output=streamed_jsonproto``."""
    label: Label
    rule_class: str
    tags: Tuple[str, ...] = ()

    @property
    def is_test(self) -> bool:
        # Query output doesn't say whether a rule is a test, so go by the rule class name
        return self.rule_class.endswith("_test")

    @property
    def is_manual(self) -> bool:
        return "manual" in self.tags

    @classmethod
    def from_json(cls, line: str) -> Optional["QueriedTarget"]:
        """
        Builds a target from one line of streamed_jsonproto output.

        Returns:
            Optional[QueriedTarget]: None for non-rule targets (source files, package groups, ...)

        Raises:
            ProcessError: If the line is not valid JSON or carries an unparsable label
        """
        try:
            data = json.loads(line)
        except json.JSONDecodeError as e:
            raise ProcessError(f"Could not decode bazel query output line {line!r}: {e}")

        if data.get("type") != "RULE":
            return None

        rule = data.get("rule", {})
        try:
            label = parse_label(rule.get("name", ""))
        except LabelParseError as e:
            raise ProcessError(f"Bazel query returned an invalid label: {e.message}")

        tags: Tuple[str, ...] = ()
        for attr in rule.get("attribute", []):
            if attr.get("name") == "tags":
                tags = tuple(attr.get("stringListValue", []))
                break

        return cls(label=label, rule_class=rule.get("ruleClass", ""), tags=tags)


class BazelQuery:
    """
    Runs ``bazel query`` in a workspace and turns its output into targets.
    """

    # Exit code Bazel uses when --keep_going produced partial results
    PARTIAL_SUCCESS_EXIT_CODE = 3

    DEFAULT_TIMEOUTS = {
        'quick_check': 10,      # bazel --version
        'query': 600,           # may include loading every package in the universe
    }

    # A change to any of these may affect every target in the workspace
    WORKSPACE_FILES = {
        'MODULE.bazel',
        'MODULE.bazel.lock',
        'WORKSPACE',
        'WORKSPACE.bazel',
        'WORKSPACE.bzlmod',
        '.bazelrc',
        '.bazelversion',
    }

    BUILD_FILES = {'BUILD', 'BUILD.bazel'}

    # Starlark files reach targets through load(), which rdeps does not follow
    STARLARK_EXTENSION = '.bzl'

    def __init__(self, bazel_path: str = "bazel", workspace_path: str = ".", query_options: str = ""):
        self.bazel_path = bazel_path
        self.workspace_path = workspace_path
        self.query_options = query_options

    def check_installation(self) -> Tuple[bool, str]:
        """
        Check if Bazel is installed and accessible.

        Returns:
            Tuple[bool, str]: (is_available, version_or_error_message)
        """
        try:
            result = subprocess.run(
                [self.bazel_path, '--version'],
                cwd=self.workspace_path,
                capture_output=True,
                text=True,
                timeout=self.DEFAULT_TIMEOUTS['quick_check']
            )
        except subprocess.TimeoutExpired:
            error_msg = "Bazel command timed out"
            logger.error(error_msg)
            return False, error_msg
        except FileNotFoundError:
            error_msg = f"Bazel not found at '{self.bazel_path}'. Install Bazel or pass --bazel."
            logger.error(error_msg)
            return False, error_msg

        if result.returncode != 0:
            error_msg = f"Bazel command failed: {result.stderr.strip()}"
            logger.error(error_msg)
            return False, error_msg

        version = result.stdout.strip()
        logger.debug(f"Bazel found: {version}")
        return True, version

    def query(self, expression: str) -> List[QueriedTarget]:
        """
        Run a query expression and return the rule targets it yields.

        Raises:
            ProcessError: If Bazel fails or cannot be started
            ProcessTimeoutError: If the query does not finish in time
        """
        cmd = [self.bazel_path, 'query', expression, '--output=streamed_jsonproto', '--keep_going']
        if self.query_options:
            cmd.extend(self.query_options.split())

        logger.debug(f"Running Bazel query: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                cwd=self.workspace_path,
                capture_output=True,
                text=True,
                timeout=self.DEFAULT_TIMEOUTS['query']
            )
        except subprocess.TimeoutExpired:
            raise ProcessTimeoutError(f"Bazel query timed out: {expression}")
        except FileNotFoundError:
            raise ProcessError(f"Bazel not found at '{self.bazel_path}'")

        if result.returncode == self.PARTIAL_SUCCESS_EXIT_CODE:
            logger.warning(f"Bazel query completed with errors, results may be partial: {result.stderr.strip()}")
        elif result.returncode != 0:
            raise ProcessError(f"Bazel query failed with exit code {result.returncode}: {result.stderr.strip()}")

        targets = []
        for line in result.stdout.splitlines():
            if not line.strip():
                continue
            target = QueriedTarget.from_json(line)
            if target is not None:
                targets.append(target)

        logger.debug(f"Bazel query returned {len(targets)} rule targets")
        return targets

    def query_affected(self, universe: str, changed_files: Iterable[str]) -> List[QueriedTarget]:
        """
        Find the targets in a universe that depend on any of the changed files.

        Args:
            universe: Target pattern bounding the search, e.g. //...
            changed_files: Workspace-relative paths of changed files

        Returns:
            List[QueriedTarget]: Affected rule targets
        """
        changed_files = sorted(f for f in changed_files if f)
        if not changed_files:
            logger.debug("No changed files, nothing is affected")
            return []

        expression = self.build_affected_expression(universe, changed_files)
        return self.query(expression)

    @classmethod
    def build_affected_expression(cls, universe: str, changed_files: List[str]) -> str:
        """
        Builds the query expression selecting targets affected by the changed files.

        Workspace-level and Starlark (.bzl) files affect the whole universe. A changed BUILD file
        affects every target of its package, other files affect their reverse
        dependencies.
        """
        if any(f in cls.WORKSPACE_FILES for f in changed_files):
            logger.info("Workspace configuration changed, treating every target as affected")
            return universe

        starlark_files = [f for f in changed_files if f.endswith(cls.STARLARK_EXTENSION)]
        if starlark_files:
            logger.info(f"Starlark files changed ({', '.join(starlark_files)}), treating every target as affected")
            return universe

        terms = []
        for f in changed_files:
            directory, filename = posixpath.split(f)
            if filename in cls.BUILD_FILES:
                terms.append(f"//{directory}:all")
            else:
                terms.append(f'"{f}"')

        return f"rdeps({universe}, set({' '.join(terms)}))"
