# target_determinator/utilities/git_utils.py

import os
import logging
from dataclasses import dataclass
from typing import Set

from ..exceptions import ValidationError, ProcessError

try:
    from git import Repo, InvalidGitRepositoryError, NoSuchPathError, GitCommandError, BadName
except ImportError:
    raise ImportError(
        "GitPython is required but not installed. Please install it with: pip install GitPython"
    )

logger = logging.getLogger("target-determinator")


@dataclass(frozen=True)
class LabelledGitRev:
    """A resolved git revision, remembering how the user spelled it."""
    label: str
    sha: str

    def __str__(self) -> str:
        short_sha = self.sha[:GitUtils.SHORT_COMMIT_LENGTH]
        if self.label == self.sha or self.label == short_sha:
            return short_sha
        return f"{self.label} ({short_sha})"


class GitUtils:
    """
    Git operations used to find what changed since a before-revision.
    """

    SHORT_COMMIT_LENGTH = 7

    @staticmethod
    def is_git_repository(directory_path: str) -> bool:
        """
        Check if a directory is inside a Git repository.

        Args:
            directory_path: Path to check

        Returns:
            bool: True if directory belongs to a Git repository
        """
        if not os.path.isdir(directory_path):
            return False

        try:
            Repo(directory_path, search_parent_directories=True)
            return True
        except (InvalidGitRepositoryError, NoSuchPathError):
            return False

    @staticmethod
    def get_repo(workspace_path: str) -> Repo:
        """
        Get a GitPython Repo object for the workspace.

        Raises:
            ValidationError: If directory is not a Git repository
        """
        if not GitUtils.is_git_repository(workspace_path):
            raise ValidationError(f"Directory is not a Git repository: {workspace_path}")

        try:
            return Repo(workspace_path, search_parent_directories=True)
        except InvalidGitRepositoryError as e:
            raise ValidationError(f"Invalid Git repository: {e}")

    @staticmethod
    def commit_exists(workspace_path: str, revision: str) -> bool:
        """Check whether a commit-like string resolves to a commit."""
        try:
            repo = GitUtils.get_repo(workspace_path)
            repo.commit(revision)
            return True
        except (ValidationError, BadName, GitCommandError, ValueError):
            return False

    @staticmethod
    def resolve_revision(workspace_path: str, revision: str) -> LabelledGitRev:
        """
        Resolve a commit-like string to a full commit hash.

        Args:
            workspace_path: Path inside the Git repository
            revision: Full or short hash, tag, branch or any other commit-ish

        Returns:
            LabelledGitRev: The revision as typed, paired with its full sha

        Raises:
            ValidationError: If the revision does not exist
        """
        repo = GitUtils.get_repo(workspace_path)
        try:
            sha = repo.commit(revision).hexsha
        except (BadName, GitCommandError, ValueError) as e:
            raise ValidationError(f"Could not resolve git revision '{revision}': {e}")

        logger.debug(f"Resolved revision {revision} to {sha}")
        return LabelledGitRev(label=revision, sha=sha)

    @staticmethod
    def get_changed_files_since_commit(
        workspace_path: str,
        baseline_commit: str,
        include_untracked: bool = True
    ) -> Set[str]:
        """
        Get files changed between the baseline commit and the working tree.

        Args:
            workspace_path: Path to the Git repository
            baseline_commit: Commit-like string to compare against
            include_untracked: Whether to include untracked files

        Returns:
            Set[str]: Paths relative to workspace_path; changes outside it are dropped

        Raises:
            ValidationError: If not a Git repository or invalid commit
            ProcessError: If the Git operation fails
        """
        try:
            repo = GitUtils.get_repo(workspace_path)

            if not GitUtils.commit_exists(workspace_path, baseline_commit):
                raise ValidationError(f"Baseline commit does not exist: {baseline_commit}")

            baseline_commit_obj = repo.commit(baseline_commit)

            changed_files = set()

            # None compares against the working tree
            for diff_item in baseline_commit_obj.diff(None):
                if diff_item.a_path:
                    changed_files.add(diff_item.a_path)
                if diff_item.b_path and diff_item.b_path != diff_item.a_path:
                    changed_files.add(diff_item.b_path)

            if include_untracked:
                changed_files.update(repo.untracked_files)

            changed_files = GitUtils._relative_to_workspace(changed_files, repo.working_tree_dir, workspace_path)

            logger.info(f"Found {len(changed_files)} changed files since {baseline_commit}")
            if changed_files:
                logger.debug(f"Changed files: {sorted(changed_files)[:10]}{'...' if len(changed_files) > 10 else ''}")

            return changed_files

        except ValidationError:
            raise
        except (GitCommandError, BadName) as e:
            raise ProcessError(f"Git operation failed: {e}")

    @staticmethod
    def _relative_to_workspace(files: Set[str], repo_root: str, workspace_path: str) -> Set[str]:
        """Re-roots repository-relative paths at a workspace nested inside the repository."""
        prefix = os.path.relpath(os.path.realpath(workspace_path), os.path.realpath(repo_root))
        if prefix == ".":
            return set(files)

        prefix = prefix.replace(os.sep, "/") + "/"
        return {f[len(prefix):] for f in files if f.startswith(prefix)}
