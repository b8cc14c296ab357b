# target_determinator/utilities/build_workflows.py

import logging
import subprocess
import tempfile
from typing import Iterable, Optional, Union

from ..exceptions import FileSystemError, ProcessError
from ..label import Label
from ..pattern import Pattern

logger = logging.getLogger("target-determinator")


def write_target_pattern_file(labels: Iterable[Label]) -> str:
    """
    Writes one canonical target pattern per label to a new temporary file.

    Returns:
        str: Path of the file, suitable for ``--target_pattern_file``

    Raises:
        FileSystemError: If the file cannot be written
    """
    try:
        with tempfile.NamedTemporaryFile("w", prefix="target-patterns-", suffix=".txt",
                                         delete=False, encoding="utf-8") as f:
            for label in labels:
                f.write(str(Pattern.for_label(label)))
                f.write("\n")
            f.flush()
            return f.name
    except OSError as e:
        raise FileSystemError(f"Failed to write target pattern file: {e}")


def run_bazel(bazel_path: str, verb: str, target_pattern_file: str, workspace_path: str) -> None:
    """
    Runs ``bazel <verb> --target_pattern_file <file>`` with output going straight to the terminal.

    Raises:
        ProcessError: If Bazel cannot be started or exits non-zero. ``code`` holds Bazel's exit code.
    """
    cmd = [bazel_path, verb, "--target_pattern_file", target_pattern_file]
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd, cwd=workspace_path)
    except FileNotFoundError:
        raise ProcessError(f"Bazel not found at '{bazel_path}'")

    if result.returncode != 0:
        raise ProcessError(f"bazel {verb} failed with exit code {result.returncode}", code=result.returncode)


def format_duration(duration_seconds: Optional[Union[int, float]]) -> str:
    """Formats a duration in seconds into a 'X minutes, Y seconds' string."""
    if duration_seconds is None: return "N/A"
    try:
        duration_seconds = round(float(duration_seconds))
    except (ValueError, TypeError):
        return "Invalid Duration"

    minutes, seconds = divmod(int(duration_seconds), 60)
    if minutes > 0 and seconds > 0: return f"{minutes} minutes, {seconds} seconds"
    elif minutes > 0: return f"{minutes} minutes"
    elif seconds == 1: return f"1 second"
    else: return f"{seconds} seconds"
