# target_determinator/cli.py

import argparse
import os
import logging
from argparse import RawTextHelpFormatter

from .exceptions import ValidationError
from .pattern import parse_pattern

logger = logging.getLogger(__name__)


# --- Helper functions for common arguments ---
def add_before_revision(subparser):
    subparser.add_argument(
        "before_revision",
        help="Revision to compare against. Any commit-like string works: full or short commit hashes,\n"
             "tags, branches, etc.",
        metavar="BEFORE_REVISION"
    )


# --- Main Parsing Function ---
def parse_cmdline_args():
    """
    Parse command line arguments.

    Returns:
        argparse.Namespace: Parsed command line arguments, with the parsed
        --targets value attached as ``target_pattern``

    Raises:
        ValidationError: If required arguments are missing or invalid
    """
    parser = argparse.ArgumentParser(
        prog="target-determinator",
        description="Determines which Bazel targets are affected since a git revision, and optionally builds or tests them.",
        formatter_class=RawTextHelpFormatter,
        epilog="""
Environment Variables:
  TARGET_DETERMINATOR_WORKSPACE : Default for --working-directory
  BAZEL_PATH                    : Default for --bazel

Example Usage:
  # Print targets affected since main
  target-determinator affected main

  # Only consider targets under //services
  target-determinator --targets //services/... affected origin/main

  # Build (or test) everything affected since a commit, including tests tagged manual
  target-determinator drive --manual-test-mode run 3a9f1c2

  # Pass options through to bazel query (the = form is required)
  target-determinator --bazel-query-options='--config=ci --noshow_progress' affected main
"""
    )

    # --- Global Arguments (apply to all subcommands) ---
    global_args = parser.add_argument_group("Global Arguments")
    global_args.add_argument(
        "--working-directory",
        help="Bazel workspace to inspect (Default: current directory). Overrides TARGET_DETERMINATOR_WORKSPACE env var.",
        default=os.getenv("TARGET_DETERMINATOR_WORKSPACE", "."),
        metavar="PATH"
    )
    global_args.add_argument(
        "--bazel",
        help="Bazel binary to run (Default: bazel). Overrides BAZEL_PATH env var.",
        default=os.getenv("BAZEL_PATH", "bazel"),
        metavar="PATH"
    )
    global_args.add_argument(
        "--targets",
        help="Target pattern restricting which affected targets are reported (Default: //...).\n"
             "Examples: //..., //foo/..., //foo:all, //foo:bar, @repo//foo/...",
        default="//...",
        metavar="PATTERN"
    )
    global_args.add_argument(
        "--bazel-query-options",
        help="Additional options to pass to bazel query, split on whitespace.\n"
             "Values start with --, so attach them with =: --bazel-query-options='--config=ci --noshow_progress'",
        default="",
        metavar="OPTIONS"
    )
    global_args.add_argument(
        "--log",
        help="Logging level (Default: INFO)",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
    )

    # --- Subparsers ---
    subparsers = parser.add_subparsers(dest='command', help='Available commands', required=True, metavar='COMMAND')

    # --- 'affected' Subcommand ---
    affected_parser = subparsers.add_parser(
        'affected',
        help='Print the targets affected since a revision.',
        description='Prints the canonical label of every affected target matching --targets, one per line.',
        formatter_class=RawTextHelpFormatter
    )
    add_before_revision(affected_parser)

    # --- 'drive' Subcommand ---
    drive_parser = subparsers.add_parser(
        'drive',
        help='Build or test the targets affected since a revision.',
        description='Runs `bazel test` on the affected targets if any of them is a test, `bazel build` otherwise.\n'
                    'Bazel is not run at all when nothing is affected.',
        formatter_class=RawTextHelpFormatter
    )
    add_before_revision(drive_parser)
    drive_parser.add_argument(
        "--manual-test-mode",
        help="How to handle affected targets tagged manual (Default: skip).",
        choices=["run", "skip"],
        default="skip",
    )

    # --- Validate args after parsing ---
    args = parser.parse_args()

    if not os.path.isdir(args.working_directory):
        raise ValidationError(f"Working directory does not exist or is not a directory: {args.working_directory}")

    if not args.before_revision:
        raise ValidationError("A before-revision must be provided")

    # Raises LabelParseError, a ValidationError, on malformed patterns
    args.target_pattern = parse_pattern(args.targets)
    logger.debug(f"Target pattern {args.targets!r} normalized to {args.target_pattern}")

    return args
