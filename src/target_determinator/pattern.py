# target_determinator/pattern.py

import logging
from dataclasses import dataclass

from .label import Label, has_prefix, parse_label, path_base

logger = logging.getLogger("target-determinator")

_RECURSIVE_SUFFIX = "..."


@dataclass(frozen=True)
class Pattern:
    """
    A Bazel target pattern such as ``//foo/...``, ``//foo:all`` or ``@repo//pkg:name``.

    Attributes:
        repo: Repository the pattern is scoped to. "" is the main repository.
        package: Package the pattern is anchored on. "" is the root package.
        recursive: The pattern ended in ``...``: the package and every package beneath it.
        is_explicit_all: The pattern used ``:all``, ``:*`` or ``:all-targets``.
            Takes precedence over ``specific_name`` when matching.
        specific_name: Exact target name. "" means the package's default target.

    Any combination of fields may be constructed directly; matching and
    formatting never reject a combination. ``Pattern()`` is the "no pattern"
    sentinel and is never produced by parsing.
    """
    repo: str = ""
    package: str = ""
    recursive: bool = False
    is_explicit_all: bool = False
    specific_name: str = ""

    @classmethod
    def parse(cls, pattern_str: str) -> "Pattern":
        """Alias for :func:`parse_pattern`."""
        return parse_pattern(pattern_str)

    @classmethod
    def for_label(cls, label: Label) -> "Pattern":
        """Builds the pattern selecting exactly ``label``."""
        return cls(repo=label.repo, package=label.package, specific_name=label.name)

    def matches(self, label: Label) -> bool:
        """
        Checks whether a label is selected by this pattern.

        Matching is purely lexical over repo, package and name. When the pattern
        is recursive, every label in the anchor package matches, even if a
        specific name was also given.
        """
        if self.repo != label.repo:
            return False
        if self.package == label.package:
            return self.is_explicit_all or self.specific_name == label.name or self.recursive
        return self.recursive and has_prefix(label.package, self.package)

    def __str__(self) -> str:
        if self.repo and self.repo != "@":
            repo = f"@{self.repo}"
        else:
            repo = self.repo

        if self.recursive:
            package = f"{self.package}/{_RECURSIVE_SUFFIX}" if self.package else _RECURSIVE_SUFFIX
        else:
            package = self.package

        if self.is_explicit_all:
            name = ":all"
        elif self.specific_name and self.specific_name != path_base(self.package):
            name = f":{self.specific_name}"
        else:
            name = ""

        return f"{repo}//{package}{name}"


NO_PATTERN = Pattern()


def parse_pattern(pattern_str: str) -> Pattern:
    """
    Parses a target pattern.

    Bare patterns (``foo/...``, ``foo:bar``, ``:bar``) are rooted at the
    repository root rather than at a working directory. ``:*`` and
    ``:all-targets`` are treated as ``:all``.

    Args:
        pattern_str: The pattern as typed by the user.

    Returns:
        Pattern: The parsed pattern.

    Raises:
        LabelParseError: If the pattern is not a valid label after normalization.
    """
    s = pattern_str
    if not s.startswith("//") and not s.startswith("@"):
        s = "//" + s
    if s.endswith(":*"):
        s = s[:-1] + "all"
    if s.endswith(":all-targets"):
        s = s[:-len("-targets")]

    label = parse_label(s)

    package = label.package
    name = label.name
    recursive = False
    if package.endswith(_RECURSIVE_SUFFIX):
        recursive = True
        if name == _RECURSIVE_SUFFIX:
            name = ""
        if package == _RECURSIVE_SUFFIX:
            package = ""
        else:
            package = package[:-len("/" + _RECURSIVE_SUFFIX)]

    if name == "all":
        pattern = Pattern(repo=label.repo, package=package, recursive=recursive, is_explicit_all=True)
    else:
        pattern = Pattern(repo=label.repo, package=package, recursive=recursive, specific_name=name)

    logger.debug(f"Parsed target pattern {pattern_str!r} as {pattern!r}")
    return pattern
