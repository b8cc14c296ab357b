# target_determinator/label.py

import re
from dataclasses import dataclass

from .exceptions import LabelParseError

# Repository names: a lone "@" (explicit main repo) or Bazel's apparent/canonical repo names.
_REPO_RE = re.compile(r'@|[A-Za-z0-9_.-][A-Za-z0-9_.~+-]*')

# Packages and target names may contain any printable 7-bit ASCII character except ':' and '\'.
_PKG_RE = re.compile(r'[\x20-\x39\x3B-\x5B\x5D-\x7E]*')
_NAME_RE = re.compile(r'[\x20-\x39\x3B-\x5B\x5D-\x7E]*')


@dataclass(frozen=True)
class Label:
    """
    Identifies a single build target.

    Attributes:
        repo: Repository name. "" is the main repository, "@" is the explicit
            main repository spelling (``@//pkg:name``).
        package: Slash-separated package path from the repository root. "" is the root package.
        name: Target name within the package.
        relative: True when the label had neither a repository nor a ``//`` root.
    """
    repo: str = ""
    package: str = ""
    name: str = ""
    relative: bool = False

    def __str__(self) -> str:
        if self.relative:
            return f":{self.name}"

        if self.repo and self.repo != "@":
            repo = f"@{self.repo}"
        else:
            repo = self.repo

        if path_base(self.package) == self.name:
            return f"{repo}//{self.package}"
        return f"{repo}//{self.package}:{self.name}"


NO_LABEL = Label()


def path_base(path: str) -> str:
    """Returns the last slash-delimited element of a package path."""
    if path == "":
        return "."
    stripped = path.rstrip("/")
    if stripped == "":
        return "/"
    return stripped[stripped.rfind("/") + 1:]


def has_prefix(package: str, prefix: str) -> bool:
    """
    Checks whether a package lies at or beneath another package.

    Slashes are segment boundaries, so ``food`` is not under ``foo``.
    An empty prefix (the root package) contains every package.
    """
    if prefix == "" or package == prefix:
        return True
    return package.startswith(prefix) and package.startswith("/", len(prefix))


def parse_label(label_str: str) -> Label:
    """
    Decomposes a label string into repository, package and name.

    Accepted forms include ``@repo//pkg:name``, ``@@repo//pkg``, ``@repo``,
    ``//pkg:name``, ``//pkg``, ``:name`` and ``name``. A missing name defaults to
    the last segment of the package.

    Args:
        label_str: The label text to parse.

    Returns:
        Label: The decomposed label.

    Raises:
        LabelParseError: If the string is not a syntactically valid label.
    """
    s = label_str
    relative = True
    repo = ""

    if s.startswith("@@"):
        s = s[1:]
    if s.startswith("@"):
        relative = False
        end_repo = s.find("//")
        if end_repo > 1:
            repo = s[1:end_repo]
            s = s[end_repo:]
        elif end_repo == 1:
            # "@//pkg" stays distinct from "//pkg"
            repo = s[:1]
            s = s[1:]
        else:
            repo = s[1:]
            s = "//:" + repo
        if not _REPO_RE.fullmatch(repo):
            raise LabelParseError(f"label parse error: repository has invalid characters: {label_str!r}")

    package = ""
    if s.startswith("//"):
        relative = False
        end_pkg = s.find(":")
        if end_pkg < 0:
            package = s[2:]
            s = ""
        else:
            package = s[2:end_pkg]
            s = s[end_pkg:]
        if not _PKG_RE.fullmatch(package):
            raise LabelParseError(f"label parse error: package has invalid characters: {label_str!r}")

    if s == ":":
        raise LabelParseError(f"label parse error: empty name: {label_str!r}")
    name = s[1:] if s.startswith(":") else s
    if not _NAME_RE.fullmatch(name):
        raise LabelParseError(f"label parse error: name has invalid characters: {label_str!r}")

    if package == "" and name == "":
        raise LabelParseError(f"label parse error: empty package and name: {label_str!r}")
    if name == "":
        name = path_base(package)

    return Label(repo=repo, package=package, name=name, relative=relative)
