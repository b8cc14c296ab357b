import pytest

from target_determinator.label import Label, NO_LABEL, parse_label, path_base, has_prefix
from target_determinator.exceptions import LabelParseError, ValidationError


# --- Tests for parse_label ---

@pytest.mark.parametrize("label_str,expected", [
    ("//foo/bar:baz", Label(repo="", package="foo/bar", name="baz")),
    ("//foo/bar", Label(repo="", package="foo/bar", name="bar")),
    ("//:foo", Label(repo="", package="", name="foo")),
    ("@repo//foo:bar", Label(repo="repo", package="foo", name="bar")),
    ("@@rules_go~0.41.0//go", Label(repo="rules_go~0.41.0", package="go", name="go")),
    ("@//foo:bar", Label(repo="@", package="foo", name="bar")),
    ("@repo", Label(repo="repo", package="", name="repo")),
    ("//foo/...", Label(repo="", package="foo/...", name="...")),
    ("//...", Label(repo="", package="...", name="...")),
])
def test_parse_absolute_labels(label_str, expected):
    assert parse_label(label_str) == expected


def test_parse_relative_labels():
    """
    Labels without a repo or // root are relative to the current package.
    """
    assert parse_label(":foo") == Label(package="", name="foo", relative=True)
    assert parse_label("foo") == Label(package="", name="foo", relative=True)


@pytest.mark.parametrize("label_str,message", [
    ("//foo:", "empty name"),
    ("//", "empty package and name"),
    ("", "empty package and name"),
    ("@", "repository has invalid characters"),
    ("@bad repo//foo", "repository has invalid characters"),
    ("//foo\\bar", "package has invalid characters"),
    ("//foo:a:b", "name has invalid characters"),
    ("//foo:bar\n", "name has invalid characters"),
])
def test_parse_invalid_labels(label_str, message):
    with pytest.raises(LabelParseError, match=message):
        parse_label(label_str)


def test_parse_error_is_validation_error():
    with pytest.raises(ValidationError):
        parse_label("//foo:")


def test_parse_error_quotes_input():
    with pytest.raises(LabelParseError) as exc_info:
        parse_label("@bad repo//foo")
    assert "'@bad repo//foo'" in exc_info.value.message


# --- Tests for Label.__str__ ---

@pytest.mark.parametrize("label,expected", [
    (Label(package="foo/bar", name="bar"), "//foo/bar"),
    (Label(package="foo/bar", name="baz"), "//foo/bar:baz"),
    (Label(repo="repo", package="foo", name="baz"), "@repo//foo:baz"),
    (Label(repo="@", package="foo", name="x"), "@//foo:x"),
    (Label(package="", name="foo"), "//:foo"),
    (Label(name="foo", relative=True), ":foo"),
])
def test_label_str(label, expected):
    assert str(label) == expected


def test_no_label_is_zero_value():
    assert NO_LABEL == Label("", "", "")
    assert not NO_LABEL.relative


# --- Tests for path helpers ---

@pytest.mark.parametrize("path,expected", [
    ("", "."),
    ("foo", "foo"),
    ("foo/bar", "bar"),
    ("foo/bar/", "bar"),
    ("/", "/"),
])
def test_path_base(path, expected):
    assert path_base(path) == expected


@pytest.mark.parametrize("package,prefix,expected", [
    ("foo/bar", "foo", True),
    ("foo/bar/baz", "foo", True),
    ("foo", "foo", True),
    ("anything/at/all", "", True),
    ("", "", True),
    ("food", "foo", False),
    ("foo", "foo/bar", False),
    ("bar/foo", "foo", False),
])
def test_has_prefix(package, prefix, expected):
    """
    Containment is segment-aware: food is not under foo.
    """
    assert has_prefix(package, prefix) is expected
