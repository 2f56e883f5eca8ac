"""Unit tests for the TreeScanner class."""

import os
import sys

import pytest

from tmexclude.exceptions import DirectoryUnreadableError
from tmexclude.pattern_rules import NamePatternRules
from tmexclude.scanner import ErrorAction, TreeScanner, scan

skip_if_root = pytest.mark.skipif(
    sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
    reason="Permission checks are not enforced for root or on Windows",
)


@pytest.fixture
def nested_tree(tmp_path):
    """A tree with matches at several depths, including matches nested inside matches."""
    (tmp_path / "a" / "node_modules" / "pkg" / "node_modules").mkdir(parents=True)
    (tmp_path / "a" / "b" / "c" / "build").mkdir(parents=True)
    (tmp_path / "a" / "b" / "c" / "build" / "dist").mkdir()
    (tmp_path / "d" / "dist").mkdir(parents=True)
    (tmp_path / "d" / "notes.txt").write_text("dist\n")
    (tmp_path / "e").mkdir()
    return tmp_path


@pytest.fixture
def temp_directory_with_symlinks(tmp_path):
    """Create a temporary directory structure with symlinks."""
    (tmp_path / "src" / "utils").mkdir(parents=True)
    (tmp_path / "elsewhere" / "node_modules").mkdir(parents=True)

    try:
        # A link to a directory containing a match
        os.symlink(tmp_path / "elsewhere", tmp_path / "src" / "linked")
        # A link named like a pattern
        os.symlink(tmp_path / "elsewhere", tmp_path / "src" / "dist")
        # A symlink loop
        os.symlink(tmp_path / "src", tmp_path / "src" / "utils" / "loop")
        has_symlinks = True
    except (OSError, NotImplementedError):
        # On some platforms (like Windows) creating symlinks might require special permissions
        has_symlinks = False

    return tmp_path, has_symlinks


def test_scan_readme_scenario(projects_tree):
    result = scan(projects_tree, ["node_modules", "dist"])
    assert sorted(result) == sorted(
        [
            str(projects_tree / "app" / "node_modules"),
            str(projects_tree / "app" / "dist"),
        ]
    )


def test_scan_traverses_non_matching_directories(projects_tree):
    scanner = TreeScanner(projects_tree, NamePatternRules(["node_modules", "dist"]))
    scanner.scan()
    # Projects, app and src are enumerated; node_modules and dist are pruned
    assert scanner.directory_count == 3
    assert scanner.match_count == 2
    assert scanner.errors == []


def test_scan_prunes_at_matches(nested_tree):
    result = scan(nested_tree, ["node_modules", "build", "dist"])
    assert sorted(result) == sorted(
        [
            str(nested_tree / "a" / "node_modules"),
            str(nested_tree / "a" / "b" / "c" / "build"),
            str(nested_tree / "d" / "dist"),
        ]
    )


def test_scan_results_are_not_nested(nested_tree):
    result = scan(nested_tree, ["node_modules", "build", "dist", "pkg", "c"])
    for path in result:
        for other in result:
            assert not other.startswith(path + os.sep), f"{other} is inside excluded {path}"


def test_every_result_matches_a_pattern(nested_tree):
    rules = NamePatternRules(["node_modules", "*uild", "dist"])
    for path in scan(nested_tree, rules):
        assert rules.exclude(os.path.basename(path))


def test_scan_results_are_absolute(projects_tree, monkeypatch):
    monkeypatch.chdir(projects_tree.parent)
    result = scan("Projects", ["dist"])
    assert result == [str(projects_tree / "app" / "dist")]
    assert all(os.path.isabs(path) for path in result)


def test_scan_ignores_files(tmp_path):
    (tmp_path / "dist").write_text("not a directory\n")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "node_modules").write_text("also not a directory\n")
    assert scan(tmp_path, ["dist", "node_modules"]) == []


def test_scan_matches_root_children_but_not_root(tmp_path):
    root = tmp_path / "dist"
    (root / "dist").mkdir(parents=True)
    assert scan(root, ["dist"]) == [str(root / "dist")]


def test_scan_preserves_enumeration_order(tmp_path):
    for name in ["one", "two", "three"]:
        (tmp_path / name / "build").mkdir(parents=True)

    enumerated = [entry.name for entry in os.scandir(tmp_path)]
    expected = [str(tmp_path / name / "build") for name in enumerated]
    assert scan(tmp_path, ["build"]) == expected


def test_scan_is_repeatable(nested_tree):
    scanner = TreeScanner(nested_tree, NamePatternRules(["node_modules", "dist"]))
    first = scanner.scan()
    second = scanner.scan()
    assert first == second
    assert scanner.match_count == len(second)


def test_scan_wildcard_patterns(tmp_path):
    (tmp_path / "x" / "pip.cache").mkdir(parents=True)
    (tmp_path / "x" / "pip.cache.bak").mkdir()
    assert scan(tmp_path, ["*.cache"]) == [str(tmp_path / "x" / "pip.cache")]


def test_scan_non_existent_directory():
    with pytest.raises(FileNotFoundError):
        scan("/non/existent/directory", ["dist"])


def test_scan_file_as_root():
    with pytest.raises(NotADirectoryError):
        scan(__file__, ["dist"])


def test_symlinks_not_followed_by_default(temp_directory_with_symlinks):
    tmp_path, has_symlinks = temp_directory_with_symlinks
    if not has_symlinks:
        pytest.skip("Symlinks not supported on this platform")

    result = scan(tmp_path / "src", ["node_modules", "dist"])
    assert result == []


def test_follow_symlinks(temp_directory_with_symlinks):
    tmp_path, has_symlinks = temp_directory_with_symlinks
    if not has_symlinks:
        pytest.skip("Symlinks not supported on this platform")

    src = tmp_path / "src"
    result = scan(src, ["node_modules", "dist"], follow_symlinks=True)
    assert sorted(result) == sorted([str(src / "linked" / "node_modules"), str(src / "dist")])


def test_follow_symlinks_stops_at_loops(temp_directory_with_symlinks):
    tmp_path, has_symlinks = temp_directory_with_symlinks
    if not has_symlinks:
        pytest.skip("Symlinks not supported on this platform")

    scanner = TreeScanner(tmp_path / "src", NamePatternRules(["nothing-matches"]), follow_symlinks=True)
    assert scanner.scan() == []
    # src, utils, linked and dist (both links to elsewhere) and elsewhere/node_modules twice
    assert scanner.directory_count == 6


@pytest.fixture
def unreadable_tree(tmp_path):
    (tmp_path / "locked" / "node_modules").mkdir(parents=True)
    (tmp_path / "open" / "node_modules").mkdir(parents=True)
    (tmp_path / "locked").chmod(0o000)
    yield tmp_path
    (tmp_path / "locked").chmod(0o755)


@skip_if_root
def test_unreadable_directory_warns_and_continues(unreadable_tree, capsys):
    scanner = TreeScanner(unreadable_tree, NamePatternRules(["node_modules"]))
    assert scanner.scan() == [str(unreadable_tree / "open" / "node_modules")]

    assert len(scanner.errors) == 1
    assert scanner.errors[0].path == str(unreadable_tree / "locked")
    assert "Warning: Error accessing" in capsys.readouterr().err


@skip_if_root
def test_unreadable_directory_ignored_silently(unreadable_tree, capsys):
    scanner = TreeScanner(unreadable_tree, NamePatternRules(["node_modules"]), error_action=ErrorAction.IGNORE)
    assert scanner.scan() == [str(unreadable_tree / "open" / "node_modules")]
    assert len(scanner.errors) == 1
    assert capsys.readouterr().err == ""


@skip_if_root
def test_unreadable_directory_raises(unreadable_tree):
    scanner = TreeScanner(unreadable_tree, NamePatternRules(["node_modules"]), error_action=ErrorAction.RAISE)
    with pytest.raises(DirectoryUnreadableError) as excinfo:
        scanner.scan()
    assert excinfo.value.path == str(unreadable_tree / "locked")
    assert isinstance(excinfo.value.cause, PermissionError)


def test_vanished_directory_is_skipped(projects_tree, capsys):
    """A directory deleted between enumeration of its parent and its own listing is skipped."""
    scanner = TreeScanner(projects_tree, NamePatternRules(["dist"]))
    real_scandir = os.scandir

    def flaky_scandir(path):
        if os.path.basename(path) == "src":
            raise FileNotFoundError(2, "No such file or directory", path)
        return real_scandir(path)

    with pytest.MonkeyPatch.context() as mp:
        mp.setattr(os, "scandir", flaky_scandir)
        result = scanner.scan()

    assert result == [str(projects_tree / "app" / "dist")]
    assert [error.path for error in scanner.errors] == [str(projects_tree / "app" / "src")]
    assert "No such file or directory" in capsys.readouterr().err
