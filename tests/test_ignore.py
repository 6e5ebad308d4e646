"""Tests for the source-scan ignore rules."""

from pathlib import Path

from depinsight.analyzers.ignore import (
    DEFAULT_IGNORES,
    IGNORE_FILENAME,
    load_ignore_patterns,
    parse_ignore_file,
    should_ignore,
)


class TestDefaultIgnores:
    """Tests for DEFAULT_IGNORES constant."""

    def test_includes_node_modules(self):
        """node_modules is never scanned for imports."""
        assert "node_modules" in DEFAULT_IGNORES

    def test_includes_build_dirs(self):
        """Build output would report bundled imports."""
        assert "dist" in DEFAULT_IGNORES
        assert "build" in DEFAULT_IGNORES

    def test_is_frozenset(self):
        assert isinstance(DEFAULT_IGNORES, frozenset)


class TestParseIgnoreFile:
    """Tests for parse_ignore_file."""

    def test_missing_file(self, tmp_path: Path):
        assert parse_ignore_file(tmp_path) == set()

    def test_parses_patterns(self, tmp_path: Path):
        """Comments, blanks and negations are skipped; trailing slashes dropped."""
        (tmp_path / IGNORE_FILENAME).write_text(
            "# generated code\n\nfixtures/\nlegacy\n!keep\n  spaced/  \n"
        )

        assert parse_ignore_file(tmp_path) == {"fixtures", "legacy", "spaced"}


class TestLoadIgnorePatterns:
    """Tests for load_ignore_patterns."""

    def test_defaults_only(self, tmp_path: Path):
        assert load_ignore_patterns(tmp_path) == set(DEFAULT_IGNORES)

    def test_merges_custom(self, tmp_path: Path):
        (tmp_path / IGNORE_FILENAME).write_text("examples\n")

        patterns = load_ignore_patterns(tmp_path)

        assert "examples" in patterns
        assert "node_modules" in patterns

    def test_does_not_mutate_defaults(self, tmp_path: Path):
        (tmp_path / IGNORE_FILENAME).write_text("examples\n")

        load_ignore_patterns(tmp_path)

        assert "examples" not in DEFAULT_IGNORES


class TestShouldIgnore:
    """Tests for should_ignore."""

    def test_matches_any_component(self, tmp_path: Path):
        patterns = {"node_modules"}

        assert should_ignore(tmp_path / "node_modules", tmp_path, patterns)
        assert should_ignore(tmp_path / "packages" / "a" / "node_modules" / "x.js", tmp_path, patterns)

    def test_keeps_source(self, tmp_path: Path):
        assert not should_ignore(tmp_path / "src" / "index.js", tmp_path, {"node_modules"})

    def test_partial_names_do_not_match(self, tmp_path: Path):
        assert not should_ignore(tmp_path / "distribution" / "a.js", tmp_path, {"dist"})

    def test_outside_project_is_ignored(self, tmp_path: Path):
        assert should_ignore(Path("/elsewhere/file.js"), tmp_path, set())
