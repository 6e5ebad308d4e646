"""Directory ignore rules for source scans.

Configuration:
    - DEFAULT_IGNORES: Directories never scanned (node_modules, .git, build output)
    - .depinsightignore: Per-project additions, one directory name per line
"""

from pathlib import Path

from depinsight.logging import logger

DEFAULT_IGNORES: frozenset[str] = frozenset({
    # Version control
    ".git",
    ".svn",
    ".hg",
    # Dependencies
    "node_modules",
    "bower_components",
    "vendor",
    # Build outputs
    "dist",
    "build",
    "out",
    ".next",
    ".nuxt",
    ".svelte-kit",
    ".turbo",
    ".cache",
    # Test coverage
    "coverage",
    ".nyc_output",
    # IDE
    ".idea",
    ".vscode",
})

IGNORE_FILENAME = ".depinsightignore"


def parse_ignore_file(project_root: Path) -> set[str]:
    """Parse .depinsightignore if it exists.

    Lines starting with # and empty lines are skipped; trailing slashes
    are dropped. Negation (``!pattern``) is not supported.
    """
    ignore_file = project_root / IGNORE_FILENAME
    if not ignore_file.exists():
        return set()

    patterns: set[str] = set()
    try:
        content = ignore_file.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning("Failed to read %s: %s", ignore_file, e)
        return patterns

    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("!"):
            logger.debug("Negation patterns not supported: %s", line)
            continue
        patterns.add(line.rstrip("/"))
    return patterns


def load_ignore_patterns(project_root: Path) -> set[str]:
    """Default ignores plus the project's .depinsightignore entries."""
    patterns = set(DEFAULT_IGNORES)
    custom = parse_ignore_file(project_root)
    if custom:
        patterns.update(custom)
        logger.debug("Loaded %d patterns from %s", len(custom), IGNORE_FILENAME)
    return patterns


def should_ignore(path: Path, project_root: Path, patterns: set[str]) -> bool:
    """True if any component of ``path`` below the project root is ignored.

    Paths outside the project are always ignored.
    """
    try:
        rel_path = path.relative_to(project_root)
    except ValueError:
        return True
    return any(part in patterns for part in rel_path.parts)
