"""Detect declared dependencies that the project never references.

A package counts as used when any JS/TS source file imports or requires
it (subpaths such as ``lodash/fp`` count for ``lodash``), or when one of
the manifest's ``scripts`` mentions it. ``@types/x`` is used whenever
``x`` is.
"""

import os
import re
from pathlib import Path

from depinsight.analyzers.ignore import load_ignore_patterns, should_ignore
from depinsight.logging import logger
from depinsight.manifest import Manifest
from depinsight.models.reports import UnusedReport

SOURCE_EXTENSIONS = frozenset({
    ".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx", ".mts", ".cts", ".vue", ".svelte",
})

IMPORT_PATTERNS = [
    # ES modules: import { x } from 'module'
    re.compile(r"""import\s+(?:type\s+)?(?:\{[^}]*\}|\*\s+as\s+\w+|\w+)?\s*(?:,\s*(?:\{[^}]*\}|\*\s+as\s+\w+|\w+))?\s*from\s*['"]([^'"]+)['"]""", re.MULTILINE),
    # Re-exports: export { x } from 'module'
    re.compile(r"""export\s+(?:\*(?:\s+as\s+\w+)?|\{[^}]*\})\s*from\s*['"]([^'"]+)['"]""", re.MULTILINE),
    # Side-effect imports: import 'module'
    re.compile(r"""import\s+['"]([^'"]+)['"]""", re.MULTILINE),
    # CommonJS require: require('module'), require.resolve('module')
    re.compile(r"""require(?:\.resolve)?\s*\(\s*['"]([^'"]+)['"]\s*\)""", re.MULTILINE),
    # Dynamic imports: import('module')
    re.compile(r"""import\s*\(\s*['"]([^'"]+)['"]\s*\)""", re.MULTILINE),
]


def extract_specifiers(source: str) -> set[str]:
    """All module specifiers imported or required by a source file."""
    specifiers: set[str] = set()
    for pattern in IMPORT_PATTERNS:
        specifiers.update(pattern.findall(source))
    return specifiers


def package_name(specifier: str) -> str | None:
    """Package a specifier resolves to, or None for relative/builtin ones.

    >>> package_name("lodash/fp")
    'lodash'
    >>> package_name("@babel/core/lib/index.js")
    '@babel/core'
    """
    if not specifier or specifier.startswith((".", "/", "node:", "#")):
        return None
    parts = specifier.split("/")
    if specifier.startswith("@"):
        return "/".join(parts[:2]) if len(parts) >= 2 else None
    return parts[0]


def _iter_source_files(project_root: Path, patterns: set[str]):
    for dirpath, dirnames, filenames in os.walk(project_root):
        current = Path(dirpath)
        # Prune in place so os.walk never descends into ignored trees
        dirnames[:] = [
            d for d in dirnames
            if not should_ignore(current / d, project_root, patterns)
        ]
        for filename in filenames:
            path = current / filename
            if path.suffix in SOURCE_EXTENSIONS:
                yield path


def collect_used_packages(project_root: Path) -> tuple[set[str], int]:
    """Package names referenced from project sources.

    Returns:
        (package names, number of files scanned)
    """
    patterns = load_ignore_patterns(project_root)
    used: set[str] = set()
    scanned = 0
    for path in _iter_source_files(project_root, patterns):
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping %s: %s", path, e)
            continue
        scanned += 1
        for specifier in extract_specifiers(source):
            name = package_name(specifier)
            if name:
                used.add(name)
    return used, scanned


def _mentioned_in_scripts(name: str, scripts: dict[str, str]) -> bool:
    pattern = re.compile(rf"(?<![\w@/.-]){re.escape(name)}(?![\w/-])")
    return any(pattern.search(command) for command in scripts.values())


def _is_used(name: str, used: set[str], scripts: dict[str, str]) -> bool:
    if name in used or _mentioned_in_scripts(name, scripts):
        return True
    if name.startswith("@types/"):
        typed = name.removeprefix("@types/")
        # @types/babel__core describes @babel/core
        if "__" in typed:
            typed = "@" + typed.replace("__", "/", 1)
        return typed in used
    return False


def find_unused(project_root: Path | str, manifest: Manifest) -> UnusedReport:
    """Declared dependencies with no reference in sources or scripts.

    Args:
        project_root: Project directory containing package.json.
        manifest: The project's parsed manifest.

    Returns:
        UnusedReport listing unused dependencies and devDependencies in
        manifest order.
    """
    root = Path(project_root).resolve()
    used, scanned = collect_used_packages(root)
    logger.debug("Scanned %d source files, %d packages referenced", scanned, len(used))

    return UnusedReport(
        dependencies=[
            name for name in manifest.dependencies
            if not _is_used(name, used, manifest.scripts)
        ],
        dev_dependencies=[
            name for name in manifest.dev_dependencies
            if not _is_used(name, used, manifest.scripts)
        ],
        files_scanned=scanned,
    )
