"""On-disk size analysis of installed dependencies.

``compute_size`` walks one install directory; ``build_size_ledger`` runs it
for each direct dependency and produces the sorted, classified ledger.
Sizes stay in bytes until presentation (see ``to_megabytes``).
"""

import os
from collections.abc import Callable, Iterable
from pathlib import Path

from depinsight.logging import logger, progress_bar
from depinsight.models.reports import (
    BYTES_PER_MEGABYTE,
    SizeLedger,
    SizeRecord,
    classify_size,
    to_megabytes,
)
from depinsight.store import PackageStore

SKIPPED_ENTRIES = frozenset({".", "..", ".git"})

__all__ = [
    "BYTES_PER_MEGABYTE",
    "SKIPPED_ENTRIES",
    "build_size_ledger",
    "classify_size",
    "compute_size",
    "to_megabytes",
]

ErrorCallback = Callable[[Path, OSError], None]


def _log_scan_error(path: Path, error: OSError) -> None:
    logger.warning("Cannot read %s: %s", path, error)


def compute_size(path: Path | str, on_error: ErrorCallback | None = None) -> int:
    """Total bytes of the regular files under ``path``.

    Symbolic links are skipped without being followed, so circular links
    and links into other packages count for nothing. An unreadable
    directory contributes 0 and is reported once through ``on_error``.

    Args:
        path: Directory to scan.
        on_error: Called with (path, error) for each unreadable path.
            Defaults to logging a warning.

    Returns:
        Size in bytes (never negative).
    """
    report = on_error or _log_scan_error
    return _scan(Path(path), report)


def _scan(directory: Path, report: ErrorCallback) -> int:
    total = 0
    try:
        entries = os.scandir(directory)
    except OSError as e:
        report(directory, e)
        return 0

    with entries:
        for entry in entries:
            if entry.name in SKIPPED_ENTRIES:
                continue
            try:
                if entry.is_symlink():
                    continue
                if entry.is_dir(follow_symlinks=False):
                    total += _scan(Path(entry.path), report)
                elif entry.is_file(follow_symlinks=False):
                    total += entry.stat(follow_symlinks=False).st_size
            except OSError as e:
                # Entry vanished or became unreadable mid-scan
                report(Path(entry.path), e)
    return total


def build_size_ledger(
    names: Iterable[str],
    store: PackageStore,
    size_of: Callable[[Path, ErrorCallback], int] = compute_size,
    show_progress: bool = True,
) -> SizeLedger:
    """Measure each direct dependency and build the size ledger.

    Packages that are not installed, or that measure zero bytes, are left
    out of the ledger; missing installs are recorded as warnings.

    Args:
        names: Direct dependency names of the project root (one level).
        store: Resolves names to install directories.
        size_of: Size function, injectable for tests.
        show_progress: Show a progress bar on interactive terminals.

    Returns:
        SizeLedger sorted by size descending (ties keep input order).
    """
    names = list(names)
    warnings: list[str] = []
    seen_errors: set[Path] = set()

    def on_error(path: Path, error: OSError) -> None:
        if path in seen_errors:
            return
        seen_errors.add(path)
        message = f"Error reading {path}: {error.strerror or error}"
        warnings.append(message)
        logger.warning(message)

    records: list[SizeRecord] = []
    for name in progress_bar(names, desc="Sizing", total=len(names), unit="pkg",
                             disable=not show_progress):
        install_path = store.install_path(name)
        if install_path is None:
            message = f"{name} not found in node_modules"
            warnings.append(message)
            logger.warning(message)
            continue

        size = size_of(install_path, on_error)
        if size > 0:
            records.append(SizeRecord(name=name, size_bytes=size))
        else:
            logger.debug("Skipping %s: 0 bytes", name)

    # sort() is stable, so equal sizes keep first-seen order
    records.sort(key=lambda r: r.size_bytes, reverse=True)
    return SizeLedger(records=records, warnings=warnings)
