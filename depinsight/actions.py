"""Interactive install, uninstall and cache actions.

Every action asks before changing anything. A failing npm call is reported
and the remaining packages are still processed.
"""

import time
from collections.abc import Sequence

import click

from depinsight.logging import logger
from depinsight.models.reports import OutdatedEntry, UnusedReport
from depinsight.npm import NpmError, NpmRunner


def parse_selection(text: str, count: int) -> list[int]:
    """Parse "1,3-4" / "all" / "" into zero-based indices.

    Raises:
        click.BadParameter: On a malformed or out-of-range entry.
    """
    text = text.strip().lower()
    if not text or text == "none":
        return []
    if text == "all":
        return list(range(count))

    selected: list[int] = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            if "-" in part:
                start_s, end_s = part.split("-", 1)
                start, end = int(start_s), int(end_s)
            else:
                start = end = int(part)
        except ValueError as e:
            raise click.BadParameter(f"'{part}' is not a number or range") from e
        if start < 1 or end > count or start > end:
            raise click.BadParameter(f"'{part}' is outside 1-{count}")
        for i in range(start - 1, end):
            if i not in selected:
                selected.append(i)
    return selected


def select_items(labels: Sequence[str], message: str) -> list[int]:
    """Show a numbered list and prompt until a valid selection is entered."""
    for i, label in enumerate(labels, start=1):
        click.echo(f"  {i:>3}. {label}")
    while True:
        answer = click.prompt(
            f"{message} (e.g. 1,3-4, 'all', or empty for none)",
            default="",
            show_default=False,
        )
        try:
            return parse_selection(answer, len(labels))
        except click.BadParameter as e:
            click.secho(str(e.message), fg="red", err=True)


def _run_each(
    runner: NpmRunner,
    items: Sequence[tuple[str, str | None]],
    verb: str,
    uninstall: bool,
) -> int:
    start = time.perf_counter()
    succeeded = 0
    for name, version in items:
        spec = f"{name}@{version}" if version else name
        click.secho(f"{verb} {spec}... ", fg="yellow", nl=False)
        try:
            if uninstall:
                runner.uninstall(name)
            else:
                runner.install(name, version)
        except NpmError as e:
            click.secho("✗", fg="red")
            click.secho(f"Error {verb.lower()} {name}: {e}", fg="red")
            logger.debug("npm stderr: %s", e.stderr)
            continue
        click.secho("✓", fg="green")
        succeeded += 1

    duration = time.perf_counter() - start
    done_word = "uninstalled" if uninstall else "updated"
    click.secho(
        f"\n✨ Successfully {done_word} {succeeded} package(s) in {duration:.1f}s",
        fg="green",
    )
    return succeeded


def interactive_update(runner: NpmRunner, outdated: Sequence[OutdatedEntry]) -> int:
    """Let the user pick outdated packages and install their latest versions.

    Returns:
        Number of packages installed successfully.
    """
    if not outdated:
        click.secho("All dependencies are up to date!", fg="green")
        return 0

    labels = [f"{e.name}: {e.current} → {e.latest}" for e in outdated]
    selected = select_items(labels, "Select dependencies to update")
    if not selected:
        click.secho("No packages selected for update.", fg="yellow")
        return 0

    click.secho("\nUpdating dependencies...\n", fg="blue")
    items = [(outdated[i].name, outdated[i].latest) for i in selected]
    return _run_each(runner, items, "Installing", uninstall=False)


def prune_unused(runner: NpmRunner, report: UnusedReport) -> int:
    """Offer to uninstall the packages found by :func:`find_unused`.

    Returns:
        Number of packages uninstalled successfully.
    """
    if report.is_empty:
        return 0
    if not click.confirm("Would you like to uninstall unused dependencies?", default=False):
        return 0

    names = [*report.dependencies, *report.dev_dependencies]
    labels = [*report.dependencies, *(f"{d} (dev)" for d in report.dev_dependencies)]
    selected = select_items(labels, "Select dependencies to uninstall")
    if not selected:
        click.secho("\nNo packages selected for uninstallation.", fg="yellow")
        return 0

    click.secho("\nUninstalling dependencies...\n", fg="blue")
    return _run_each(runner, [(names[i], None) for i in selected], "Uninstalling", uninstall=True)


def clear_cache(runner: NpmRunner) -> bool:
    """Confirm, then wipe the npm cache. Returns True if it was cleared."""
    click.secho("Warning: This will clear your npm cache completely.\n", fg="yellow")
    if not click.confirm("Are you sure you want to clear the npm cache?", default=False):
        click.secho("\nOperation aborted", fg="yellow")
        return False

    click.secho("\nClearing npm cache...", fg="blue")
    runner.cache_clean()
    click.secho("✨ Successfully cleared npm cache", fg="green")
    return True
