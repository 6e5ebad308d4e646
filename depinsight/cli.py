"""CLI interface for depinsight.

Each command reads the project in ``--project`` (default: current
directory), prints a colored report on stdout, and exits 1 on fatal
errors such as a missing package.json or a failing npm.
"""

import json
import sys
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import NoReturn

import click

from depinsight import DepInsightError, __version__
from depinsight.config import Settings
from depinsight.logging import log_operation, set_verbosity
from depinsight.manifest import MANIFEST_FILENAME, load_manifest
from depinsight.models.reports import PackageHealth, SizeTier
from depinsight.models.tree import PackageNode
from depinsight.npm import NpmRunner
from depinsight.store import NodeModulesStore

RULE = "─" * 50
TIER_COLORS: dict[SizeTier, str] = {"low": "green", "medium": "yellow", "high": "red"}
LABEL_WIDTH = 18
VALUE_WIDTH = 15


@dataclass
class Project:
    """Per-invocation state shared by all commands."""

    root: Path
    settings: Settings
    _runner: NpmRunner | None = field(default=None, repr=False)

    @property
    def runner(self) -> NpmRunner:
        if self._runner is None:
            self._runner = NpmRunner(self.root, executable=self.settings.npm_executable)
        return self._runner

    @property
    def store(self) -> NodeModulesStore:
        return NodeModulesStore(self.root)

    def tree_root(self, require_manifest: bool = False) -> PackageNode:
        """Root node from ``npm ls``, named after package.json when present.

        With ``require_manifest`` a missing package.json raises ManifestError.
        """
        manifest = None
        if require_manifest or (self.root / MANIFEST_FILENAME).is_file():
            manifest = load_manifest(self.root)
        payload = self.runner.list_tree()
        if manifest is None:
            return PackageNode.from_npm_list(payload)
        return PackageNode.from_npm_list(payload, manifest.name, manifest.version)


pass_project = click.make_pass_decorator(Project)


def _fail(message: str, error: Exception) -> NoReturn:
    click.secho(f"{message}: {error}", fg="red", err=True)
    sys.exit(1)


def _heading(text: str) -> None:
    click.secho(f"{text}\n", fg="blue")


@click.group()
@click.version_option(version=__version__, prog_name="depinsight")
@click.option(
    "--project",
    "project_path",
    type=click.Path(exists=True, file_okay=False, resolve_path=True, path_type=Path),
    default=".",
    help="Project directory containing package.json (default: current directory)",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug details to stderr")
@click.pass_context
def cli(ctx: click.Context, project_path: Path, verbose: bool) -> None:
    """depinsight - analyze and manage npm project dependencies."""
    set_verbosity(verbose)
    ctx.obj = Project(root=project_path, settings=Settings.from_env())


@cli.command()
@pass_project
def audit(project: Project) -> None:
    """Audit dependencies for vulnerabilities."""
    from depinsight.analyzers.audit import summarize_audit

    _heading("Auditing dependencies for vulnerabilities...")
    try:
        report = summarize_audit(project.runner.audit())
    except DepInsightError as e:
        _fail("Audit failed", e)

    c = report.counts
    click.secho("Summary:", bold=True)
    click.secho(
        f"Low: {c.low}, Moderate: {c.moderate}, High: {c.high}, Critical: {c.critical}\n",
        fg="green",
    )

    if report.advisories:
        click.secho("Details:", bold=True)
        for adv in report.advisories:
            click.secho("─" * 60, dim=True)
            click.echo(f"{click.style(adv.title, fg='red')} ({click.style(adv.severity, fg='yellow')})")
            click.echo(f"Vulnerable package: {click.style(adv.module_name, fg='cyan')}")
            click.echo(f"Patched in: {click.style(adv.patched_versions, fg='green')}")
            click.echo(f"Path: {adv.path}")
            if adv.url:
                click.echo(f"More info: {click.style(adv.url, fg='blue')}")
            click.echo()

    if report.has_vulnerabilities:
        click.secho("\nRecommended actions:", fg="yellow")
        click.secho("Run 'npm audit fix' to automatically fix fixable vulnerabilities", dim=True)
        click.secho(
            "Run 'npm audit fix --force' to force fixes (may include breaking changes)", dim=True
        )


@cli.command()
@pass_project
def outdated(project: Project) -> None:
    """Check for outdated dependencies."""
    from depinsight.analyzers.outdated import summarize_outdated

    _heading("Checking for outdated dependencies...")
    try:
        entries = summarize_outdated(project.runner.outdated())
    except DepInsightError as e:
        _fail("Outdated check failed", e)

    if not entries:
        click.secho("All dependencies are up to date!", fg="green")
        return

    click.secho("Outdated dependencies: Current → Latest (Suggested)\n", fg="yellow")
    for entry in entries:
        click.echo(
            f"{click.style(entry.name, bold=True)}: {click.style(entry.current, fg='red')} → "
            f"{click.style(entry.latest, fg='green')} ({click.style(entry.wanted, fg='yellow')})"
        )


@cli.command()
@pass_project
def update(project: Project) -> None:
    """Interactively update outdated dependencies."""
    from depinsight.actions import interactive_update
    from depinsight.analyzers.outdated import summarize_outdated

    try:
        entries = summarize_outdated(project.runner.outdated())
    except DepInsightError as e:
        _fail("Outdated check failed", e)
    interactive_update(project.runner, entries)


@cli.command()
@click.option("--no-uninstall", is_flag=True, help="Only report, never offer to uninstall")
@pass_project
def prune(project: Project, no_uninstall: bool) -> None:
    """Check for unused dependencies and offer to uninstall them."""
    from depinsight.actions import prune_unused
    from depinsight.analyzers.unused import find_unused

    _heading("Checking for unused dependencies...")
    try:
        manifest = load_manifest(project.root)
    except DepInsightError as e:
        _fail("Cannot read manifest", e)

    click.secho("Running analysis...", fg="yellow")
    with log_operation("unused", {"project": project.root}):
        report = find_unused(project.root, manifest)

    if report.is_empty:
        click.secho("No unused dependencies found!", fg="green")
        return

    click.secho("Unused dependencies found:\n", fg="red")
    for dep in report.dependencies:
        click.secho(f"- {dep}", fg="red")
    for dep in report.dev_dependencies:
        click.secho(f"- {dep} (dev)", fg="red")

    if not no_uninstall:
        prune_unused(project.runner, report)


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Output lines as JSON")
@click.option("--no-peers", is_flag=True, help="Skip peer dependency lookups")
@pass_project
def tree(project: Project, as_json: bool, no_peers: bool) -> None:
    """Visualize the dependency tree."""
    from depinsight.analyzers.tree import render_tree

    try:
        root = project.tree_root(require_manifest=True)
    except DepInsightError as e:
        _fail("Cannot build dependency tree", e)

    lines = render_tree(root, None if no_peers else project.store)

    if as_json:
        click.echo(json.dumps([line.model_dump() for line in lines], indent=2))
        return

    _heading("Visualizing dependency tree...")
    for line in lines:
        if line.kind == "peer":
            click.echo(
                f"{line.indent}{click.style('└─', fg='yellow')} "
                f"{click.style(f'requires {line.name}@{line.version}', dim=True)}"
            )
        elif line.kind == "circular":
            click.echo(
                f"{line.indent}{click.style(line.name, bold=True)}@"
                f"{click.style(line.version, fg='green')} {click.style('[circular]', fg='red')}"
            )
        else:
            click.echo(
                f"{line.indent}{click.style(line.name, bold=True)}@"
                f"{click.style(line.version, fg='green')}"
            )


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Output suggestions as JSON")
@pass_project
def suggest(project: Project, as_json: bool) -> None:
    """Suggest lightweight alternatives for heavy dependencies."""
    from depinsight.analyzers.alternatives import AlternativeMatcher

    try:
        root = project.tree_root()
    except DepInsightError as e:
        _fail("Cannot list dependencies", e)

    suggestions = AlternativeMatcher().match(root.child_names())

    if as_json:
        # null when nothing matched
        payload = None if suggestions is None else [s.model_dump() for s in suggestions]
        click.echo(json.dumps(payload, indent=2))
        return

    _heading("Suggesting lightweight alternatives...")
    if suggestions is None:
        click.secho("No suggestions at the moment.", fg="green")
        return
    for suggestion in suggestions:
        click.secho(suggestion.message, fg="yellow")


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Output the size ledger as JSON")
@pass_project
def size(project: Project, as_json: bool) -> None:
    """Analyze installed size of direct dependencies."""
    from depinsight.analyzers.size import build_size_ledger

    try:
        root = project.tree_root()
    except DepInsightError as e:
        _fail("Cannot list dependencies", e)

    if not as_json:
        _heading("Analyzing dependency sizes...")

    with log_operation("size", {"project": project.root}):
        ledger = build_size_ledger(root.child_names(), project.store)

    if as_json:
        click.echo(ledger.model_dump_json(indent=2))
        return

    for warning in ledger.warnings:
        click.secho(f"Warning: {warning}", fg="yellow", err=True)

    for record in ledger.records:
        size_text = f"{record.size_mb:6.2f} MB"
        click.echo(
            f"{click.style(record.name.ljust(30), bold=True)} "
            f"{click.style(size_text, fg=TIER_COLORS[record.tier])}"
        )

    click.echo(f"\n{click.style('Total packages:', fg='blue')} {ledger.count}")
    click.echo(
        f"{click.style('Total size:', fg='blue')} "
        f"{click.style(f'{ledger.total_mb:.2f} MB', bold=True)}"
    )


def _format_number(value: int | None) -> str:
    if not value:
        return "N/A".rjust(VALUE_WIDTH)
    return f"{value:,}".rjust(VALUE_WIDTH)


def _tiered(value: int, good: int, fair: int) -> str:
    if value > good:
        return "green"
    if value > fair:
        return "yellow"
    return "red"


def _format_date(iso: str | None) -> str:
    if not iso:
        return "N/A"
    try:
        return datetime.fromisoformat(iso.replace("Z", "+00:00")).strftime("%d/%m/%Y")
    except ValueError:
        return iso


def _echo_health(entry: PackageHealth) -> None:
    click.secho(RULE, dim=True)
    click.echo(
        f"{click.style(entry.name, fg='blue', bold=True)} "
        f"{click.style('@', dim=True)}{click.style(entry.declared_range, fg='cyan')}"
    )

    label = click.style("Monthly downloads:".ljust(LABEL_WIDTH), dim=True)
    if entry.monthly_downloads:
        color = _tiered(entry.monthly_downloads, 1_000_000, 100_000)
        click.echo(f"{label}{click.style(_format_number(entry.monthly_downloads), fg=color)}")
    else:
        click.echo(f"{label}{click.style('N/A', dim=True)}")

    repo = entry.repository
    if repo is None:
        label = click.style("GitHub stats:".ljust(LABEL_WIDTH), dim=True)
        click.echo(f"{label}{click.style('N/A', dim=True)}")
    else:
        stars = repo.stars or 0
        issues = repo.open_issues or 0
        stars_color = "green" if stars > 10_000 else "yellow" if stars > 1_000 else "white"
        issues_color = "green" if issues < 100 else "yellow" if issues < 500 else "red"
        click.echo(
            click.style("GitHub stars:".ljust(LABEL_WIDTH), dim=True)
            + click.style(_format_number(repo.stars), fg=stars_color)
        )
        click.echo(
            click.style("Open issues:".ljust(LABEL_WIDTH), dim=True)
            + click.style(_format_number(repo.open_issues), fg=issues_color)
        )
        click.echo(
            click.style("Last updated:".ljust(LABEL_WIDTH), dim=True)
            + click.style(_format_date(repo.updated_at).rjust(VALUE_WIDTH), fg="cyan")
        )
    click.echo()


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Output metrics as JSON")
@pass_project
def health(project: Project, as_json: bool) -> None:
    """Check popularity and maintenance of declared dependencies."""
    from depinsight.health import HealthClient, check_health

    try:
        manifest = load_manifest(project.root)
    except DepInsightError as e:
        _fail("Cannot read manifest", e)

    note = (
        "Note: GitHub API has a rate limit of 60 requests per hour "
        "for unauthenticated requests.\n"
    )
    if not as_json:
        _heading("Checking dependency health...")
        if not project.settings.github_token:
            click.secho(note, fg="yellow")
        click.secho("Analyzing dependencies health metrics...\n", fg="yellow")

    with HealthClient(project.settings) as client:
        results = check_health(manifest, project.store, client)

    if as_json:
        click.echo(json.dumps([r.model_dump() for r in results], indent=2))
        return

    for entry in results:
        _echo_health(entry)
    click.secho(RULE, dim=True)


@cli.command()
@pass_project
def graph(project: Project) -> None:
    """Summarize the resolved dependency graph as JSON."""
    from depinsight.analyzers.graph import graph_summary, to_digraph

    try:
        root = project.tree_root()
    except DepInsightError as e:
        _fail("Cannot build dependency graph", e)

    G = to_digraph(root)
    click.echo(graph_summary(G, root).model_dump_json(indent=2))


@cli.command("clear-cache")
@pass_project
def clear_cache_command(project: Project) -> None:
    """Clear the npm cache."""
    from depinsight.actions import clear_cache

    try:
        clear_cache(project.runner)
    except DepInsightError as e:
        _fail("Cache clean failed", e)


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
