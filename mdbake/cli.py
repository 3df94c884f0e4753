"""CLI entry point for mdbake."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from mdbake.config import MdBakeConfig, load_config
from mdbake.config.loader import DEFAULT_CONFIG_TEMPLATE
from mdbake.errors import ClusterProcessingError, PluginNotFoundError
from mdbake.freshness import ClusterWatcher, check_cluster
from mdbake.logging_setup import configure_logging
from mdbake.plugins import MarkdownRenderingPlugin, PluginLoader
from mdbake.processor.models import ProcessReport

app = typer.Typer(
    name="mdbake",
    help="Render Markdown trees into self-contained HTML, only where sources changed.",
)

config_app = typer.Typer(help="Manage mdbake configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: MdBakeConfig | None = None


def _get_config() -> MdBakeConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to mdbake.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Config error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    configure_logging(_config.log_level, _config.log_format)


def _resolve_root(path: str) -> Path:
    root = Path(path)
    if not root.is_dir():
        rprint(f"[red]Not a directory:[/red] {root}")
        raise typer.Exit(1)
    return root


def _display_report(report: ProcessReport) -> None:
    table = Table(title=f"Cluster {report.root}")
    table.add_column("Document", style="cyan")
    table.add_column("Status", justify="center")

    for artifact in sorted(report.rendered):
        table.add_row(artifact, "[green]rendered[/green]")
    for source in report.skipped:
        table.add_row(source, "[dim]current[/dim]")
    for source, error in report.failed:
        table.add_row(source, f"[red]failed[/red] {escape(error)}")
    rprint(table)


@app.command()
def render(
    path: Annotated[str, typer.Argument(help="Cluster root directory")] = ".",
    lenient: Annotated[
        bool, typer.Option("--lenient", help="Record failing documents and keep going")
    ] = False,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="No summary table")] = False,
) -> None:
    """Render every stale Markdown document under PATH."""
    root = _resolve_root(path)
    cfg = _get_config()
    if lenient:
        cfg = cfg.model_copy(update={"processing": cfg.processing.model_copy(update={"strict": False})})

    plugin = MarkdownRenderingPlugin(cfg)
    try:
        report = plugin.process_cluster(root)
    except ClusterProcessingError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if not quiet:
        _display_report(report)
    rprint(
        f"[green]Done.[/green] {len(report.rendered)} rendered, "
        f"{len(report.skipped)} current, {len(report.failed)} failed."
    )
    if report.failed:
        raise typer.Exit(1)


@app.command()
def check(
    path: Annotated[str, typer.Argument(help="Cluster root directory")] = ".",
    ci: Annotated[bool, typer.Option("--ci", help="Machine-readable output")] = False,
    fail_on_stale: Annotated[
        bool, typer.Option("--fail-on-stale", help="Exit 1 if stale documents found")
    ] = False,
) -> None:
    """Report which documents would be re-rendered, without writing anything."""
    root = _resolve_root(path)
    report = check_cluster(root, _get_config())

    if ci:
        for entry in report.stale:
            typer.echo(f"STALE {entry.source_path}")
        if not report.stale:
            typer.echo("OK: all artifacts up to date")
    else:
        table = Table(title="Staleness Check")
        table.add_column("Document", style="cyan")
        table.add_column("Status", justify="center")
        table.add_column("Reason", style="dim")
        for entry in report.stale:
            table.add_row(entry.source_path, "[red]stale[/red]", entry.reason)
        for source in report.current:
            table.add_row(source, "[green]ok[/green]", "-")
        rprint(table)

        if report.stale:
            rprint(f"\n[red]{len(report.stale)} stale document(s) found.[/red]")
        else:
            rprint("\n[green]All artifacts up to date.[/green]")

    if fail_on_stale and report.stale:
        raise typer.Exit(code=1)


@app.command()
def watch(
    path: Annotated[str, typer.Argument(help="Cluster root directory")] = ".",
) -> None:
    """Render once, then re-render whenever Markdown or image files change."""
    root = _resolve_root(path)
    cfg = _get_config()
    plugin = MarkdownRenderingPlugin(cfg)

    def _rerun(changed: set[str]) -> None:
        try:
            report = plugin.process_cluster(root)
        except ClusterProcessingError as e:
            rprint(f"[red]Error:[/red] {escape(str(e))}")
            return
        rprint(f"[green]Rebuilt.[/green] {len(report.rendered)} rendered.")

    _rerun(set())
    watcher = ClusterWatcher(
        root,
        on_change=_rerun,
        debounce_seconds=cfg.watch.debounce_seconds,
        markdown_extensions=cfg.render.markdown_extensions,
    )
    rprint(f"[bold]Watching[/bold] {root} (Ctrl+C to stop)")
    watcher.run_forever()


@app.command()
def info(
    name: Annotated[str | None, typer.Option("--plugin", "-p", help="Plugin name")] = None,
) -> None:
    """Show plugin name and version."""
    try:
        plugin = PluginLoader().load(name)
    except PluginNotFoundError as e:
        rprint(f"[red]{e}[/red]")
        raise typer.Exit(1)
    identity = plugin.identify()
    typer.echo(f"{identity.name} {identity.version}")


@app.command()
def plugins() -> None:
    """List discovered cluster plugins."""
    names = PluginLoader().discover()
    table = Table(title=f"Cluster plugins ({len(names)})")
    table.add_column("Name", style="cyan")
    for name in names:
        table.add_row(name)
    rprint(table)


@config_app.command("show")
def config_show() -> None:
    """Print the effective configuration as YAML."""
    cfg = _get_config()
    text = yaml.safe_dump(cfg.model_dump(mode="json"), default_flow_style=False, sort_keys=False)
    rprint(Syntax(text, "yaml"))


@config_app.command("init")
def config_init(
    force: Annotated[bool, typer.Option("--force", help="Overwrite existing file")] = False,
) -> None:
    """Write a default mdbake.yaml in the current directory."""
    dest = Path("mdbake.yaml")
    if dest.exists() and not force:
        rprint("[yellow]mdbake.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    dest.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {dest}")
