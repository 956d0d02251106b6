"""Click-based CLI interface for VulnSight."""

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from vulnsight.assistant import GREETING, AssistantEngine
from vulnsight.config import Config, load_config
from vulnsight.errors import InvalidTarget, UnknownTool
from vulnsight.models import ScanResult
from vulnsight.orchestrator import ScanOrchestrator, no_duration, random_duration
from vulnsight.report import load_json, render_event, render_json, render_table, render_tools
from vulnsight.tools import build_registry

EXIT_WORDS = {"exit", "quit"}


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _run_scan(config: Config, target: str, tool_ids: tuple[str, ...], fast: bool, show_progress: bool) -> ScanResult:
    orchestrator = ScanOrchestrator(
        tools=build_registry(config.fail_tools),
        duration_fn=no_duration if fast else random_duration(config.min_duration, config.max_duration),
    )
    try:
        run = orchestrator.run(target, list(tool_ids) or config.enabled_tools)
    except (InvalidTarget, UnknownTool) as exc:
        raise click.UsageError(str(exc)) from exc

    console = Console()
    try:
        for event in run:
            if show_progress:
                render_event(event, console)
    except KeyboardInterrupt:
        run.cancel()
        if show_progress:
            render_table(run.result, console)
        raise click.Abort() from None
    return run.result


@click.group()
@click.version_option(package_name="vulnsight")
@click.option("--config", "config_path", type=click.Path(), default=None,
              help="Path to .vulnsight.yml config file.")
@click.option("--verbose", "-v", is_flag=True, help="Log scan activity to stderr.")
@click.pass_context
def cli(ctx, config_path, verbose):
    """VulnSight - Simulated Vulnerability Scanner and Assistant."""
    _setup_logging(verbose)
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = load_config(config_path, project_root=str(Path.cwd()))
    except (FileNotFoundError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command()
def tools():
    """List the available scanning tools."""
    render_tools([t.describe() for t in build_registry().values()])


@cli.command()
@click.argument("target")
@click.option("--tool", "tool_ids", multiple=True, help="Tool to run (repeatable). Default: all enabled tools.")
@click.option("--format", "fmt", type=click.Choice(["table", "json"]), default="table")
@click.option("--output", "-o", type=str, default=None, help="Write JSON report to file.")
@click.option("--fast", is_flag=True, help="Skip simulated scan durations.")
@click.pass_context
def scan(ctx, target, tool_ids, fmt, output, fast):
    """Run a simulated scan against TARGET."""
    result = _run_scan(ctx.obj["config"], target, tool_ids, fast, show_progress=fmt == "table")

    json_out = render_json(result)
    if fmt == "json":
        if output:
            Path(output).write_text(json_out)
            click.echo(f"Report written to {output}")
        else:
            click.echo(json_out)
    else:
        render_table(result)
        if output:
            Path(output).write_text(json_out)
            click.echo(f"JSON report also written to {output}")


@cli.command()
@click.argument("query")
@click.option("--results", "results_path", type=click.Path(exists=True), default=None,
              help="JSON report written by 'scan -o'.")
def ask(query, results_path):
    """Ask the assistant a question about a saved scan."""
    result = None
    if results_path:
        try:
            result = load_json(Path(results_path).read_text())
        except ValueError as exc:
            raise click.ClickException(str(exc)) from exc
    click.echo(AssistantEngine().ask(query, result))


@cli.command()
@click.argument("target")
@click.option("--tool", "tool_ids", multiple=True, help="Tool to run (repeatable).")
@click.option("--fast", is_flag=True, help="Skip simulated scan durations.")
@click.pass_context
def chat(ctx, target, tool_ids, fast):
    """Scan TARGET, then answer questions about the findings."""
    config = ctx.obj["config"]
    result = _run_scan(config, target, tool_ids, fast, show_progress=True)
    render_table(result)

    engine = AssistantEngine(thinking_delay=0.0 if fast else config.thinking_delay)
    click.echo(GREETING)
    while True:
        try:
            query = click.prompt("You", default="", show_default=False)
        except click.Abort:
            break
        if query.strip().lower() in EXIT_WORDS:
            break
        click.echo(engine.respond(query, result))
        click.echo()
