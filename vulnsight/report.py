"""Report generation - rich terminal tables and JSON output."""

import json
from datetime import datetime

from rich.console import Console
from rich.table import Table

from vulnsight.models import ProgressEvent, ScanResult, ScanStatus, Severity, Tool, ToolStatus

SEVERITY_COLORS = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "cyan",
}

STATUS_COLORS = {
    ToolStatus.IDLE: "dim",
    ToolStatus.RUNNING: "yellow",
    ToolStatus.COMPLETE: "green",
    ToolStatus.ERROR: "red",
}


def render_tools(tools: list[Tool], console: Console | None = None) -> None:
    console = console or Console()
    table = Table(title="Available Tools")
    table.add_column("ID", width=10)
    table.add_column("Name", width=10)
    table.add_column("Description", width=40)
    for t in tools:
        table.add_row(t.id, t.display_name, t.description)
    console.print(table)


def render_event(event: ProgressEvent, console: Console | None = None) -> None:
    console = console or Console()
    color = STATUS_COLORS[event.status]
    line = f"{event.progress:6.2f}%  {event.tool_id:<10} [{color}]{event.status.value}[/]"
    if event.error:
        line += f" ({event.error})"
    console.print(line)


def render_table(result: ScanResult, console: Console | None = None) -> None:
    console = console or Console()
    findings = sorted(result.findings, key=lambda f: f.severity.rank, reverse=True)

    if result.status is ScanStatus.FAILED:
        console.print(f"\n[bold red]Scan {result.id} did not complete; results are partial.[/]")

    if not findings:
        console.print("\n[bold green]No vulnerabilities found.[/]")
        _print_summary(console, result)
        return

    table = Table(title=f"Findings for {result.target}", show_lines=True)
    table.add_column("Severity", width=10)
    table.add_column("CVSS", width=5)
    table.add_column("ID", width=15)
    table.add_column("Description", width=40)
    table.add_column("Tool", width=10)
    table.add_column("Affected", width=30)

    for f in findings:
        color = SEVERITY_COLORS[f.severity]
        table.add_row(
            f"[{color}]{f.severity.value.upper()}[/]",
            f"{f.severity_score:.1f}",
            f.id,
            f.description,
            f.produced_by,
            ", ".join(f.affected_components),
        )

    console.print()
    console.print(table)
    render_attack_paths(result, console)
    _print_summary(console, result)


def render_attack_paths(result: ScanResult, console: Console | None = None) -> None:
    console = console or Console()
    for path in result.attack_paths:
        console.print(f"\n[bold]Attack path:[/] {path.description}")
        for i, step in enumerate(path.steps, start=1):
            console.print(f"  {i}. {step}")


def _print_summary(console: Console, result: ScanResult) -> None:
    counts = result.severity_counts()
    parts = []
    for sev in sorted(Severity, reverse=True):
        if counts[sev] > 0:
            color = SEVERITY_COLORS[sev]
            parts.append(f"[{color}]{sev.value.upper()}: {counts[sev]}[/]")

    console.print(
        f"\n[bold]Summary:[/] {len(result.findings)} finding(s) | {' | '.join(parts) if parts else 'Clean'}"
    )
    console.print(f"Scan: {result.id} | Status: {result.status.value}\n")


def render_json(result: ScanResult) -> str:
    output = {
        "$schema": "vulnsight-v1",
        "generated_at": datetime.now().isoformat(),
        "result": result.to_dict(),
        "summary": {
            "total": len(result.findings),
            "by_severity": {s.value: n for s, n in result.severity_counts().items()},
        },
    }
    return json.dumps(output, indent=2)


def load_json(text: str) -> ScanResult:
    """Read a result back from render_json() output."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON report: {exc}") from exc
    if not isinstance(data, dict) or "result" not in data:
        raise ValueError("Report does not contain a scan result")
    try:
        return ScanResult.from_dict(data["result"])
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Malformed scan result: {exc}") from exc
