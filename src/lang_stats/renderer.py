"""Rich-based terminal report renderer with JSON/CSV support."""

from __future__ import annotations

import csv
import io
import json
from dataclasses import asdict

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import UserReport


def _format_number(n: float) -> str:
    return f"{round(n):,}"


def _format_stars(stars: float) -> str:
    if float(stars).is_integer():
        return f"{int(stars):,}"
    return f"{stars:,.2f}"


def _make_bar(percentage: float, width: int = 20) -> str:
    filled = round(percentage / 100 * width)
    return "\u2588" * filled + "\u2591" * (width - filled)


def _write_to_file(content: str, output_file: str) -> None:
    """Write content to a file and print confirmation."""
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(content)
    Console().print(f"Saved to {output_file}")


def render_report(
    report: UserReport,
    top_n: int | None = None,
    output_file: str | None = None,
) -> None:
    """Render a UserReport to the terminal using rich."""
    if output_file:
        string_io = io.StringIO()
        console = Console(file=string_io, force_terminal=False, width=120)
    else:
        console = Console()

    mode = "weighted by contribution" if report.weighted else "unweighted"
    console.print(Panel(
        Text(f"lang-stats: {report.user}\n{report.source}, {mode}", justify="center"),
        style="bold cyan",
    ))
    console.print()

    if report.failed_repos:
        console.print(
            f"[bold yellow]Warning:[/bold yellow] Failed to collect stats for "
            f"{len(report.failed_repos)} repo(s): {', '.join(report.failed_repos)}"
        )
        console.print()

    console.print("[bold]Summary[/bold]")
    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column("label", style="dim")
    summary.add_column("value", style="bold")
    summary.add_row("Repositories found", _format_number(report.total_repos))
    summary.add_row("Analyzed", _format_number(len(report.records)))
    summary.add_row("Skipped", _format_number(len(report.skipped)))
    summary.add_row("Languages", _format_number(len(report.result.languages)))
    console.print(summary)
    console.print()

    if report.records:
        console.print("[bold]Repositories[/bold]")
        repo_table = Table(show_header=True, header_style="bold")
        repo_table.add_column("Repo")
        repo_table.add_column("Contribution", justify="right")
        repo_table.add_column("Stars", justify="right")
        repo_table.add_column("Top Language")

        for r in report.records:
            repo_table.add_row(
                r.full_name,
                f"{r.user_ratio * 100:.1f}%",
                _format_number(r.stars),
                r.top_language or "-",
            )
        console.print(repo_table)
        console.print()

    if report.result.languages:
        console.print("[bold]Most used languages[/bold]")
        lang_table = Table(show_header=True, header_style="bold")
        lang_table.add_column("Language")
        lang_table.add_column("Bar")
        lang_table.add_column("Percentage", justify="right")
        lang_table.add_column(report.source.capitalize() or "Size", justify="right")

        languages = report.result.languages
        if top_n:
            languages = languages[:top_n]
        for lang in languages:
            lang_table.add_row(
                lang.language,
                _make_bar(lang.percentage),
                f"{lang.percentage:.2f}%",
                _format_number(lang.magnitude),
            )
        console.print(lang_table)
        console.print()
    else:
        console.print("[dim]No language data found.[/dim]")
        console.print()

    label = "Total stars (weighted)" if report.weighted else "Total stars"
    console.print(f"[bold]{label}:[/bold] {_format_stars(report.result.total_stars)}")

    if output_file:
        _write_to_file(string_io.getvalue(), output_file)


def render_json(report: UserReport, output_file: str | None = None) -> None:
    """Render a UserReport as JSON."""
    data = asdict(report)
    data["result"]["percentages"] = report.result.percentages
    content = json.dumps(data, indent=2, ensure_ascii=False)
    if output_file:
        _write_to_file(content, output_file)
    else:
        print(content)


def render_csv(report: UserReport, output_file: str | None = None) -> None:
    """Render the ranked language list as CSV."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["language", "percentage", "magnitude"])
    for lang in report.result.languages:
        writer.writerow([lang.language, f"{lang.percentage:.3f}", f"{lang.magnitude:.2f}"])
    content = output.getvalue()
    if output_file:
        _write_to_file(content, output_file)
    else:
        print(content, end="")
