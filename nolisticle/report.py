"""Comparison report of an evaluation run."""

from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .models import EvaluationRun
from .theme import console as default_console
from .theme import format_delta, format_percent

RATE_COLUMNS = (("All", "all"), ("Listicles", "listicles"), ("Others", "others"))


def report_order(run: EvaluationRun) -> list[str]:
    """Classifier names with the baseline first, the rest in run order."""
    return sorted(run.results, key=lambda name: name != run.baseline)


def format_rate_cell(rate: float, baseline_rate: float, is_baseline: bool) -> Text:
    """Rate as a percentage, plus the signed difference to the baseline."""
    cell = Text(format_percent(rate))
    if not is_baseline:
        cell.append(" (")
        cell.append_text(format_delta(rate - baseline_rate))
        cell.append(")")
    return cell


def build_comparison_table(run: EvaluationRun) -> Table:
    table = Table(show_header=True, header_style="header")
    table.add_column("Function")
    for header, _ in RATE_COLUMNS:
        table.add_column(header, justify="right")

    baseline_rates = run.results[run.baseline].rates()

    for name in report_order(run):
        is_baseline = name == run.baseline
        rates = run.results[name].rates()

        label = Text(name, style="classifier")
        if is_baseline:
            label.append(" (baseline)", style="muted")

        table.add_row(
            label,
            *(
                format_rate_cell(rates[key], baseline_rates[key], is_baseline)
                for _, key in RATE_COLUMNS
            ),
        )

    return table


def format_summary(run: EvaluationRun) -> str:
    total = run.num_listicles + run.num_others
    return (
        f"Results (checked {total} titles, of which {run.num_listicles} listicles "
        f"and {run.num_others} other):"
    )


def print_report(
    run: EvaluationRun,
    results_path: Path | None = None,
    console: Console | None = None,
) -> None:
    """Print the summary, the comparison table and any threshold violations."""
    console = console or default_console

    console.print(f"\n{format_summary(run)}\n")
    console.print(build_comparison_table(run))

    if run.violations:
        console.print("\n[error]Threshold violations:[/error]")
        for v in run.violations:
            rate_name = "false negative" if v.kind == "listicles" else "false positive"
            console.print(
                f"  [error]✗[/error] [classifier]{v.classifier}[/classifier] {v.kind}: "
                f"{rate_name} rate {format_percent(v.error_rate)} "
                f"> limit {format_percent(v.limit)}"
            )

    if results_path is not None:
        console.print(f"\nSee [path]{results_path}[/path] for details.\n")
