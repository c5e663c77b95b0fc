"""Command-line interface for nolisticle."""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.markup import escape
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

from . import __version__
from .classifier import default_registry
from .config import Config, get_config_dir
from .dataset import (
    load_labeled,
    load_reference,
    reference_titles,
    unlabeled_titles,
    verify_integrity,
)
from .errors import NolisticleError, validate_rate
from .fetcher import ArticleFetcher, save_articles
from .harness import run_evaluation, save_results
from .labeler import parse_selection, run_labeling
from .logging import setup_logging
from .report import print_report
from .theme import console, format_percent


def _rate_option(ctx, param, value):
    """Validate a --fp-max/--fn-max option as a rate in [0, 1]."""
    if value is None:
        return None
    try:
        return validate_rate(value, param.name)
    except NolisticleError as e:
        raise click.BadParameter(e.message) from e


def _fail(error: NolisticleError) -> None:
    console.print(f"[error]{error.message}[/error]")
    for key, value in error.details.items():
        console.print(f"  [muted]{key}:[/muted] {value}")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
def main():
    """nolisticle - spot listicle titles and measure how well that works."""
    pass


@main.command()
@click.option("--dataset", type=click.Path(path_type=Path), help="Labeled CSV dataset")
@click.option("--reference", type=click.Path(path_type=Path), help="Reference articles JSON")
@click.option("--results", type=click.Path(path_type=Path), help="Where to write results JSON")
@click.option("--fp-max", type=float, callback=_rate_option, help="Max false positive rate (0-1)")
@click.option("--fn-max", type=float, callback=_rate_option, help="Max false negative rate (0-1)")
@click.option(
    "--skip-integrity-check",
    is_flag=True,
    help="Don't compare labeled titles against the reference articles",
)
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
@click.option("--json-logs", is_flag=True, help="Log as JSON lines on stderr")
@click.option("--log-file", is_flag=True, help="Also log to ~/.nolisticle/logs")
def evaluate(
    dataset: Optional[Path],
    reference: Optional[Path],
    results: Optional[Path],
    fp_max: Optional[float],
    fn_max: Optional[float],
    skip_integrity_check: bool,
    verbose: bool,
    json_logs: bool,
    log_file: bool,
):
    """Measure every classifier against the labeled dataset."""
    setup_logging(log_to_file=log_file, verbose=verbose, json_format=json_logs)

    try:
        config = Config.load()
        thresholds = config.thresholds
        if fp_max is not None:
            thresholds.false_positive_rate_max = fp_max
        if fn_max is not None:
            thresholds.false_negative_rate_max = fn_max

        dataset = dataset or Path(config.paths.dataset)
        reference = reference or Path(config.paths.reference)
        results = results or Path(config.paths.results)

        labeled = load_labeled(dataset)
        if not skip_integrity_check:
            # A mismatch means the data has been updated or become corrupted
            verify_integrity(labeled, reference_titles(load_reference(reference)))

        registry = default_registry(config)
        run = run_evaluation(labeled, registry, thresholds)

        print_report(run, results)
        save_results(run.results, results)
    except NolisticleError as e:
        _fail(e)

    if not run.passed:
        console.print(
            f"[error]{len(run.violations)} threshold violation(s), evaluation failed.[/error]"
        )
        sys.exit(1)

    console.print("[success]✓ All classifiers within thresholds[/success]")


@main.command()
@click.argument("titles", nargs=-1, required=True)
def check(titles: tuple[str, ...]):
    """Run every classifier on the given titles.

    Example: nolisticle check "7 Tips for Better Sleep"
    """
    try:
        registry = default_registry(Config.load())
    except NolisticleError as e:
        _fail(e)

    table = Table(show_header=True, header_style="header")
    table.add_column("Title")
    for entry in registry:
        table.add_column(entry.name, justify="center")

    for title in titles:
        cells = []
        for entry in registry:
            if entry.fn(title):
                cells.append("[listicle]listicle[/listicle]")
            else:
                cells.append("[other]other[/other]")
        table.add_row(Text(title), *cells)

    console.print(table)


@main.command()
@click.option("--dataset", type=click.Path(path_type=Path), help="Labeled CSV dataset")
@click.option("--reference", type=click.Path(path_type=Path), help="Reference articles JSON")
@click.option("--chunk-size", type=click.IntRange(min=1), help="Titles per prompt")
def label(dataset: Optional[Path], reference: Optional[Path], chunk_size: Optional[int]):
    """Label reference titles as listicle or other."""
    try:
        config = Config.load()
        dataset = dataset or Path(config.paths.dataset)
        reference = reference or Path(config.paths.reference)
        chunk_size = chunk_size or config.label_chunk_size

        labeled = load_labeled(dataset, missing_ok=True)
        titles = reference_titles(load_reference(reference))
        verify_integrity(labeled, titles)
    except NolisticleError as e:
        _fail(e)

    remaining = unlabeled_titles(labeled, titles)
    if not remaining:
        console.print("[success]✓ Every reference title is labeled.[/success]")
        return

    console.print(
        f"\n[count]{len(labeled)}[/count] labeled, [count]{len(remaining)}[/count] to go."
    )
    console.print("Enter the numbers of the listicles (e.g. [bold]1,4 7[/bold]), "
                  "blank for none, [bold]q[/bold] to stop.\n")

    def ask(chunk: list[str]) -> Optional[set[int]]:
        for idx, title in enumerate(chunk, 1):
            console.print(f"  [count]{idx:>2}[/count]  {escape(title)}")
        while True:
            answer = Prompt.ask("Which are listicles?", default="", show_default=False)
            if answer.strip().lower() == "q":
                return None
            try:
                return parse_selection(answer, len(chunk))
            except ValueError as e:
                console.print(f"[warning]{e}[/warning]")

    added = run_labeling(labeled, remaining, dataset, ask, chunk_size=chunk_size)
    console.print(f"\n[success]✓ Labeled {added} titles, saved to {dataset}[/success]")


@main.command()
@click.option("--pages", type=click.IntRange(min=1), help="Number of pages to fetch")
@click.option("--output", type=click.Path(path_type=Path), help="Reference articles JSON")
def fetch(pages: Optional[int], output: Optional[Path]):
    """Download the reference article list."""
    try:
        config = Config.load()
        pages = pages or config.fetch.pages
        output = output or Path(config.paths.reference)
        fetcher = ArticleFetcher(config.fetch)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            console=console,
        ) as progress:
            task = progress.add_task("Fetching articles...", total=pages)
            articles = fetcher.fetch_all(pages, on_page=lambda _: progress.advance(task))
    except NolisticleError as e:
        _fail(e)

    save_articles(output, articles)
    console.print(f"[success]✓ Saved {len(articles)} articles to {output}[/success]")


@main.command("config")
@click.option("--show", is_flag=True, help="Show current config")
@click.option("--fp-max", type=float, callback=_rate_option, help="Set max false positive rate")
@click.option("--fn-max", type=float, callback=_rate_option, help="Set max false negative rate")
def config_cmd(show: bool, fp_max: Optional[float], fn_max: Optional[float]):
    """View or modify configuration."""
    try:
        config = Config.load()
    except NolisticleError as e:
        _fail(e)

    if fp_max is not None:
        config.thresholds.false_positive_rate_max = fp_max
        config.save()
        console.print(f"Max false positive rate: {format_percent(fp_max)}")

    if fn_max is not None:
        config.thresholds.false_negative_rate_max = fn_max
        config.save()
        console.print(f"Max false negative rate: {format_percent(fn_max)}")

    if show or (fp_max is None and fn_max is None):
        console.print("\n[bold]Current Configuration[/bold]")
        console.print(f"  Config dir: {get_config_dir()}")
        console.print(
            f"  Max false positive rate: {format_percent(config.thresholds.false_positive_rate_max)}"
        )
        console.print(
            f"  Max false negative rate: {format_percent(config.thresholds.false_negative_rate_max)}"
        )
        console.print(f"  Dataset: {config.paths.dataset}")
        console.print(f"  Reference: {config.paths.reference}")
        console.print(f"  Results: {config.paths.results}")
        console.print(f"  Baseline remove threshold: {config.scoring.remove_threshold}")


if __name__ == "__main__":
    main()
