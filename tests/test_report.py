"""Tests for the comparison report."""

import io

import pytest
from rich.console import Console

from nolisticle.models import (
    ClassifierResults,
    EvaluationRun,
    KindResult,
    RunResults,
    ThresholdViolation,
)
from nolisticle.report import format_rate_cell, format_summary, print_report, report_order
from nolisticle.theme import NOLISTICLE_THEME, format_delta, format_percent


def kind(num_ok, total):
    failures = [f"title {i}" for i in range(total - num_ok)]
    return KindResult.from_failures(total, failures)


@pytest.fixture
def run():
    results = RunResults(
        classifiers={
            "candidate": ClassifierResults(listicles=kind(4, 4), others=kind(5, 6)),
            "baseline": ClassifierResults(listicles=kind(2, 4), others=kind(6, 6)),
        }
    )
    return EvaluationRun(results=results, baseline="baseline")


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def report_console(output):
    return Console(file=output, width=200, theme=NOLISTICLE_THEME)


class TestFormatting:
    """Tests for percentage formatting."""

    def test_format_percent(self):
        assert format_percent(1.0) == "100%"
        assert format_percent(0.5) == "50%"
        assert format_percent(0.975) == "97.5%"
        assert format_percent(0.0) == "0%"

    def test_format_percent_three_significant_digits(self):
        assert format_percent(2 / 3) == "66.7%"

    def test_format_delta_sign_and_style(self):
        better = format_delta(0.25)
        assert better.plain == "+25%"
        assert better.style == "better"

        worse = format_delta(-0.5)
        assert worse.plain == "-50%"
        assert worse.style == "worse"

        same = format_delta(0.0)
        assert same.plain == "+0%"
        assert same.style == "muted"

    def test_rate_cell_baseline_has_no_delta(self):
        assert format_rate_cell(0.5, 0.5, is_baseline=True).plain == "50%"

    def test_rate_cell_with_delta(self):
        assert format_rate_cell(1.0, 0.5, is_baseline=False).plain == "100% (+50%)"


class TestReport:
    """Tests for the printed report."""

    def test_baseline_first(self, run):
        """Test that the baseline leads even when stored later."""
        assert report_order(run) == ["baseline", "candidate"]

    def test_summary(self, run):
        assert format_summary(run) == (
            "Results (checked 10 titles, of which 4 listicles and 6 other):"
        )

    def test_print_report(self, run, output, report_console):
        print_report(run, results_path="results.json", console=report_console)
        text = output.getvalue()

        assert "Function" in text
        assert "baseline (baseline)" in text
        assert text.index("baseline (baseline)") < text.index("candidate")
        # candidate listicles: 100% vs 50% for the baseline
        assert "100% (+50%)" in text
        # candidate others: 5/6 vs 6/6
        assert "83.3% (-16.7%)" in text
        assert "See results.json for details." in text
        assert "Threshold violations" not in text

    def test_print_report_with_violations(self, run, output, report_console):
        run.violations.append(
            ThresholdViolation(classifier="baseline", kind="listicles", error_rate=0.5, limit=0.25)
        )
        print_report(run, console=report_console)
        text = output.getvalue()

        assert "Threshold violations:" in text
        assert "baseline listicles: false negative rate 50% > limit 25%" in text
        assert "See " not in text
