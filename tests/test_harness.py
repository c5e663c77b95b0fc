"""Tests for the accuracy evaluation harness."""

import json

import pytest

from nolisticle.classifier import ClassifierEntry, ClassifierRegistry
from nolisticle.config import AccuracyThresholds
from nolisticle.errors import DatasetError, ErrorCode, ThresholdViolationError
from nolisticle.harness import evaluate_kind, load_results, run_evaluation, save_results
from nolisticle.models import Category, KindResult, LabeledTitle, ThresholdViolation

STRICT = AccuracyThresholds(false_positive_rate_max=0.0, false_negative_rate_max=0.0)
LENIENT = AccuracyThresholds(false_positive_rate_max=1.0, false_negative_rate_max=1.0)


def always(title):
    return True


def never(title):
    return False


def titles(prefix, count):
    return [f"{prefix} {i}" for i in range(count)]


def misses(missed):
    """Classifier that recognises every title except the given ones."""
    missed = set(missed)
    return lambda title: title not in missed


@pytest.fixture
def labeled():
    return [
        LabeledTitle("L1", Category.LISTICLE),
        LabeledTitle("O1", Category.OTHER),
        LabeledTitle("L2", Category.LISTICLE),
        LabeledTitle("O2", Category.OTHER),
    ]


class TestEvaluateKind:
    """Tests for evaluating one classifier on one ground-truth group."""

    def test_all_listicles_recognised(self):
        result = evaluate_kind("f", always, ["a", "b"], Category.LISTICLE, STRICT)
        assert result == KindResult(num_ok=2, total=2, rate=1.0, failures=[])

    def test_others_ok_when_not_matched(self):
        """Test that other titles count as ok when the classifier says False."""
        result = evaluate_kind("f", never, ["a", "b", "c"], Category.OTHER, STRICT)
        assert result.num_ok == 3
        assert result.failures == []

    def test_failures_keep_dataset_order(self):
        group = ["a", "b", "c", "d"]
        result = evaluate_kind("f", misses(["d", "b"]), group, Category.LISTICLE, LENIENT)
        assert result.failures == ["b", "d"]
        assert result.num_ok == 2
        assert result.rate == 0.5

    def test_result_invariants(self):
        """Test num_ok + failures == total and rate == num_ok / total."""
        group = titles("t", 7)
        result = evaluate_kind("f", misses(group[:3]), group, Category.LISTICLE, LENIENT)
        assert result.num_ok + len(result.failures) == result.total
        assert result.rate == result.num_ok / result.total

    def test_truthy_return_values(self):
        """Test that non-bool classifier results are read as booleans."""
        result = evaluate_kind("f", lambda t: 1, ["a"], Category.LISTICLE, STRICT)
        assert result.num_ok == 1

    def test_false_negative_rate_violation(self):
        """Test 3 misses out of 100 listicles against a 2.5% limit."""
        group = titles("listicle", 100)
        thresholds = AccuracyThresholds(false_negative_rate_max=0.025)
        with pytest.raises(ThresholdViolationError) as exc_info:
            evaluate_kind("f", misses(group[:3]), group, Category.LISTICLE, thresholds)

        error = exc_info.value
        assert error.code == ErrorCode.THRESHOLD_VIOLATION
        assert error.kind == "listicles"
        assert error.error_rate == pytest.approx(0.03)
        assert error.limit == 0.025
        assert error.result.num_ok == 97
        assert error.result.failures == group[:3]

    def test_rate_at_limit_passes(self):
        """Test that an error rate exactly at the limit passes."""
        group = titles("listicle", 40)
        thresholds = AccuracyThresholds(false_negative_rate_max=0.025)
        result = evaluate_kind("f", misses(group[:1]), group, Category.LISTICLE, thresholds)
        assert result.num_ok == 39

    def test_one_miss_past_limit_fails(self):
        group = titles("listicle", 40)
        thresholds = AccuracyThresholds(false_negative_rate_max=0.025)
        with pytest.raises(ThresholdViolationError):
            evaluate_kind("f", misses(group[:2]), group, Category.LISTICLE, thresholds)

    def test_false_positive_limit_used_for_others(self):
        """Test that other titles are checked against the false positive limit."""
        group = titles("other", 10)
        thresholds = AccuracyThresholds(false_positive_rate_max=0.0, false_negative_rate_max=1.0)
        with pytest.raises(ThresholdViolationError) as exc_info:
            evaluate_kind("f", lambda t: t == "other 0", group, Category.OTHER, thresholds)
        assert exc_info.value.kind == "others"
        assert exc_info.value.limit == 0.0

    def test_empty_group_vacuous_pass(self):
        """Test that an empty group passes with rate 1.0 instead of NaN."""
        result = evaluate_kind("f", always, [], Category.OTHER, STRICT)
        assert result == KindResult(num_ok=0, total=0, rate=1.0, failures=[])


class TestRunEvaluation:
    """Tests for evaluating a registry of classifiers."""

    def test_passing_run(self, labeled):
        registry = ClassifierRegistry(
            [ClassifierEntry("perfect", lambda t: t.startswith("L"), baseline=True)]
        )
        run = run_evaluation(labeled, registry, STRICT)

        assert run.passed is True
        assert run.baseline == "perfect"
        assert run.results["perfect"].overall_rate == 1.0
        assert run.num_listicles == 2
        assert run.num_others == 2

    def test_violations_isolated(self, labeled):
        """Test that one violation doesn't hide other classifiers or kinds."""
        registry = ClassifierRegistry(
            [
                ClassifierEntry("always", always, baseline=True),
                ClassifierEntry("never", never),
            ]
        )
        run = run_evaluation(labeled, registry, STRICT)

        assert run.passed is False
        assert run.violations == [
            ThresholdViolation(classifier="always", kind="others", error_rate=1.0, limit=0.0),
            ThresholdViolation(classifier="never", kind="listicles", error_rate=1.0, limit=0.0),
        ]

        always_results = run.results["always"]
        assert always_results.listicles.rate == 1.0
        assert always_results.others.failures == ["O1", "O2"]

        never_results = run.results["never"]
        assert never_results.listicles.failures == ["L1", "L2"]
        assert never_results.others.rate == 1.0
        assert never_results.overall_rate == 0.5

    def test_results_baseline_first(self, labeled):
        registry = ClassifierRegistry(
            [
                ClassifierEntry("candidate", always),
                ClassifierEntry("baseline", never, baseline=True),
            ]
        )
        run = run_evaluation(labeled, registry, LENIENT)
        assert list(run.results) == ["baseline", "candidate"]

    def test_empty_dataset(self):
        """Test that an empty dataset reports 100% everywhere, never NaN."""
        registry = ClassifierRegistry([ClassifierEntry("f", always, baseline=True)])
        run = run_evaluation([], registry, STRICT)

        assert run.passed is True
        assert run.results["f"].rates() == {"all": 1.0, "listicles": 1.0, "others": 1.0}


class TestResultsArtifact:
    """Tests for persisting run results."""

    def test_round_trip(self, labeled, tmp_path):
        """Test that saving and loading preserves every kind result."""
        registry = ClassifierRegistry(
            [
                ClassifierEntry("always", always, baseline=True),
                ClassifierEntry("never", never),
            ]
        )
        run = run_evaluation(labeled, registry, LENIENT)
        path = tmp_path / "results.json"

        save_results(run.results, path)
        loaded = load_results(path)

        assert loaded == run.results
        assert list(loaded) == ["always", "never"]

    def test_wire_format(self, labeled, tmp_path):
        """Test the nested name -> kind -> counts layout on disk."""
        registry = ClassifierRegistry([ClassifierEntry("never", never, baseline=True)])
        run = run_evaluation(labeled, registry, LENIENT)
        path = tmp_path / "results.json"
        save_results(run.results, path)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data == {
            "never": {
                "listicles": {"numOk": 0, "total": 2, "rate": 0.0, "failures": ["L1", "L2"]},
                "others": {"numOk": 2, "total": 2, "rate": 1.0, "failures": []},
            }
        }

    def test_overwrites_previous_artifact(self, labeled, tmp_path):
        path = tmp_path / "results.json"
        path.write_text('{"stale": {}}', encoding="utf-8")

        registry = ClassifierRegistry([ClassifierEntry("never", never, baseline=True)])
        save_results(run_evaluation(labeled, registry, LENIENT).results, path)

        assert "stale" not in json.loads(path.read_text(encoding="utf-8"))

    def test_load_missing(self, tmp_path):
        with pytest.raises(DatasetError) as exc_info:
            load_results(tmp_path / "results.json")
        assert exc_info.value.code == ErrorCode.DATASET_MISSING

    def test_load_malformed(self, tmp_path):
        path = tmp_path / "results.json"
        path.write_text('{"f": {"listicles": {}}}', encoding="utf-8")
        with pytest.raises(DatasetError) as exc_info:
            load_results(path)
        assert exc_info.value.code == ErrorCode.DATASET_INVALID

    def test_load_not_an_object(self, tmp_path):
        path = tmp_path / "results.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(DatasetError) as exc_info:
            load_results(path)
        assert exc_info.value.code == ErrorCode.DATASET_INVALID
