"""Tests for dataset generation and benchmarking."""

from decimal import Decimal

from movement_reconciler.benchmark import (
    BenchmarkResult,
    generate_dataset,
    run_benchmark,
)
from movement_reconciler.models.finding import FindingKind
from movement_reconciler.processing.validator import validate


class TestGenerateDataset:
    """Tests for generate_dataset."""

    def test_sizes(self) -> None:
        """Test that the requested counts are produced."""
        dataset = generate_dataset(50, 4, seed=1)

        assert len(dataset["movements"]) == 50
        assert len(dataset["balances"]) == 4
        assert [m["id"] for m in dataset["movements"]] == list(range(1, 51))

    def test_reproducible_with_seed(self) -> None:
        """Test that the same seed yields the same dataset."""
        assert generate_dataset(20, 3, seed=7) == generate_dataset(20, 3, seed=7)

    def test_amounts_in_cents(self) -> None:
        """Test that amounts are Decimals with two places."""
        dataset = generate_dataset(30, 2, seed=3)

        for movement in dataset["movements"]:
            assert isinstance(movement["amount"], Decimal)
            assert movement["amount"].as_tuple().exponent == -2

    def test_last_balance_matches_running_total(self) -> None:
        """Test that the last control point equals the movements up to it."""
        dataset = generate_dataset(100, 5, seed=11)
        last = dataset["balances"][-1]

        total = sum(
            (m["amount"] for m in dataset["movements"] if m["date"] <= last["date"]),
            Decimal("0"),
        )
        assert last["balance"] == total

    def test_single_checkpoint_agrees_with_movements(self) -> None:
        """Test that one checkpoint equals the cumulative total, leaving trailing movements."""
        dataset = generate_dataset(400, 1, seed=2)

        verdict = validate(dataset["movements"], dataset["balances"])

        assert verdict.findings_of(FindingKind.BALANCE_MISMATCH) == []
        assert len(verdict.findings_of(FindingKind.MISSING_TRANSACTION)) == 1

    def test_no_balances(self) -> None:
        """Test that zero control points yields an empty list."""
        assert generate_dataset(5, 0, seed=1)["balances"] == []

    def test_dataset_validates(self) -> None:
        """Test that a generated dataset runs through the validator."""
        dataset = generate_dataset(200, 6, seed=5)

        verdict = validate(dataset["movements"], dataset["balances"])

        assert verdict.findings_of(FindingKind.INVALID_DATE_ORDER) == []


class TestRunBenchmark:
    """Tests for run_benchmark."""

    def test_one_result_per_size(self) -> None:
        """Test that each size produces a timed result."""
        results = run_benchmark(sizes=[("tiny", 10, 2), ("small", 40, 3)])

        assert [r.name for r in results] == ["tiny", "small"]
        assert all(r.duration_ms >= 0 for r in results)
        assert results[1].movements == 40

    def test_throughput(self) -> None:
        """Test throughput is movements per second."""
        result = BenchmarkResult("x", movements=500, balances=1, duration_ms=250, findings=0)
        assert result.throughput == 2000
