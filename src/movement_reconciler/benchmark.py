"""Synthetic dataset generation and performance benchmarking."""

import random
import time
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Optional

from movement_reconciler.config import Config
from movement_reconciler.processing.validator import MovementValidator
from movement_reconciler.utils.decimal_utils import round_cents, sum_amounts
from movement_reconciler.utils.logging_config import get_logger

logger = get_logger(__name__)

DATASET_START = date(2024, 1, 1)

DATASET_LABELS = [
    "SALARY PAYMENT",
    "RENT PAYMENT",
    "UTILITIES",
    "GROCERIES",
    "RESTAURANT",
    "TRANSPORT",
    "ENTERTAINMENT",
    "INSURANCE",
    "PHONE BILL",
    "INTERNET",
    "GAS STATION",
    "PHARMACY",
    "BOOKSTORE",
    "CLOTHING",
    "GIFT",
]

# (name, movements, balances)
DEFAULT_BENCHMARK_SIZES = [
    ("small", 100, 5),
    ("medium", 1_000, 12),
    ("large", 10_000, 50),
]


@dataclass
class BenchmarkResult:
    """Timing for one benchmark run.

    Attributes:
        name: Dataset size name.
        movements: Number of movements.
        balances: Number of balance control points.
        duration_ms: Wall-clock validation time in milliseconds.
        findings: Number of findings in the verdict.
    """

    name: str
    movements: int
    balances: int
    duration_ms: float
    findings: int

    @property
    def throughput(self) -> float:
        """Movements validated per second."""
        if self.duration_ms <= 0:
            return float("inf")
        return self.movements / (self.duration_ms / 1000)


def generate_dataset(
    movement_count: int,
    balance_count: int,
    seed: Optional[int] = None,
    start: date = DATASET_START,
) -> dict[str, list[dict[str, Any]]]:
    """Generate a synthetic validation request.

    Movements are spread one per day over a year (wrapping), with labels
    cycled from DATASET_LABELS and random amounts in [-1000, 1000) rounded
    to cents. Balances are evenly spaced with a random walk; the last one
    is overwritten with the sum of all movements up to its date. The
    random-walk checkpoints do not reconcile with each other, so a
    dataset with several balances yields BALANCE_MISMATCH findings, and
    movements dated after the last checkpoint yield MISSING_TRANSACTION.

    Args:
        movement_count: Number of movements.
        balance_count: Number of balance control points.
        seed: Random seed for reproducible datasets.
        start: Date of the first day.

    Returns:
        Request document with "movements" and "balances".
    """
    rng = random.Random(seed)

    movements: list[dict[str, Any]] = []
    for i in range(1, movement_count + 1):
        movements.append({
            "id": i,
            "date": (start + timedelta(days=i % 365)).isoformat(),
            "label": DATASET_LABELS[i % len(DATASET_LABELS)],
            "amount": round_cents(Decimal(str(rng.uniform(-1000, 1000)))),
        })

    balances: list[dict[str, Any]] = []
    if balance_count > 0:
        days_between = max(365 // balance_count, 1)
        running = Decimal("0")
        for i in range(balance_count):
            running += Decimal(str(rng.uniform(-2000, 3000)))
            balances.append({
                "date": (start + timedelta(days=i * days_between)).isoformat(),
                "balance": round_cents(running),
            })

        last_date = balances[-1]["date"]
        balances[-1]["balance"] = sum_amounts(
            m["amount"] for m in movements if m["date"] <= last_date
        )

    logger.info(
        f"Generated dataset with {len(movements)} movements "
        f"and {len(balances)} balances"
    )
    return {"movements": movements, "balances": balances}


def run_benchmark(
    sizes: Optional[list[tuple[str, int, int]]] = None,
    config: Optional[Config] = None,
    seed: int = 42,
) -> list[BenchmarkResult]:
    """Time the validator on generated datasets.

    Args:
        sizes: (name, movements, balances) per run.
        config: Application configuration.
        seed: Random seed for dataset generation.

    Returns:
        One result per size.
    """
    validator = MovementValidator(config)
    results: list[BenchmarkResult] = []

    for name, movement_count, balance_count in sizes or DEFAULT_BENCHMARK_SIZES:
        dataset = generate_dataset(movement_count, balance_count, seed=seed)

        started = time.perf_counter()
        verdict = validator.validate(dataset["movements"], dataset["balances"])
        elapsed_ms = (time.perf_counter() - started) * 1000

        result = BenchmarkResult(
            name=name,
            movements=movement_count,
            balances=balance_count,
            duration_ms=elapsed_ms,
            findings=len(verdict.findings),
        )
        logger.info(
            f"Benchmark {name}: {movement_count} movements in {elapsed_ms:.1f} ms"
        )
        results.append(result)

    return results
