"""Duplicate movement detection."""

from collections import defaultdict
from decimal import Decimal
from typing import NamedTuple, Optional

from movement_reconciler.models.finding import (
    DuplicateRecord,
    DuplicateType,
    FindingKind,
    ValidationFinding,
)
from movement_reconciler.models.movement import Movement
from movement_reconciler.processing.label_similarity import (
    SimilarityCache,
    normalize_label,
)
from movement_reconciler.utils.logging_config import get_logger

logger = get_logger(__name__)


class GroupKey(NamedTuple):
    """Candidate duplicate group: same calendar day, same amount."""

    date: str  # ISO YYYY-MM-DD
    amount: Decimal


class DuplicateDetector:
    """Detects duplicate and near-duplicate movements.

    Duplicates are identified using:
    - Same date and same amount (grouping key)
    - Identical normalized label -> "exact"
    - Similar normalized label (containment or >80% edit similarity) -> "similar"

    Each movement id is reported at most once, and an exact match always
    wins over a similar one for the same id. Movements are never modified.

    Groups hold indices into the caller's movement list rather than copies.
    """

    def __init__(self, sort_by_id: bool = True):
        """Initialize duplicate detector.

        Args:
            sort_by_id: Return records ordered by movement id.
        """
        self.sort_by_id = sort_by_id

    def detect(self, movements: list[Movement]) -> list[DuplicateRecord]:
        """Find every movement that duplicates another.

        Args:
            movements: Movements to check (any order).

        Returns:
            One DuplicateRecord per flagged movement id.
        """
        if len(movements) < 2:
            return []

        groups = self._group_by_date_and_amount(movements)
        cache = SimilarityCache()
        found: dict[int, DuplicateRecord] = {}

        for _key, indices in groups.items():
            if len(indices) < 2:
                continue
            self._check_group(movements, indices, cache, found)

        records = list(found.values())
        if self.sort_by_id:
            records.sort(key=lambda r: r.movement_id)

        exact = sum(1 for r in records if r.duplicate_type is DuplicateType.EXACT)
        logger.info(
            f"Found {len(records)} duplicate movements "
            f"({exact} exact, {len(records) - exact} similar)"
        )
        logger.debug(
            f"Similarity cache: {len(cache)} pairs, "
            f"{cache.hits} hits, {cache.misses} misses"
        )
        return records

    def report(self, movements: list[Movement]) -> Optional[ValidationFinding]:
        """Detect duplicates and wrap them in a single finding.

        Args:
            movements: Movements to check.

        Returns:
            DUPLICATE_TRANSACTION finding, or None if nothing was found.
        """
        records = self.detect(movements)
        if not records:
            return None
        return ValidationFinding(
            kind=FindingKind.DUPLICATE_TRANSACTION,
            message=f"Found {len(records)} duplicate transaction(s)",
            details={"duplicateMovements": records},
        )

    def _group_by_date_and_amount(
        self, movements: list[Movement]
    ) -> dict[GroupKey, list[int]]:
        """Index movements by (date, amount).

        Args:
            movements: Movement arena.

        Returns:
            Mapping of group key to movement indices, in input order.
        """
        groups: dict[GroupKey, list[int]] = defaultdict(list)
        for index, movement in enumerate(movements):
            groups[GroupKey(movement.date.isoformat(), movement.amount)].append(index)
        return groups

    def _check_group(
        self,
        movements: list[Movement],
        indices: list[int],
        cache: SimilarityCache,
        found: dict[int, DuplicateRecord],
    ) -> None:
        """Flag exact and similar duplicates inside one (date, amount) group.

        Args:
            movements: Movement arena.
            indices: Indices of the group members.
            cache: Similarity cache for this detection run.
            found: Records collected so far, keyed by movement id (updated).
        """
        by_label: dict[str, list[int]] = defaultdict(list)
        for index in indices:
            by_label[normalize_label(movements[index].label)].append(index)

        for members in by_label.values():
            if len(members) >= 2:
                for index in members:
                    self._record(movements[index], DuplicateType.EXACT, found)

        if len(by_label) < 2:
            return

        # Same-length pairs first, then across lengths; the similarity
        # prefilters make most cross-length comparisons constant time
        by_length: dict[int, list[str]] = defaultdict(list)
        for label in by_label:
            by_length[len(label)].append(label)
        lengths = sorted(by_length)

        for length in lengths:
            labels = by_length[length]
            for i, first in enumerate(labels):
                for second in labels[i + 1 :]:
                    if cache.similar(first, second):
                        self._record_similar(movements, by_label, first, second, found)

        for i, length_a in enumerate(lengths):
            for length_b in lengths[i + 1 :]:
                for first in by_length[length_a]:
                    for second in by_length[length_b]:
                        if cache.similar(first, second):
                            self._record_similar(
                                movements, by_label, first, second, found
                            )

    def _record_similar(
        self,
        movements: list[Movement],
        by_label: dict[str, list[int]],
        first: str,
        second: str,
        found: dict[int, DuplicateRecord],
    ) -> None:
        for index in by_label[first] + by_label[second]:
            self._record(movements[index], DuplicateType.SIMILAR, found)

    def _record(
        self,
        movement: Movement,
        duplicate_type: DuplicateType,
        found: dict[int, DuplicateRecord],
    ) -> None:
        """Store a record, never downgrading exact to similar.

        A later exact match upgrades an earlier similar record.
        """
        existing = found.get(movement.id)
        if existing is not None:
            if (
                existing.duplicate_type is DuplicateType.EXACT
                or duplicate_type is DuplicateType.SIMILAR
            ):
                return

        found[movement.id] = DuplicateRecord(
            movement_id=movement.id,
            date=movement.date,
            amount=movement.amount,
            label=movement.label,
            duplicate_type=duplicate_type,
        )


def detect_duplicates(movements: list[Movement]) -> list[DuplicateRecord]:
    """Convenience function to detect duplicate movements.

    Args:
        movements: Movements to check.

    Returns:
        Duplicate records ordered by movement id.
    """
    return DuplicateDetector().detect(movements)
