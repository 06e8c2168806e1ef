"""Label normalization and approximate label matching.

Two labels are similar when they are equal, when one contains the other
(reference suffixes such as "PAYMENT REF 12345"), or when their
normalized Levenshtein similarity is strictly above 80%. Two cheap
prefilters reject pairs that cannot reach the threshold before the
quadratic edit-distance step runs.
"""

import re
from collections import Counter

# Minimum edit similarity (exclusive) for two labels to match
SIMILARITY_THRESHOLD = 0.8

# Longest/shortest length ratio compatible with SIMILARITY_THRESHOLD (1 / 0.8)
MAX_LENGTH_RATIO = 1.25

# Shared characters must cover this share of the average label length
MIN_COMMON_CHAR_RATIO = 0.8

_WHITESPACE_RUN = re.compile(r"\s+")
# Anything that is not a letter, digit or whitespace (\w also matches "_")
_NON_ALNUM = re.compile(r"[^\w\s]|_")


def normalize_label(label: str) -> str:
    """Normalize a label for comparison.

    Lowercases, trims, collapses whitespace runs to one space, then strips
    punctuation and symbols: "PAYMENT  #123!" -> "payment 123".

    Args:
        label: Raw bank label.

    Returns:
        Normalized label.
    """
    text = label.lower().strip()
    text = _WHITESPACE_RUN.sub(" ", text)
    return _NON_ALNUM.sub("", text)


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance with unit insertion, deletion and substitution costs.

    Keeps only two rows of the dynamic-programming table.

    Args:
        a: First string.
        b: Second string.

    Returns:
        Minimum number of single-character edits turning a into b.
    """
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            if char_a == char_b:
                current.append(previous[j - 1])
            else:
                current.append(
                    min(previous[j - 1], previous[j], current[j - 1]) + 1
                )
        previous = current
    return previous[-1]


def edit_similarity(a: str, b: str) -> float:
    """Normalized edit similarity in [0, 1].

    Args:
        a: First string.
        b: Second string.

    Returns:
        1 - distance / max(len(a), len(b)); 1.0 for two empty strings.
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1 - levenshtein_distance(a, b) / longest


def can_be_similar_by_length(a: str, b: str) -> bool:
    """Length-ratio prefilter.

    Args:
        a: First string.
        b: Second string.

    Returns:
        False when the lengths diverge too much to reach the threshold.
    """
    shorter, longer = sorted((len(a), len(b)))
    if shorter == 0:
        return longer == 0
    return longer <= shorter * MAX_LENGTH_RATIO


def common_character_count(a: str, b: str) -> int:
    """Size of the multiset intersection of the characters of a and b."""
    return sum((Counter(a) & Counter(b)).values())


def has_enough_common_characters(a: str, b: str) -> bool:
    """Character-frequency prefilter.

    Args:
        a: First string.
        b: Second string.

    Returns:
        False when too few characters are shared to reach the threshold.
    """
    average_length = (len(a) + len(b)) / 2
    return common_character_count(a, b) >= average_length * MIN_COMMON_CHAR_RATIO


def are_labels_similar(a: str, b: str) -> bool:
    """Decide whether two normalized labels describe the same movement.

    The function is symmetric in its arguments.

    Args:
        a: First normalized label.
        b: Second normalized label.

    Returns:
        True if the labels match exactly, by containment, or by edit
        similarity strictly above SIMILARITY_THRESHOLD.
    """
    if a == b:
        return True

    if a in b or b in a:
        return True

    if not can_be_similar_by_length(a, b):
        return False

    if not has_enough_common_characters(a, b):
        return False

    return edit_similarity(a, b) > SIMILARITY_THRESHOLD


class SimilarityCache:
    """Memoizes are_labels_similar per unordered label pair.

    Scoped to a single detection run; create a fresh instance per call.
    """

    def __init__(self) -> None:
        self._results: dict[tuple[str, str], bool] = {}
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._results)

    def similar(self, a: str, b: str) -> bool:
        """Cached, order-independent are_labels_similar(a, b)."""
        key = (a, b) if a <= b else (b, a)
        cached = self._results.get(key)
        if cached is not None:
            self.hits += 1
            return cached
        self.misses += 1
        result = are_labels_similar(*key)
        self._results[key] = result
        return result
