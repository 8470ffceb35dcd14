"""
Similarity matcher for aligning two unordered lists of short texts.

Pairs bullets that were reworded or reordered using lexical word overlap.
The assignment is greedy and original-first, so results are deterministic
and depend on input order.
"""

import logging

from .models import MatchRecord

logger = logging.getLogger(__name__)

DEFAULT_SIMILARITY_THRESHOLD = 0.3


def word_set(text: str | None) -> set[str]:
    """
    Lowercase word set of a text.

    Words are whitespace-separated; punctuation stays attached.
    """
    if not text:
        return set()
    return set(text.lower().split())


def similarity(a: str | None, b: str | None) -> float:
    """
    Overlap score between two texts.

    Score is |A ∩ B| / max(|A|, |B|) over lowercase word sets, so a short
    text fully contained in a long one scores by the long one's size.

    Args:
        a: First text
        b: Second text

    Returns:
        Score between 0.0 and 1.0 (0.0 if either text has no words)
    """
    words_a = word_set(a)
    words_b = word_set(b)
    if not words_a or not words_b:
        return 0.0
    return len(words_a & words_b) / max(len(words_a), len(words_b))


def match_items(
    original: list[str] | None,
    modified: list[str] | None,
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> list[MatchRecord]:
    """
    Align two lists of texts by lexical overlap.

    For each original item in order, an unused identical modified item is
    taken first. Otherwise the unused modified item with the highest score
    is taken (earliest index on ties) when that score is strictly above the
    threshold.

    Args:
        original: Original items
        modified: Modified items
        threshold: Minimum score (exclusive) for a pair to match

    Returns:
        Matched records in original order, then removed-only records in
        original order, then added-only records in modified order
    """
    original = list(original or [])
    modified = list(modified or [])

    modified_words = [word_set(item) for item in modified]
    used: set[int] = set()
    matched: list[MatchRecord] = []
    removed: list[MatchRecord] = []

    for original_index, original_value in enumerate(original):
        words = word_set(original_value)
        best_index = -1
        best_score = 0.0

        # identical text always pairs, even when it has no words
        for modified_index, candidate in enumerate(modified):
            if modified_index not in used and candidate == original_value:
                best_index = modified_index
                best_score = 1.0
                break

        if best_index == -1:
            for modified_index, candidate_words in enumerate(modified_words):
                if modified_index in used:
                    continue
                if not words or not candidate_words:
                    score = 0.0
                else:
                    score = len(words & candidate_words) / max(len(words), len(candidate_words))
                if best_index == -1 or score > best_score:
                    best_index = modified_index
                    best_score = score

        if best_index != -1 and best_score > threshold:
            used.add(best_index)
            matched.append(
                MatchRecord(
                    original_index=original_index,
                    modified_index=best_index,
                    original_value=original_value,
                    modified_value=modified[best_index],
                    score=best_score,
                )
            )
        else:
            removed.append(
                MatchRecord(original_index=original_index, original_value=original_value)
            )

    added = [
        MatchRecord(modified_index=index, modified_value=value)
        for index, value in enumerate(modified)
        if index not in used
    ]

    logger.debug(
        "Matched %d of %d original items (%d removed, %d added)",
        len(matched),
        len(original),
        len(removed),
        len(added),
    )

    return matched + removed + added
