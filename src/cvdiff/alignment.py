"""
Alignment policies for pairing experience and education entries.

Which strategy fits depends on the data source: structured snapshots carry
stable identifiers, legacy conversions only carry positions and text. A
policy is injected into the comparator rather than hard-coded.
"""

import logging
import re
import unicodedata
from abc import ABC, abstractmethod
from typing import Sequence

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_ALNUM_WORD = re.compile(r"[a-z0-9]+")

# Minimum combined score for the similarity pass
COMBINED_SCORE_THRESHOLD = 0.3


def normalize_text(value: str | None) -> str:
    """
    Normalize text for fuzzy comparison.

    Lowercases, strips accents and drops every non-alphanumeric character.
    """
    decomposed = unicodedata.normalize("NFD", (value or "").lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_ALNUM.sub("", stripped)


def contains_match(a: str | None, b: str | None) -> bool:
    """Check if either normalized string contains the other."""
    norm_a = normalize_text(a)
    norm_b = normalize_text(b)
    if not norm_a or not norm_b:
        return False
    return norm_a in norm_b or norm_b in norm_a


def jaccard_similarity(a: str | None, b: str | None) -> float:
    """Word-set Jaccard similarity after accent stripping."""

    def words(value: str | None) -> set[str]:
        decomposed = unicodedata.normalize("NFD", (value or "").lower())
        stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
        return set(_ALNUM_WORD.findall(stripped))

    words_a = words(a)
    words_b = words(b)
    if not words_a or not words_b:
        return 0.0
    intersection = len(words_a & words_b)
    return intersection / (len(words_a) + len(words_b) - intersection)


def _fallback_pairs(
    original_count: int, modified_count: int, pairs: dict[int, int], used: set[int]
) -> None:
    """Pair leftovers by position (equal lengths only), then in order."""
    if original_count == modified_count:
        for original_index in range(original_count):
            if original_index not in pairs and original_index not in used:
                logger.debug("Position fallback: original[%d]", original_index)
                pairs[original_index] = original_index
                used.add(original_index)

    remaining_original = [i for i in range(original_count) if i not in pairs]
    remaining_modified = [j for j in range(modified_count) if j not in used]
    for original_index, modified_index in zip(remaining_original, remaining_modified):
        logger.debug(
            "Order fallback: original[%d] -> modified[%d]", original_index, modified_index
        )
        pairs[original_index] = modified_index
        used.add(modified_index)


class AlignmentPolicy(ABC):
    """
    Strategy that pairs original entries with modified entries.

    Implementations return (original_index, modified_index) pairs; each index
    appears at most once. Entries left out are reported as removed or added.
    """

    @abstractmethod
    def align(self, original: Sequence, modified: Sequence) -> list[tuple[int, int]]:
        """
        Pair entries.

        Args:
            original: Entries from the original document
            modified: Entries from the modified document

        Returns:
            List of (original_index, modified_index) pairs
        """
        pass


class PositionalAlignment(AlignmentPolicy):
    """Pairs the k-th original entry with the k-th modified entry."""

    def align(self, original: Sequence, modified: Sequence) -> list[tuple[int, int]]:
        return [(index, index) for index in range(min(len(original), len(modified)))]


class SimilarityAlignment(AlignmentPolicy):
    """
    Pairs entries by text similarity of two fields, then by position.

    Passes run in order and each only considers entries still unpaired:
    exact primary field, containment on primary, containment on secondary,
    combined word similarity, positional fallback for equal-length lists,
    and finally pairing whatever remains in order.
    """

    def __init__(
        self,
        primary_field: str = "company",
        secondary_field: str = "title",
        primary_weight: float = 0.6,
        min_combined_score: float = COMBINED_SCORE_THRESHOLD,
    ):
        """
        Initialize the policy.

        Args:
            primary_field: Attribute compared first (e.g. company, institution)
            secondary_field: Attribute used as fallback (e.g. title, degree)
            primary_weight: Weight of the primary field in the combined score
            min_combined_score: Minimum combined score to pair entries
        """
        self.primary_field = primary_field
        self.secondary_field = secondary_field
        self.primary_weight = primary_weight
        self.min_combined_score = min_combined_score

    def _value(self, entry, field_name: str) -> str:
        return getattr(entry, field_name, "") or ""

    def align(self, original: Sequence, modified: Sequence) -> list[tuple[int, int]]:
        pairs: dict[int, int] = {}
        used: set[int] = set()

        def run_pass(label: str, is_match) -> None:
            for original_index, entry in enumerate(original):
                if original_index in pairs:
                    continue
                for modified_index, candidate in enumerate(modified):
                    if modified_index in used or not is_match(entry, candidate):
                        continue
                    logger.debug(
                        "%s match: original[%d] -> modified[%d]",
                        label,
                        original_index,
                        modified_index,
                    )
                    pairs[original_index] = modified_index
                    used.add(modified_index)
                    break

        primary, secondary = self.primary_field, self.secondary_field

        def exact_primary(entry, candidate) -> bool:
            key = normalize_text(self._value(entry, primary))
            return bool(key) and normalize_text(self._value(candidate, primary)) == key

        run_pass("Exact", exact_primary)
        run_pass(
            "Fuzzy primary",
            lambda entry, candidate: contains_match(
                self._value(candidate, primary), self._value(entry, primary)
            ),
        )
        run_pass(
            "Fuzzy secondary",
            lambda entry, candidate: contains_match(
                self._value(candidate, secondary), self._value(entry, secondary)
            ),
        )

        for original_index, entry in enumerate(original):
            if original_index in pairs:
                continue
            best_index = None
            best_score = 0.0
            for modified_index, candidate in enumerate(modified):
                if modified_index in used:
                    continue
                score = self.primary_weight * jaccard_similarity(
                    self._value(entry, primary), self._value(candidate, primary)
                ) + (1 - self.primary_weight) * jaccard_similarity(
                    self._value(entry, secondary), self._value(candidate, secondary)
                )
                if score > best_score and score >= self.min_combined_score:
                    best_index = modified_index
                    best_score = score
            if best_index is not None:
                logger.debug(
                    "Similarity match (score %.2f): original[%d] -> modified[%d]",
                    best_score,
                    original_index,
                    best_index,
                )
                pairs[original_index] = best_index
                used.add(best_index)

        _fallback_pairs(len(original), len(modified), pairs, used)
        return sorted(pairs.items())


class FieldContainmentAlignment(AlignmentPolicy):
    """
    Pairs entries when any of several fields match by containment.

    A single pass in original order takes the first unused modified entry
    matching on any field; leftovers fall back to position, then order.
    """

    def __init__(self, fields: Sequence[str] = ("institution", "degree")):
        """
        Initialize the policy.

        Args:
            fields: Attributes compared by containment (any one suffices)
        """
        self.fields = tuple(fields)

    def _matches(self, entry, candidate) -> bool:
        return any(
            contains_match(getattr(candidate, name, "") or "", getattr(entry, name, "") or "")
            for name in self.fields
        )

    def align(self, original: Sequence, modified: Sequence) -> list[tuple[int, int]]:
        pairs: dict[int, int] = {}
        used: set[int] = set()

        for original_index, entry in enumerate(original):
            for modified_index, candidate in enumerate(modified):
                if modified_index in used or not self._matches(entry, candidate):
                    continue
                logger.debug(
                    "Field match: original[%d] -> modified[%d]", original_index, modified_index
                )
                pairs[original_index] = modified_index
                used.add(modified_index)
                break

        _fallback_pairs(len(original), len(modified), pairs, used)
        return sorted(pairs.items())


class IdentifierAlignment(AlignmentPolicy):
    """
    Pairs entries that share a non-empty identifier.

    Entries without a shared identifier are handed to the fallback policy.
    """

    def __init__(self, fallback: AlignmentPolicy | None = None):
        """
        Initialize the policy.

        Args:
            fallback: Policy for entries without a shared identifier (optional)
        """
        self.fallback = fallback

    def align(self, original: Sequence, modified: Sequence) -> list[tuple[int, int]]:
        modified_by_id: dict[str, int] = {}
        for index, entry in enumerate(modified):
            entry_id = getattr(entry, "id", "") or ""
            if entry_id and entry_id not in modified_by_id:
                modified_by_id[entry_id] = index

        pairs: list[tuple[int, int]] = []
        used: set[int] = set()
        for original_index, entry in enumerate(original):
            entry_id = getattr(entry, "id", "") or ""
            modified_index = modified_by_id.get(entry_id)
            if modified_index is not None and modified_index not in used:
                pairs.append((original_index, modified_index))
                used.add(modified_index)

        if self.fallback is None:
            return pairs

        paired_original = {i for i, _ in pairs}
        rest_original = [i for i in range(len(original)) if i not in paired_original]
        rest_modified = [j for j in range(len(modified)) if j not in used]
        if rest_original and rest_modified:
            sub_pairs = self.fallback.align(
                [original[i] for i in rest_original],
                [modified[j] for j in rest_modified],
            )
            pairs.extend((rest_original[i], rest_modified[j]) for i, j in sub_pairs)

        return sorted(pairs)


def default_experience_alignment() -> AlignmentPolicy:
    """Identifier alignment falling back to company/title similarity."""
    return IdentifierAlignment(fallback=SimilarityAlignment("company", "title"))


def default_education_alignment() -> AlignmentPolicy:
    """Identifier alignment falling back to institution-or-degree containment."""
    return IdentifierAlignment(fallback=FieldContainmentAlignment(("institution", "degree")))


def alignment_from_name(name: str, section: str = "experiences") -> AlignmentPolicy:
    """
    Build a policy from its short name.

    Args:
        name: One of 'auto', 'id', 'position', 'similarity'
        section: 'experiences' or 'education', selects the compared fields

    Returns:
        AlignmentPolicy instance

    Raises:
        ValueError: If the name is unknown
    """
    if section == "education":
        similarity_policy: AlignmentPolicy = FieldContainmentAlignment(("institution", "degree"))
    else:
        similarity_policy = SimilarityAlignment("company", "title")

    if name == "auto":
        return IdentifierAlignment(fallback=similarity_policy)
    if name == "id":
        return IdentifierAlignment()
    if name == "position":
        return PositionalAlignment()
    if name == "similarity":
        return similarity_policy
    raise ValueError(f"Unknown alignment policy: {name}")
