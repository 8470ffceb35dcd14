"""
Comparison aggregator for orchestrating the section comparators.

Runs every section comparator over a document pair and sums their counters
into document-wide totals.
"""

import logging
from typing import Any, Mapping

from .adapters import DocumentConversionError, document_from_snapshot
from .alignment import (
    AlignmentPolicy,
    default_education_alignment,
    default_experience_alignment,
)
from .matcher import DEFAULT_SIMILARITY_THRESHOLD
from .models import ChangeStats, CVComparisonResult, CVDocument, SectionType
from .sections import compare_education, compare_experiences, compare_skills, compare_summary

logger = logging.getLogger(__name__)


def _has_data(*values) -> bool:
    return any(bool(value) for value in values)


class CVComparator:
    """
    Compares an original document against its rewritten version.

    Holds only configuration, so one instance can be shared across threads.
    """

    def __init__(
        self,
        similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
        case_sensitive_skills: bool = True,
        experience_alignment: AlignmentPolicy | None = None,
        education_alignment: AlignmentPolicy | None = None,
    ):
        """
        Initialize the comparator.

        Args:
            similarity_threshold: Minimum bullet overlap score (exclusive) for
                two bullets to be treated as the same statement
            case_sensitive_skills: Compare skill names exactly (default) or
                after casefolding
            experience_alignment: Policy pairing experience entries
            education_alignment: Policy pairing education entries
        """
        self.similarity_threshold = similarity_threshold
        self.case_sensitive_skills = case_sensitive_skills
        self.experience_alignment = experience_alignment or default_experience_alignment()
        self.education_alignment = education_alignment or default_education_alignment()

    def compare(self, original: CVDocument, modified: CVDocument) -> CVComparisonResult:
        """
        Compare two documents section by section.

        A section is omitted when neither document carries data for it.

        Args:
            original: Original document
            modified: Rewritten document

        Returns:
            CVComparisonResult with per-section comparisons and totals
        """
        summary = None
        if _has_data(original.summary, modified.summary):
            summary = compare_summary(original.summary, modified.summary)

        experiences = None
        if _has_data(original.experiences, modified.experiences):
            experiences = compare_experiences(
                original.experiences,
                modified.experiences,
                alignment=self.experience_alignment,
                threshold=self.similarity_threshold,
            )

        education = None
        if _has_data(original.education, modified.education):
            education = compare_education(
                original.education,
                modified.education,
                alignment=self.education_alignment,
            )

        skills = None
        if _has_data(original.skills, modified.skills):
            skills = compare_skills(
                original.skills,
                modified.skills,
                case_sensitive=self.case_sensitive_skills,
            )

        total_stats = ChangeStats()
        for section in (summary, experiences, education, skills):
            if section is not None:
                total_stats = total_stats + section.change_stats
        if experiences is not None:
            total_stats = total_stats + experiences.bullet_stats

        result = CVComparisonResult(
            summary=summary,
            experiences=experiences,
            education=education,
            skills=skills,
            total_stats=total_stats,
        )

        logger.info(
            "Comparison complete: %d sections changed (+%d, -%d, ~%d)",
            result.sections_changed,
            total_stats.added,
            total_stats.removed,
            total_stats.modified,
        )

        return result

    def compare_snapshots(
        self,
        original_data: Mapping[str, Any] | None,
        current_data: Mapping[str, Any] | None,
        filter_hobbies: bool = True,
    ) -> CVComparisonResult | None:
        """
        Convert two raw snapshots and compare them.

        Args:
            original_data: Raw structured snapshot of the original document
            current_data: Raw structured snapshot of the current document
            filter_hobbies: Drop hobby-like bullets from original experiences

        Returns:
            CVComparisonResult, or None when either snapshot is missing or
            cannot be converted
        """
        if original_data is None or current_data is None:
            logger.warning("Cannot compare: original or current data is missing")
            return None

        try:
            original = document_from_snapshot(
                original_data, id_prefix="orig", filter_hobbies=filter_hobbies
            )
            current = document_from_snapshot(
                current_data, id_prefix="curr", filter_hobbies=False, check_corruption=False
            )
        except DocumentConversionError as e:
            logger.warning("Comparison disabled, conversion failed: %s", e)
            return None

        return self.compare(original, current)


def compare_documents(
    original: CVDocument, modified: CVDocument, **options: Any
) -> CVComparisonResult:
    """
    Compare two documents with a one-off comparator.

    Args:
        original: Original document
        modified: Rewritten document
        **options: Keyword arguments for CVComparator

    Returns:
        CVComparisonResult
    """
    return CVComparator(**options).compare(original, modified)


def compare_snapshots(
    original_data: Mapping[str, Any] | None,
    current_data: Mapping[str, Any] | None,
    filter_hobbies: bool = True,
    **options: Any,
) -> CVComparisonResult | None:
    """Convert and compare two raw snapshots; None when conversion fails."""
    return CVComparator(**options).compare_snapshots(
        original_data, current_data, filter_hobbies=filter_hobbies
    )


def initial_expanded_ids(
    result: CVComparisonResult, section: SectionType | str | None
) -> frozenset[str]:
    """
    Expanded item ids when a section is first opened.

    Opening the experiences section expands its first entry.
    """
    if section is None or SectionType(section) is not SectionType.EXPERIENCES:
        return frozenset()
    if result.experiences is None or not result.experiences.items:
        return frozenset()
    return frozenset({result.experiences.items[0].id})


def toggle_expanded(expanded: frozenset[str] | set[str], item_id: str) -> frozenset[str]:
    """Return a new set of expanded ids with `item_id` toggled."""
    if item_id in expanded:
        return frozenset(expanded - {item_id})
    return frozenset(expanded | {item_id})
