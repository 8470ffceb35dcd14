"""
CV Comparison Engine.

Core engine for comparing an original résumé against its rewritten version,
section by section, down to individual words. Designed to be reusable by the
CLI and by any presentation layer.
"""

# Core models
# Main entry points
from .alignment import (
    AlignmentPolicy,
    FieldContainmentAlignment,
    IdentifierAlignment,
    PositionalAlignment,
    SimilarityAlignment,
)
from .cache import ComparisonCache
from .comparator import CVComparator, compare_documents, compare_snapshots
from .matcher import match_items, similarity
from .models import (
    ChangeStats,
    ComparisonStatus,
    CVComparisonResult,
    CVDocument,
    DiffSegment,
    DiffType,
    EducationEntry,
    ExperienceEntry,
    SectionType,
    WordDiffResult,
)
from .word_diff import diff_words

__all__ = [
    # Models
    "ChangeStats",
    "ComparisonStatus",
    "CVComparisonResult",
    "CVDocument",
    "DiffSegment",
    "DiffType",
    "EducationEntry",
    "ExperienceEntry",
    "SectionType",
    "WordDiffResult",
    # Alignment policies
    "AlignmentPolicy",
    "FieldContainmentAlignment",
    "IdentifierAlignment",
    "PositionalAlignment",
    "SimilarityAlignment",
    # Main entry points
    "CVComparator",
    "ComparisonCache",
    "compare_documents",
    "compare_snapshots",
    "diff_words",
    "match_items",
    "similarity",
]
