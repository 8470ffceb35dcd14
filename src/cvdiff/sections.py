"""
Section comparators.

Each comparator takes one section's original and modified data and builds a
section comparison with its own change counters. Missing data is normalized
to empty strings and empty lists.
"""

import logging
from typing import Sequence

from .alignment import (
    AlignmentPolicy,
    default_education_alignment,
    default_experience_alignment,
)
from .matcher import DEFAULT_SIMILARITY_THRESHOLD, match_items
from .models import (
    BulletComparison,
    ChangeStats,
    ComparisonStatus,
    EducationComparison,
    EducationEntry,
    EducationSectionComparison,
    ExperienceComparison,
    ExperienceEntry,
    ExperiencesComparison,
    ItemComparison,
    SkillComparison,
    SkillsComparison,
    SummaryComparison,
    WordDiffResult,
)
from .word_diff import diff_words

logger = logging.getLogger(__name__)

_SKILL_ORDER = {
    ComparisonStatus.ADDED: 0,
    ComparisonStatus.UNCHANGED: 1,
    ComparisonStatus.REMOVED: 2,
}


def compare_text(original: str | None, modified: str | None) -> ItemComparison:
    """
    Compare two optional text values.

    Args:
        original: Original value (None or empty means absent)
        modified: Modified value (None or empty means absent)

    Returns:
        ItemComparison with a diff when both values exist and differ
    """
    original = original or None
    modified = modified or None

    if original is None and modified is None:
        return ItemComparison(original=None, modified=None, status=ComparisonStatus.UNCHANGED)
    if original is None:
        return ItemComparison(original=None, modified=modified, status=ComparisonStatus.ADDED)
    if modified is None:
        return ItemComparison(original=original, modified=None, status=ComparisonStatus.REMOVED)
    if original == modified:
        return ItemComparison(
            original=original, modified=modified, status=ComparisonStatus.UNCHANGED
        )
    return ItemComparison(
        original=original,
        modified=modified,
        status=ComparisonStatus.MODIFIED,
        diff=diff_words(original, modified),
    )


def _field_diff(original: str, modified: str) -> WordDiffResult | None:
    if original == modified:
        return None
    return diff_words(original, modified)


def _unique_id(candidate: str, fallback: str, seen: set[str]) -> str:
    """Use the entry's id unless another item in the section already has it."""
    item_id = candidate if candidate and candidate not in seen else fallback
    base, suffix = item_id, 2
    while item_id in seen:
        item_id = f"{base}-{suffix}"
        suffix += 1
    seen.add(item_id)
    return item_id


def compare_summary(original: str | None, modified: str | None) -> SummaryComparison:
    """
    Compare summary texts.

    Section counters come from the single diff: added and removed count the
    changed runs, modified is 1 when anything changed.
    """
    item = compare_text(original, modified)
    diff = diff_words(original, modified)
    stats = ChangeStats(
        added=diff.added_count,
        removed=diff.removed_count,
        modified=1 if diff.has_changes else 0,
    )
    return SummaryComparison(item=item, change_stats=stats)


def compare_skills(
    original: Sequence[str] | None,
    modified: Sequence[str] | None,
    case_sensitive: bool = True,
) -> SkillsComparison:
    """
    Compare skill names as sets.

    A renamed skill shows up as one removal and one addition.

    Args:
        original: Original skill names
        modified: Modified skill names
        case_sensitive: If False, names are compared after casefolding and
            trimming

    Returns:
        SkillsComparison ordered added, unchanged, removed
    """

    def key(name: str) -> str:
        return name if case_sensitive else name.strip().casefold()

    def unique(names: Sequence[str] | None) -> dict[str, str]:
        seen: dict[str, str] = {}
        for name in names or []:
            if not name:
                continue
            seen.setdefault(key(name), name)
        return seen

    original_names = unique(original)
    modified_names = unique(modified)

    items: list[SkillComparison] = []
    for skill_key, name in original_names.items():
        if skill_key in modified_names:
            items.append(SkillComparison(modified_names[skill_key], ComparisonStatus.UNCHANGED))
        else:
            items.append(SkillComparison(name, ComparisonStatus.REMOVED))
    for skill_key, name in modified_names.items():
        if skill_key not in original_names:
            items.append(SkillComparison(name, ComparisonStatus.ADDED))

    items.sort(key=lambda item: _SKILL_ORDER[item.status])

    stats = ChangeStats.from_statuses(item.status for item in items)
    return SkillsComparison(items=tuple(items), change_stats=stats)


def compare_bullets(
    original: Sequence[str] | None,
    modified: Sequence[str] | None,
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> tuple[list[BulletComparison], ChangeStats]:
    """
    Align and diff two bullet lists.

    Args:
        original: Original bullets
        modified: Modified bullets
        threshold: Similarity threshold for the matcher

    Returns:
        Tuple of (bullet comparisons, bullet stats)
    """
    bullets: list[BulletComparison] = []
    records = match_items(list(original or []), list(modified or []), threshold)

    for index, record in enumerate(records):
        bullet_id = f"bullet-{index}"
        if record.is_matched:
            if record.original_value == record.modified_value:
                bullets.append(
                    BulletComparison(
                        original=record.original_value,
                        modified=record.modified_value,
                        status=ComparisonStatus.UNCHANGED,
                        id=bullet_id,
                    )
                )
            else:
                bullets.append(
                    BulletComparison(
                        original=record.original_value,
                        modified=record.modified_value,
                        status=ComparisonStatus.MODIFIED,
                        diff=diff_words(record.original_value, record.modified_value),
                        id=bullet_id,
                    )
                )
        elif record.is_removed:
            bullets.append(
                BulletComparison(
                    original=record.original_value,
                    modified=None,
                    status=ComparisonStatus.REMOVED,
                    id=bullet_id,
                )
            )
        else:
            bullets.append(
                BulletComparison(
                    original=None,
                    modified=record.modified_value,
                    status=ComparisonStatus.ADDED,
                    id=bullet_id,
                )
            )

    return bullets, ChangeStats.from_statuses(bullet.status for bullet in bullets)


def _one_sided_bullets(entry: ExperienceEntry, status: ComparisonStatus) -> list[BulletComparison]:
    prefix = status.value
    if status is ComparisonStatus.REMOVED:
        return [
            BulletComparison(original=b, modified=None, status=status, id=f"{prefix}-bullet-{i}")
            for i, b in enumerate(entry.bullets)
        ]
    return [
        BulletComparison(original=None, modified=b, status=status, id=f"{prefix}-bullet-{i}")
        for i, b in enumerate(entry.bullets)
    ]


def compare_experiences(
    original: Sequence[ExperienceEntry] | None,
    modified: Sequence[ExperienceEntry] | None,
    alignment: AlignmentPolicy | None = None,
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> ExperiencesComparison:
    """
    Compare experience entries with their nested bullets.

    Args:
        original: Original entries
        modified: Modified entries
        alignment: Policy pairing entries (defaults to identifier alignment
            with company/title similarity fallback)
        threshold: Similarity threshold for bullet matching

    Returns:
        ExperiencesComparison with entry counters and bullet counters
    """
    original = list(original or [])
    modified = list(modified or [])
    alignment = alignment or default_experience_alignment()

    pairs = alignment.align(original, modified)
    logger.debug("Aligned %d of %d original experiences", len(pairs), len(original))

    paired_original = {i for i, _ in pairs}
    paired_modified = {j for _, j in pairs}
    items: list[ExperienceComparison] = []
    seen_ids: set[str] = set()

    for original_index, modified_index in pairs:
        orig_exp = original[original_index]
        mod_exp = modified[modified_index]
        bullets, bullet_stats = compare_bullets(orig_exp.bullets, mod_exp.bullets, threshold)

        title_diff = _field_diff(orig_exp.title, mod_exp.title)
        company_diff = _field_diff(orig_exp.company, mod_exp.company)
        changed = (
            title_diff is not None or company_diff is not None or bullet_stats.has_changes
        )

        items.append(
            ExperienceComparison(
                id=_unique_id(orig_exp.id or mod_exp.id, f"experience-{original_index}", seen_ids),
                status=ComparisonStatus.MODIFIED if changed else ComparisonStatus.UNCHANGED,
                original=orig_exp,
                modified=mod_exp,
                title_diff=title_diff,
                company_diff=company_diff,
                bullets=tuple(bullets),
                bullet_stats=bullet_stats,
            )
        )

    for original_index, orig_exp in enumerate(original):
        if original_index in paired_original:
            continue
        items.append(
            ExperienceComparison(
                id=_unique_id(orig_exp.id, f"experience-{original_index}", seen_ids),
                status=ComparisonStatus.REMOVED,
                original=orig_exp,
                bullets=tuple(_one_sided_bullets(orig_exp, ComparisonStatus.REMOVED)),
                bullet_stats=ChangeStats(removed=len(orig_exp.bullets)),
            )
        )

    for modified_index, mod_exp in enumerate(modified):
        if modified_index in paired_modified:
            continue
        items.append(
            ExperienceComparison(
                id=_unique_id(mod_exp.id, f"new-experience-{modified_index}", seen_ids),
                status=ComparisonStatus.ADDED,
                modified=mod_exp,
                bullets=tuple(_one_sided_bullets(mod_exp, ComparisonStatus.ADDED)),
                bullet_stats=ChangeStats(added=len(mod_exp.bullets)),
            )
        )

    bullet_stats = ChangeStats()
    for item in items:
        bullet_stats = bullet_stats + item.bullet_stats

    return ExperiencesComparison(
        items=tuple(items),
        change_stats=ChangeStats.from_statuses(item.status for item in items),
        bullet_stats=bullet_stats,
    )


def compare_education(
    original: Sequence[EducationEntry] | None,
    modified: Sequence[EducationEntry] | None,
    alignment: AlignmentPolicy | None = None,
) -> EducationSectionComparison:
    """
    Compare education entries on degree, institution and field of study.

    Args:
        original: Original entries
        modified: Modified entries
        alignment: Policy pairing entries (defaults to identifier alignment
            with institution/degree similarity fallback)

    Returns:
        EducationSectionComparison
    """
    original = list(original or [])
    modified = list(modified or [])
    alignment = alignment or default_education_alignment()

    pairs = alignment.align(original, modified)
    logger.debug("Aligned %d of %d original education entries", len(pairs), len(original))

    paired_original = {i for i, _ in pairs}
    paired_modified = {j for _, j in pairs}
    items: list[EducationComparison] = []
    seen_ids: set[str] = set()

    for original_index, modified_index in pairs:
        orig_edu = original[original_index]
        mod_edu = modified[modified_index]
        degree_diff = _field_diff(orig_edu.degree, mod_edu.degree)
        institution_diff = _field_diff(orig_edu.institution, mod_edu.institution)
        field_diff = _field_diff(orig_edu.field, mod_edu.field)
        changed = any(d is not None for d in (degree_diff, institution_diff, field_diff))

        items.append(
            EducationComparison(
                id=_unique_id(orig_edu.id or mod_edu.id, f"education-{original_index}", seen_ids),
                status=ComparisonStatus.MODIFIED if changed else ComparisonStatus.UNCHANGED,
                original=orig_edu,
                modified=mod_edu,
                degree_diff=degree_diff,
                institution_diff=institution_diff,
                field_diff=field_diff,
            )
        )

    for original_index, orig_edu in enumerate(original):
        if original_index not in paired_original:
            items.append(
                EducationComparison(
                    id=_unique_id(orig_edu.id, f"education-{original_index}", seen_ids),
                    status=ComparisonStatus.REMOVED,
                    original=orig_edu,
                )
            )

    for modified_index, mod_edu in enumerate(modified):
        if modified_index not in paired_modified:
            items.append(
                EducationComparison(
                    id=_unique_id(mod_edu.id, f"new-education-{modified_index}", seen_ids),
                    status=ComparisonStatus.ADDED,
                    modified=mod_edu,
                )
            )

    return EducationSectionComparison(
        items=tuple(items),
        change_stats=ChangeStats.from_statuses(item.status for item in items),
    )
