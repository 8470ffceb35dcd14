"""
Core data models for the CV comparison engine.

Inputs are canonical, already-normalized documents. Outputs are freshly built
value objects that the presentation layer consumes read-only.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DiffType(str, Enum):
    """Type of a run within a word-level diff."""

    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"


class ComparisonStatus(str, Enum):
    """Status assigned to every compared item."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"


class SectionType(str, Enum):
    """Top-level document sections the engine compares."""

    SUMMARY = "summary"
    EXPERIENCES = "experiences"
    EDUCATION = "education"
    SKILLS = "skills"


@dataclass(frozen=True)
class DiffSegment:
    """A contiguous run of one diff type."""

    type: DiffType
    value: str

    def to_dict(self) -> dict:
        return {"type": self.type.value, "value": self.value}


@dataclass(frozen=True)
class WordDiffResult:
    """
    Word-level difference between two strings.

    Counts are numbers of changed runs (segments), not numbers of words.
    """

    segments: tuple[DiffSegment, ...] = ()
    added_count: int = 0
    removed_count: int = 0

    @property
    def has_changes(self) -> bool:
        return self.added_count > 0 or self.removed_count > 0

    @property
    def original_text(self) -> str:
        """Rebuild the original string from unchanged and removed runs."""
        return "".join(s.value for s in self.segments if s.type is not DiffType.ADDED)

    @property
    def modified_text(self) -> str:
        """Rebuild the modified string from unchanged and added runs."""
        return "".join(s.value for s in self.segments if s.type is not DiffType.REMOVED)

    def to_dict(self) -> dict:
        return {
            "segments": [segment.to_dict() for segment in self.segments],
            "added_count": self.added_count,
            "removed_count": self.removed_count,
            "has_changes": self.has_changes,
        }


@dataclass(frozen=True)
class ChangeStats:
    """
    Counts of added, removed and modified items at any granularity.

    `unchanged` is informational and does not contribute to `has_changes`.
    """

    added: int = 0
    removed: int = 0
    modified: int = 0
    unchanged: int = 0

    def __add__(self, other: "ChangeStats") -> "ChangeStats":
        if not isinstance(other, ChangeStats):
            return NotImplemented
        return ChangeStats(
            added=self.added + other.added,
            removed=self.removed + other.removed,
            modified=self.modified + other.modified,
            unchanged=self.unchanged + other.unchanged,
        )

    @property
    def has_changes(self) -> bool:
        return self.added > 0 or self.removed > 0 or self.modified > 0

    @property
    def total_changes(self) -> int:
        return self.added + self.removed + self.modified

    @classmethod
    def from_statuses(cls, statuses) -> "ChangeStats":
        """Count an iterable of ComparisonStatus values."""
        counts = {status: 0 for status in ComparisonStatus}
        for status in statuses:
            counts[status] += 1
        return cls(
            added=counts[ComparisonStatus.ADDED],
            removed=counts[ComparisonStatus.REMOVED],
            modified=counts[ComparisonStatus.MODIFIED],
            unchanged=counts[ComparisonStatus.UNCHANGED],
        )

    def to_dict(self) -> dict:
        return {
            "added": self.added,
            "removed": self.removed,
            "modified": self.modified,
            "unchanged": self.unchanged,
        }


@dataclass(frozen=True)
class MatchRecord:
    """
    One record of a bullet alignment.

    Matched records carry both sides; removed-only records carry only the
    original side; added-only records carry only the modified side.
    """

    original_index: int | None = None
    modified_index: int | None = None
    original_value: str | None = None
    modified_value: str | None = None
    score: float = 0.0

    @property
    def is_matched(self) -> bool:
        return self.original_index is not None and self.modified_index is not None

    @property
    def is_removed(self) -> bool:
        return self.original_index is not None and self.modified_index is None

    @property
    def is_added(self) -> bool:
        return self.original_index is None and self.modified_index is not None


# ---------------------------------------------------------------------------
# Canonical input documents
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ExperienceEntry:
    """A work-experience entry with its bullets."""

    id: str = ""
    title: str = ""
    company: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    bullets: tuple[str, ...] = ()

    def __post_init__(self):
        # Accept lists from callers while keeping the entry hashable
        object.__setattr__(self, "bullets", tuple(self.bullets or ()))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "bullets": list(self.bullets),
        }


@dataclass(frozen=True)
class EducationEntry:
    """An education entry."""

    id: str = ""
    degree: str = ""
    institution: str = ""
    field: str = ""
    start_date: str = ""
    end_date: str = ""
    gpa: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "degree": self.degree,
            "institution": self.institution,
            "field": self.field,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "gpa": self.gpa,
        }


@dataclass(frozen=True)
class CVDocument:
    """
    Canonical document shape consumed by the engine.

    A section set to None is absent from the document.
    """

    summary: str | None = None
    experiences: tuple[ExperienceEntry, ...] | None = None
    education: tuple[EducationEntry, ...] | None = None
    skills: tuple[str, ...] | None = None

    def __post_init__(self):
        for name in ("experiences", "education", "skills"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value))

    def to_dict(self) -> dict:
        return {
            "summary": self.summary,
            "experiences": [e.to_dict() for e in self.experiences]
            if self.experiences is not None
            else None,
            "education": [e.to_dict() for e in self.education]
            if self.education is not None
            else None,
            "skills": list(self.skills) if self.skills is not None else None,
        }


# ---------------------------------------------------------------------------
# Comparison results
# ---------------------------------------------------------------------------


def _diff_dict(diff: WordDiffResult | None) -> dict | None:
    return diff.to_dict() if diff is not None else None


@dataclass(frozen=True)
class ItemComparison:
    """
    Comparison of a single free-text value.

    The diff is only present when both values exist and differ.
    """

    original: str | None
    modified: str | None
    status: ComparisonStatus
    diff: WordDiffResult | None = None

    def to_dict(self) -> dict:
        return {
            "original": self.original,
            "modified": self.modified,
            "status": self.status.value,
            "diff": _diff_dict(self.diff),
        }


@dataclass(frozen=True)
class BulletComparison(ItemComparison):
    """Comparison of one bullet within an experience entry."""

    id: str = ""

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["id"] = self.id
        return data


@dataclass(frozen=True)
class ExperienceComparison:
    """
    Comparison of one aligned pair of experience entries.

    `bullet_stats` counts this entry's bullets, independently of the entry's
    own status.
    """

    id: str
    status: ComparisonStatus
    original: ExperienceEntry | None = None
    modified: ExperienceEntry | None = None
    title_diff: WordDiffResult | None = None
    company_diff: WordDiffResult | None = None
    bullets: tuple[BulletComparison, ...] = ()
    bullet_stats: ChangeStats = field(default_factory=ChangeStats)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "status": self.status.value,
            "original": self.original.to_dict() if self.original else None,
            "modified": self.modified.to_dict() if self.modified else None,
            "title_diff": _diff_dict(self.title_diff),
            "company_diff": _diff_dict(self.company_diff),
            "bullets": [bullet.to_dict() for bullet in self.bullets],
            "bullet_stats": self.bullet_stats.to_dict(),
        }


@dataclass(frozen=True)
class EducationComparison:
    """Comparison of one aligned pair of education entries."""

    id: str
    status: ComparisonStatus
    original: EducationEntry | None = None
    modified: EducationEntry | None = None
    degree_diff: WordDiffResult | None = None
    institution_diff: WordDiffResult | None = None
    field_diff: WordDiffResult | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "status": self.status.value,
            "original": self.original.to_dict() if self.original else None,
            "modified": self.modified.to_dict() if self.modified else None,
            "degree_diff": _diff_dict(self.degree_diff),
            "institution_diff": _diff_dict(self.institution_diff),
            "field_diff": _diff_dict(self.field_diff),
        }


@dataclass(frozen=True)
class SkillComparison:
    """Status of one skill name."""

    name: str
    status: ComparisonStatus

    def to_dict(self) -> dict:
        return {"name": self.name, "status": self.status.value}


@dataclass(frozen=True)
class SummaryComparison:
    """Comparison of the summary section."""

    item: ItemComparison
    change_stats: ChangeStats
    section_type: SectionType = SectionType.SUMMARY

    @property
    def has_changes(self) -> bool:
        return self.change_stats.has_changes

    @property
    def diff(self) -> WordDiffResult | None:
        return self.item.diff

    def to_dict(self) -> dict:
        return {
            "section_type": self.section_type.value,
            "has_changes": self.has_changes,
            "change_stats": self.change_stats.to_dict(),
            "item": self.item.to_dict(),
        }


@dataclass(frozen=True)
class ExperiencesComparison:
    """
    Comparison of the experiences section.

    `change_stats` counts entries; `bullet_stats` sums the bullet counts of
    every entry.
    """

    items: tuple[ExperienceComparison, ...]
    change_stats: ChangeStats
    bullet_stats: ChangeStats
    section_type: SectionType = SectionType.EXPERIENCES

    @property
    def has_changes(self) -> bool:
        return self.change_stats.has_changes or self.bullet_stats.has_changes

    def get_item(self, item_id: str) -> ExperienceComparison | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def to_dict(self) -> dict:
        return {
            "section_type": self.section_type.value,
            "has_changes": self.has_changes,
            "change_stats": self.change_stats.to_dict(),
            "bullet_stats": self.bullet_stats.to_dict(),
            "items": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class EducationSectionComparison:
    """Comparison of the education section."""

    items: tuple[EducationComparison, ...]
    change_stats: ChangeStats
    section_type: SectionType = SectionType.EDUCATION

    @property
    def has_changes(self) -> bool:
        return self.change_stats.has_changes

    def get_item(self, item_id: str) -> EducationComparison | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def to_dict(self) -> dict:
        return {
            "section_type": self.section_type.value,
            "has_changes": self.has_changes,
            "change_stats": self.change_stats.to_dict(),
            "items": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class SkillsComparison:
    """Comparison of the skills section."""

    items: tuple[SkillComparison, ...]
    change_stats: ChangeStats
    section_type: SectionType = SectionType.SKILLS

    @property
    def has_changes(self) -> bool:
        return self.change_stats.has_changes

    def _names(self, status: ComparisonStatus) -> list[str]:
        return [item.name for item in self.items if item.status is status]

    @property
    def added(self) -> list[str]:
        return self._names(ComparisonStatus.ADDED)

    @property
    def removed(self) -> list[str]:
        return self._names(ComparisonStatus.REMOVED)

    @property
    def unchanged(self) -> list[str]:
        return self._names(ComparisonStatus.UNCHANGED)

    def to_dict(self) -> dict:
        return {
            "section_type": self.section_type.value,
            "has_changes": self.has_changes,
            "change_stats": self.change_stats.to_dict(),
            "items": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class CVComparisonResult:
    """
    Complete comparison of two documents.

    Sections that neither document carries are None.
    """

    summary: SummaryComparison | None = None
    experiences: ExperiencesComparison | None = None
    education: EducationSectionComparison | None = None
    skills: SkillsComparison | None = None
    total_stats: ChangeStats = field(default_factory=ChangeStats)

    @property
    def sections(self) -> list[Any]:
        """Present section comparisons in document order."""
        return [
            section
            for section in (self.summary, self.experiences, self.education, self.skills)
            if section is not None
        ]

    @property
    def sections_changed(self) -> int:
        return sum(1 for section in self.sections if section.has_changes)

    @property
    def has_any_changes(self) -> bool:
        return self.sections_changed > 0

    def section(self, section_type: SectionType | str):
        """
        Get the comparison for one section.

        Args:
            section_type: Section enum member or its string value

        Returns:
            The section comparison, or None if the section is absent or unknown
        """
        try:
            key = SectionType(section_type)
        except ValueError:
            return None
        return getattr(self, key.value)

    def to_dict(self) -> dict:
        return {
            "has_any_changes": self.has_any_changes,
            "sections_changed": self.sections_changed,
            "total_stats": self.total_stats.to_dict(),
            "summary": self.summary.to_dict() if self.summary else None,
            "experiences": self.experiences.to_dict() if self.experiences else None,
            "education": self.education.to_dict() if self.education else None,
            "skills": self.skills.to_dict() if self.skills else None,
        }
