"""
Adapter from raw structured snapshots to canonical documents.

Snapshots written by different versions of the rewrite pipeline use
different field names; everything is normalized here so the engine only
sees CVDocument values.
"""

import logging
import re
from typing import Any, Mapping

from .extractor import BulletExtractor
from .models import CVDocument, EducationEntry, ExperienceEntry

logger = logging.getLogger(__name__)

# Field names that may hold an experience's bullets, in priority order
BULLET_FIELDS = ("bullets", "responsibilities", "description", "achievements")

# A single entry with more bullets than this means the snapshot collapsed
# several entries into one
MAX_BULLETS_SINGLE_ENTRY = 15
MAX_BULLETS_PER_ENTRY = 20

HOBBY_PATTERNS = [
    re.compile(
        r"^(Chess|Tennis|Football|Soccer|Basketball|Golf|Running|Yoga|Swimming|Cycling|"
        r"Hiking|Skiing|Surfing|Climbing|Martial Arts|Boxing|Fitness|CrossFit|Marathon|"
        r"Triathlon)\s*[:|-]",
        re.IGNORECASE,
    ),
    re.compile(
        r"^(Cinema|Film|Movies|Photography|Painting|Drawing|Music|Guitar|Piano|Drums|"
        r"Singing|Dancing|Theater|Theatre|Acting|Writing|Poetry|Art|Design|Sculpture)\s*[:|-]",
        re.IGNORECASE,
    ),
    re.compile(r"\b(ELO|rating|ranked|competitive player|tournament)\b", re.IGNORECASE),
    re.compile(
        r"^(Hobby|Interest|Passion|Side project|Personal project|Amateur|Enthusiast)\s*[:|-]",
        re.IGNORECASE,
    ),
    re.compile(r"\b(screenplay|filmmaker|screenwriter|amateur filmmaker)\b", re.IGNORECASE),
    re.compile(r"^(Gaming|Video games|Esports|Twitch|Streaming)\s*[:|-]", re.IGNORECASE),
    re.compile(
        r"^(Travel|Cooking|Reading|Gardening|DIY|Volunteering|Charity)\s*[:|-]",
        re.IGNORECASE,
    ),
]


class DocumentConversionError(Exception):
    """Raised when a snapshot cannot be converted into a CVDocument."""

    pass


def is_hobby_bullet(bullet: str | None) -> bool:
    """Check if a bullet reads as a hobby or interest rather than work."""
    if not bullet or not isinstance(bullet, str):
        return False
    trimmed = bullet.strip()
    return any(pattern.search(trimmed) for pattern in HOBBY_PATTERNS)


def looks_corrupted(snapshot: Mapping[str, Any] | None) -> bool:
    """
    Detect snapshots whose experiences were collapsed into one entry.

    Args:
        snapshot: Raw structured snapshot

    Returns:
        True if the experience data should not be trusted
    """
    if not snapshot:
        return False
    experiences = snapshot.get("experiences") or []
    if not isinstance(experiences, list):
        return False

    bullet_counts = [len(_raw_bullets(exp)) for exp in experiences if isinstance(exp, Mapping)]
    if len(bullet_counts) == 1 and bullet_counts[0] > MAX_BULLETS_SINGLE_ENTRY:
        logger.warning(
            "Single experience with %d bullets, snapshot looks corrupted", bullet_counts[0]
        )
        return True
    if any(count > MAX_BULLETS_PER_ENTRY for count in bullet_counts):
        logger.warning(
            "Experience with more than %d bullets, snapshot looks corrupted",
            MAX_BULLETS_PER_ENTRY,
        )
        return True
    return False


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def _raw_bullets(experience: Mapping[str, Any]) -> list[str]:
    """Bullets from the first populated bullet field."""
    for field_name in BULLET_FIELDS:
        value = experience.get(field_name)
        if not value:
            continue
        if isinstance(value, str):
            return BulletExtractor().extract(value)
        if isinstance(value, list):
            return [b.strip() for b in value if isinstance(b, str) and b.strip()]
    return []


def _experience(
    raw: Mapping[str, Any], index: int, id_prefix: str, filter_hobbies: bool
) -> ExperienceEntry:
    title = _text(raw.get("title"))
    bullets = _raw_bullets(raw)
    if filter_hobbies:
        kept = [bullet for bullet in bullets if not is_hobby_bullet(bullet)]
        if len(kept) != len(bullets):
            logger.debug(
                "Experience[%d] %r: filtered %d hobby-like bullets",
                index,
                title,
                len(bullets) - len(kept),
            )
        bullets = kept

    return ExperienceEntry(
        id=_text(raw.get("id")) or f"{id_prefix}-exp-{index}",
        title=title,
        company=_text(raw.get("company")),
        location=_text(raw.get("location")),
        start_date=_text(raw.get("startDate") or raw.get("start_date")),
        end_date=_text(raw.get("endDate") or raw.get("end_date")),
        bullets=tuple(bullets),
    )


def _education(raw: Mapping[str, Any], index: int, id_prefix: str) -> EducationEntry:
    return EducationEntry(
        id=_text(raw.get("id")) or f"{id_prefix}-edu-{index}",
        degree=_text(raw.get("degree")),
        institution=_text(raw.get("institution") or raw.get("school")),
        field=_text(raw.get("field") or raw.get("fieldOfStudy")),
        start_date=_text(raw.get("startDate") or raw.get("start_date")),
        end_date=_text(raw.get("endDate") or raw.get("end_date") or raw.get("year")),
        gpa=_text(raw.get("gpa")),
    )


def _skills(raw: Any) -> tuple[str, ...] | None:
    if raw is None:
        return None
    if not isinstance(raw, list):
        raise DocumentConversionError(f"skills must be a list, got {type(raw).__name__}")
    names = []
    for skill in raw:
        name = skill.get("name") if isinstance(skill, Mapping) else skill
        name = _text(name).strip()
        if name:
            names.append(name)
    return tuple(names)


def _entries(raw: Any, section: str) -> list[Mapping[str, Any]] | None:
    if raw is None:
        return None
    if not isinstance(raw, list):
        raise DocumentConversionError(f"{section} must be a list, got {type(raw).__name__}")
    return [entry for entry in raw if isinstance(entry, Mapping)]


def document_from_snapshot(
    snapshot: Mapping[str, Any],
    id_prefix: str = "orig",
    filter_hobbies: bool = True,
    check_corruption: bool = True,
) -> CVDocument:
    """
    Convert a raw structured snapshot into a canonical document.

    Args:
        snapshot: Mapping with summary/experiences/education(s)/skills keys
        id_prefix: Prefix for generated entry ids ('<prefix>-exp-<n>')
        filter_hobbies: Drop hobby-like bullets from experiences
        check_corruption: Reject snapshots with collapsed experience data

    Returns:
        CVDocument

    Raises:
        DocumentConversionError: If the snapshot is not a mapping, has
            sections of the wrong type, or looks corrupted
    """
    if not isinstance(snapshot, Mapping):
        raise DocumentConversionError(
            f"Snapshot must be a mapping, got {type(snapshot).__name__}"
        )

    if check_corruption and looks_corrupted(snapshot):
        raise DocumentConversionError("Experience data looks corrupted")

    summary = snapshot.get("summary")
    if summary is not None and not isinstance(summary, str):
        raise DocumentConversionError(f"summary must be a string, got {type(summary).__name__}")

    raw_experiences = _entries(snapshot.get("experiences"), "experiences")
    experiences = None
    if raw_experiences is not None:
        experiences = tuple(
            _experience(raw, index, id_prefix, filter_hobbies)
            for index, raw in enumerate(raw_experiences)
        )

    education_key = "educations" if snapshot.get("educations") is not None else "education"
    raw_education = _entries(snapshot.get(education_key), education_key)
    education = None
    if raw_education is not None:
        education = tuple(
            _education(raw, index, id_prefix) for index, raw in enumerate(raw_education)
        )

    document = CVDocument(
        summary=summary,
        experiences=experiences,
        education=education,
        skills=_skills(snapshot.get("skills")),
    )

    logger.debug(
        "Converted snapshot: %d experiences, %d education, %d skills",
        len(document.experiences or ()),
        len(document.education or ()),
        len(document.skills or ()),
    )
    return document
