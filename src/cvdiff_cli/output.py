"""
Terminal output formatter for CLI.

Handles all display logic - no business logic, just presentation.
"""

from cvdiff.models import (
    ChangeStats,
    ComparisonStatus,
    CVComparisonResult,
    EducationSectionComparison,
    ExperiencesComparison,
    SkillsComparison,
    SummaryComparison,
)
from cvdiff.storage import render_diff

_STATUS_MARKERS = {
    ComparisonStatus.ADDED: "+",
    ComparisonStatus.REMOVED: "-",
    ComparisonStatus.MODIFIED: "~",
    ComparisonStatus.UNCHANGED: " ",
}

# Maximum bullets shown per experience entry
MAX_BULLETS_SHOWN = 5


def _format_stats(stats: ChangeStats) -> str:
    return f"+{stats.added} / -{stats.removed} / ~{stats.modified}"


def _truncate(text: str, limit: int = 100) -> str:
    return f"{text[:limit]}..." if len(text) > limit else text


def print_comparison_summary(result: CVComparisonResult) -> None:
    """
    Print a human-readable summary of a comparison to terminal.

    Shows overall totals and per-section details for sections with changes.
    Diffs are rendered inline: [-removed-] and {+added+}.

    Args:
        result: CVComparisonResult to display
    """
    print("\n" + "=" * 80)
    print("CV COMPARISON REPORT")
    print("=" * 80)
    print(f"\nSections Compared: {len(result.sections)}")
    print(f"Sections Changed:  {result.sections_changed}")
    print(f"Total Changes:     {_format_stats(result.total_stats)}")

    if not result.has_any_changes:
        print("\n✓ No differences detected.")
        print("  The rewritten CV matches the original.\n")
        return

    if result.summary and result.summary.has_changes:
        _print_summary(result.summary)

    if result.experiences and result.experiences.has_changes:
        _print_experiences(result.experiences)

    if result.education and result.education.has_changes:
        _print_education(result.education)

    if result.skills and result.skills.has_changes:
        _print_skills(result.skills)


def _print_header(title: str, stats: ChangeStats) -> None:
    print(f"\n{'=' * 80}")
    print(f"{title} ({_format_stats(stats)})")
    print(f"{'=' * 80}\n")


def _print_summary(summary: SummaryComparison) -> None:
    _print_header("SUMMARY", summary.change_stats)
    item = summary.item
    if item.diff is not None:
        print(f"  {render_diff(item.diff)}")
    elif item.status is ComparisonStatus.ADDED:
        print(f"  + {item.modified}")
    elif item.status is ComparisonStatus.REMOVED:
        print(f"  - {item.original}")


def _print_experiences(experiences: ExperiencesComparison) -> None:
    _print_header("EXPERIENCES", experiences.change_stats)
    print(f"  Bullets: {_format_stats(experiences.bullet_stats)}\n")

    for item in experiences.items:
        if item.status is ComparisonStatus.UNCHANGED:
            continue

        entry = item.modified or item.original
        marker = _STATUS_MARKERS[item.status]
        title = render_diff(item.title_diff) if item.title_diff else entry.title
        company = render_diff(item.company_diff) if item.company_diff else entry.company
        print(f"[{marker}] {title} @ {company}")

        changed_bullets = [b for b in item.bullets if b.status is not ComparisonStatus.UNCHANGED]
        for bullet in changed_bullets[:MAX_BULLETS_SHOWN]:
            bullet_marker = _STATUS_MARKERS[bullet.status]
            if bullet.diff is not None:
                text = render_diff(bullet.diff)
            else:
                text = bullet.modified or bullet.original or ""
            print(f"    {bullet_marker} {_truncate(text)}")
        if len(changed_bullets) > MAX_BULLETS_SHOWN:
            print(f"    ... and {len(changed_bullets) - MAX_BULLETS_SHOWN} more bullets")

        print("\n" + "-" * 80 + "\n")


def _print_education(education: EducationSectionComparison) -> None:
    _print_header("EDUCATION", education.change_stats)

    for item in education.items:
        if item.status is ComparisonStatus.UNCHANGED:
            continue
        entry = item.modified or item.original
        marker = _STATUS_MARKERS[item.status]
        degree = render_diff(item.degree_diff) if item.degree_diff else entry.degree
        institution = (
            render_diff(item.institution_diff) if item.institution_diff else entry.institution
        )
        print(f"[{marker}] {degree} @ {institution}")
        if item.field_diff:
            print(f"    Field: {render_diff(item.field_diff)}")


def _print_skills(skills: SkillsComparison) -> None:
    _print_header("SKILLS", skills.change_stats)

    if skills.added:
        print(f"  Added ({len(skills.added)}):")
        for name in skills.added:
            print(f"    + {name}")
    if skills.removed:
        print(f"  Removed ({len(skills.removed)}):")
        for name in skills.removed:
            print(f"    - {name}")
