"""
Storage layer for exporting comparison reports.

Provides an abstract interface for storage backends and a file-based
implementation for CSV and JSON export.
"""

import csv
import json
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path

from .models import CVComparisonResult, DiffType, WordDiffResult


class StorageError(Exception):
    """Base exception for storage errors."""

    pass


class Storage(ABC):
    """
    Abstract interface for storage backends.

    The engine never persists anything itself; callers pick a backend.
    """

    @abstractmethod
    def save(
        self,
        result: CVComparisonResult,
        format: str = "json",
        output_path: str | None = None,
    ) -> str:
        """
        Save a comparison report.

        Args:
            result: CVComparisonResult to save
            format: Output format ('csv' or 'json')
            output_path: Optional output file path. If not provided, generates one.

        Returns:
            Path to the saved file (for file storage) or identifier (for database)

        Raises:
            StorageError: If save operation fails
        """
        pass


def render_diff(diff: WordDiffResult | None) -> str:
    """
    Render a diff inline as plain text.

    Removed runs are wrapped in [- -], added runs in {+ +}.
    """
    if diff is None:
        return ""
    parts = []
    for segment in diff.segments:
        if segment.type is DiffType.REMOVED:
            parts.append(f"[-{segment.value}-]")
        elif segment.type is DiffType.ADDED:
            parts.append(f"{{+{segment.value}+}}")
        else:
            parts.append(segment.value)
    return "".join(parts)


class FileStorage(Storage):
    """
    File-based storage implementation.

    Exports comparison reports to CSV or JSON files.
    """

    def __init__(self, output_directory: str = "."):
        """
        Initialize file storage.

        Args:
            output_directory: Directory to save output files (default: current directory)
        """
        self.output_directory = Path(output_directory)
        self.output_directory.mkdir(parents=True, exist_ok=True)

    def save(
        self,
        result: CVComparisonResult,
        format: str = "json",
        output_path: str | None = None,
    ) -> str:
        """
        Save a comparison report to file.

        Args:
            result: CVComparisonResult to save
            format: Output format ('csv' or 'json')
            output_path: Optional output file path. If not provided, generates one.

        Returns:
            Path to the saved file

        Raises:
            StorageError: If save operation fails
        """
        format_lower = format.lower()

        if format_lower not in ("csv", "json"):
            raise StorageError(f"Unsupported format: {format}. Use 'csv' or 'json'.")

        generated_at = datetime.now()

        if output_path is None:
            timestamp = generated_at.strftime("%Y%m%d_%H%M%S")
            output_path = f"cv_comparison_{timestamp}.{format_lower}"

        output_file_path = self.output_directory / output_path

        try:
            if format_lower == "csv":
                self._save_csv(result, output_file_path, generated_at)
            else:
                self._save_json(result, output_file_path, generated_at)
        except OSError as e:
            raise StorageError(f"Failed to save results: {e}") from e

        return str(output_file_path)

    def _rows(self, result: CVComparisonResult) -> list[dict]:
        """One row per compared item, bullets included."""
        rows: list[dict] = []

        if result.summary:
            item = result.summary.item
            rows.append(
                {
                    "Section": "summary",
                    "Item": "summary",
                    "Status": item.status.value,
                    "Original": item.original or "",
                    "Modified": item.modified or "",
                    "Diff": render_diff(item.diff),
                }
            )

        if result.experiences:
            for experience in result.experiences.items:
                rows.append(
                    {
                        "Section": "experiences",
                        "Item": experience.id,
                        "Status": experience.status.value,
                        "Original": _entry_label(experience.original),
                        "Modified": _entry_label(experience.modified),
                        "Diff": render_diff(experience.title_diff),
                    }
                )
                for bullet in experience.bullets:
                    rows.append(
                        {
                            "Section": "experiences.bullets",
                            "Item": f"{experience.id}/{bullet.id}",
                            "Status": bullet.status.value,
                            "Original": bullet.original or "",
                            "Modified": bullet.modified or "",
                            "Diff": render_diff(bullet.diff),
                        }
                    )

        if result.education:
            for education in result.education.items:
                rows.append(
                    {
                        "Section": "education",
                        "Item": education.id,
                        "Status": education.status.value,
                        "Original": _education_label(education.original),
                        "Modified": _education_label(education.modified),
                        "Diff": render_diff(education.degree_diff),
                    }
                )

        if result.skills:
            for skill in result.skills.items:
                rows.append(
                    {
                        "Section": "skills",
                        "Item": skill.name,
                        "Status": skill.status.value,
                        "Original": "",
                        "Modified": "",
                        "Diff": "",
                    }
                )

        return rows

    def _save_csv(self, result: CVComparisonResult, output_path: Path, generated_at: datetime):
        """
        Save the report to CSV format.

        A commented header carries the totals; then one row per item.

        Args:
            result: CVComparisonResult to save
            output_path: Path to save CSV file
            generated_at: Report timestamp
        """
        totals = result.total_stats
        with open(output_path, "w", newline="", encoding="utf-8") as csvfile:
            csvfile.write("# CV Comparison Report\n")
            csvfile.write(f"# Generated: {generated_at.isoformat()}\n")
            csvfile.write(f"# Sections Changed: {result.sections_changed}\n")
            csvfile.write(f"# Added: {totals.added}\n")
            csvfile.write(f"# Removed: {totals.removed}\n")
            csvfile.write(f"# Modified: {totals.modified}\n")
            csvfile.write("\n")

            fieldnames = ["Section", "Item", "Status", "Original", "Modified", "Diff"]
            writer = csv.DictWriter(csvfile, fieldnames=fieldnames)
            writer.writeheader()
            for row in self._rows(result):
                writer.writerow(row)

    def _save_json(self, result: CVComparisonResult, output_path: Path, generated_at: datetime):
        """
        Save the report to JSON format.

        Args:
            result: CVComparisonResult to save
            output_path: Path to save JSON file
            generated_at: Report timestamp
        """
        data = {
            "metadata": {
                "generated_at": generated_at.isoformat(),
                "sections_changed": result.sections_changed,
                "has_any_changes": result.has_any_changes,
            },
            "comparison": result.to_dict(),
        }

        with open(output_path, "w", encoding="utf-8") as jsonfile:
            json.dump(data, jsonfile, indent=2, ensure_ascii=False)


def _entry_label(entry) -> str:
    if entry is None:
        return ""
    if entry.company:
        return f"{entry.title} @ {entry.company}"
    return entry.title


def _education_label(entry) -> str:
    if entry is None:
        return ""
    if entry.institution:
        return f"{entry.degree} @ {entry.institution}"
    return entry.degree
