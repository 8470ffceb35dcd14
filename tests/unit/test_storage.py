"""
Unit tests for report storage.
"""

import json

import pytest

from cvdiff.comparator import compare_documents
from cvdiff.models import CVDocument, ExperienceEntry
from cvdiff.storage import FileStorage, StorageError, render_diff
from cvdiff.word_diff import diff_words


@pytest.fixture
def result():
    original = CVDocument(
        summary="Led a team of 5 engineers",
        experiences=[ExperienceEntry(id="e1", title="Engineer", company="Acme", bullets=["A b"])],
        skills=["Python"],
    )
    modified = CVDocument(
        summary="Led a team of 8 engineers and designers",
        experiences=[
            ExperienceEntry(id="e1", title="Engineer", company="Acme", bullets=["A b", "C d"])
        ],
        skills=["Python", "Go"],
    )
    return compare_documents(original, modified)


class TestRenderDiff:
    """Tests for render_diff function."""

    def test_inline_markers(self):
        """Test inline rendering of removed and added runs."""
        diff = diff_words("Led a team of 5 engineers", "Led a team of 8 engineers and designers")

        assert render_diff(diff) == "Led a team of [-5-]{+8+} engineers{+ and designers+}"

    def test_none(self):
        """Test that a missing diff renders empty."""
        assert render_diff(None) == ""


class TestFileStorage:
    """Tests for FileStorage class."""

    def test_save_json(self, tmp_path, result):
        """Test JSON export."""
        storage = FileStorage(output_directory=str(tmp_path))
        path = storage.save(result, format="json", output_path="report.json")

        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        assert "generated_at" in data["metadata"]
        assert data["metadata"]["sections_changed"] == 3
        assert data["comparison"]["total_stats"]["added"] == 4
        assert data["comparison"]["skills"]["items"][0]["name"] == "Go"

    def test_save_csv(self, tmp_path, result):
        """Test CSV export with header comments and bullet rows."""
        storage = FileStorage(output_directory=str(tmp_path))
        path = storage.save(result, format="csv", output_path="report.csv")

        content = (tmp_path / "report.csv").read_text(encoding="utf-8")

        assert path == str(tmp_path / "report.csv")
        assert content.startswith("# CV Comparison Report\n")
        assert "Section,Item,Status,Original,Modified,Diff" in content
        assert "experiences.bullets,e1/bullet-1,added" in content
        assert "skills,Go,added" in content
        assert "[-5-]{+8+}" in content

    def test_default_filename(self, tmp_path, result):
        """Test that a timestamped filename is generated."""
        storage = FileStorage(output_directory=str(tmp_path / "reports"))
        path = storage.save(result)

        assert (tmp_path / "reports").is_dir()
        assert path.endswith(".json")
        assert "cv_comparison_" in path

    def test_unsupported_format(self, tmp_path, result):
        """Test that unknown formats are rejected."""
        storage = FileStorage(output_directory=str(tmp_path))

        with pytest.raises(StorageError, match="Unsupported format"):
            storage.save(result, format="xml")

    def test_write_failure(self, tmp_path, result):
        """Test that OS errors are wrapped."""
        storage = FileStorage(output_directory=str(tmp_path))

        with pytest.raises(StorageError, match="Failed to save results"):
            storage.save(result, format="json", output_path="missing/report.json")
