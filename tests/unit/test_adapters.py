"""
Unit tests for the snapshot adapter.
"""

import pytest

from cvdiff.adapters import (
    DocumentConversionError,
    document_from_snapshot,
    is_hobby_bullet,
    looks_corrupted,
)


def _experience_with_bullets(count):
    return {"title": "Engineer", "bullets": [f"Delivered project {i}" for i in range(count)]}


class TestDocumentFromSnapshot:
    """Tests for document_from_snapshot function."""

    def test_full_snapshot(self):
        """Test conversion of every section."""
        document = document_from_snapshot(
            {
                "summary": "Backend engineer",
                "experiences": [
                    {
                        "title": "Engineer",
                        "company": "Acme",
                        "location": "Berlin",
                        "startDate": "2020-01",
                        "endDate": "2023-06",
                        "bullets": ["Built APIs", "  ", 42],
                    }
                ],
                "educations": [
                    {"school": "MIT", "degree": "BSc", "fieldOfStudy": "CS", "year": 2015}
                ],
                "skills": ["Python", {"name": "Go"}, "", {"level": "expert"}],
            }
        )

        assert document.summary == "Backend engineer"

        experience = document.experiences[0]
        assert experience.id == "orig-exp-0"
        assert experience.company == "Acme"
        assert experience.start_date == "2020-01"
        assert experience.end_date == "2023-06"
        assert experience.bullets == ("Built APIs",)

        education = document.education[0]
        assert education.id == "orig-edu-0"
        assert education.institution == "MIT"
        assert education.field == "CS"
        assert education.end_date == "2015"

        assert document.skills == ("Python", "Go")

    def test_missing_sections_are_none(self):
        """Test that absent keys stay absent."""
        document = document_from_snapshot({"summary": "Engineer"})

        assert document.experiences is None
        assert document.education is None
        assert document.skills is None

    def test_existing_ids_kept(self):
        """Test that snapshot ids win over generated ones."""
        document = document_from_snapshot(
            {"experiences": [{"id": "exp-42", "title": "Engineer"}]}, id_prefix="curr"
        )
        assert document.experiences[0].id == "exp-42"

    def test_id_prefix(self):
        """Test generated ids use the given prefix."""
        document = document_from_snapshot(
            {"experiences": [{"title": "A"}, {"title": "B"}]}, id_prefix="curr"
        )
        assert [e.id for e in document.experiences] == ["curr-exp-0", "curr-exp-1"]

    def test_education_key_fallback(self):
        """Test the singular education key."""
        document = document_from_snapshot(
            {"education": [{"institution": "ETH", "degree": "MSc", "end_date": "2019"}]}
        )
        assert document.education[0].institution == "ETH"
        assert document.education[0].end_date == "2019"

    def test_description_string_is_split(self):
        """Test bullets extracted from a description string."""
        description = "• Led migration\n• Cut costs"
        document = document_from_snapshot(
            {"experiences": [{"title": "Engineer", "description": description}]}
        )
        assert document.experiences[0].bullets == ("Led migration", "Cut costs")

    def test_bullet_field_priority(self):
        """Test that the first populated bullet field is used."""
        document = document_from_snapshot(
            {
                "experiences": [
                    {
                        "bullets": [],
                        "responsibilities": ["Ran on-call"],
                        "achievements": ["Won award"],
                    }
                ]
            }
        )
        assert document.experiences[0].bullets == ("Ran on-call",)

    def test_hobby_bullets_filtered(self):
        """Test that hobby-like bullets are dropped by default."""
        snapshot = {
            "experiences": [
                {"title": "Engineer", "bullets": ["Built APIs", "Chess: club captain"]}
            ]
        }

        assert document_from_snapshot(snapshot).experiences[0].bullets == ("Built APIs",)
        kept = document_from_snapshot(snapshot, filter_hobbies=False)
        assert kept.experiences[0].bullets == ("Built APIs", "Chess: club captain")

    def test_not_a_mapping(self):
        """Test that non-mapping input is rejected."""
        with pytest.raises(DocumentConversionError, match="must be a mapping"):
            document_from_snapshot(["summary"])

    def test_wrong_section_types(self):
        """Test that sections of the wrong type are rejected."""
        with pytest.raises(DocumentConversionError, match="skills must be a list"):
            document_from_snapshot({"skills": "Python, Go"})
        with pytest.raises(DocumentConversionError, match="experiences must be a list"):
            document_from_snapshot({"experiences": {"title": "Engineer"}})
        with pytest.raises(DocumentConversionError, match="summary must be a string"):
            document_from_snapshot({"summary": 42})

    def test_corrupted_snapshot(self):
        """Test that collapsed experiences are rejected unless the check is off."""
        snapshot = {"experiences": [_experience_with_bullets(16)]}

        with pytest.raises(DocumentConversionError, match="corrupted"):
            document_from_snapshot(snapshot)

        document = document_from_snapshot(snapshot, check_corruption=False)
        assert len(document.experiences[0].bullets) == 16


class TestLooksCorrupted:
    """Tests for looks_corrupted function."""

    def test_single_entry_with_many_bullets(self):
        """Test a single entry over the single-entry limit."""
        assert looks_corrupted({"experiences": [_experience_with_bullets(16)]})
        assert not looks_corrupted({"experiences": [_experience_with_bullets(15)]})

    def test_several_entries(self):
        """Test the per-entry limit when several entries exist."""
        assert not looks_corrupted(
            {"experiences": [_experience_with_bullets(16), _experience_with_bullets(16)]}
        )
        assert looks_corrupted(
            {"experiences": [_experience_with_bullets(3), _experience_with_bullets(21)]}
        )

    def test_empty(self):
        """Test snapshots without experiences."""
        assert not looks_corrupted(None)
        assert not looks_corrupted({})
        assert not looks_corrupted({"experiences": "not a list"})


class TestIsHobbyBullet:
    """Tests for is_hobby_bullet function."""

    def test_hobby_bullets(self):
        """Test bullets that read as hobbies."""
        assert is_hobby_bullet("Chess: club captain")
        assert is_hobby_bullet("Photography - weddings and portraits")
        assert is_hobby_bullet("Wrote a screenplay for a short film")
        assert is_hobby_bullet("Travel: visited 30 countries")

    def test_work_bullets(self):
        """Test bullets that read as work."""
        assert not is_hobby_bullet("Led a team of 5 engineers")
        assert not is_hobby_bullet("Designed the billing system")
        assert not is_hobby_bullet("")
        assert not is_hobby_bullet(None)
