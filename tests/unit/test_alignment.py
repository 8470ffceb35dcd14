"""
Unit tests for entry alignment policies.
"""

import pytest

from cvdiff.alignment import (
    FieldContainmentAlignment,
    IdentifierAlignment,
    PositionalAlignment,
    SimilarityAlignment,
    alignment_from_name,
    contains_match,
    default_education_alignment,
    jaccard_similarity,
    normalize_text,
)
from cvdiff.models import EducationEntry, ExperienceEntry


class TestTextHelpers:
    """Tests for normalization helpers."""

    def test_normalize_strips_accents_and_punctuation(self):
        """Test accent and punctuation removal."""
        assert normalize_text("Société Générale, S.A.") == "societegeneralesa"
        assert normalize_text(None) == ""

    def test_contains_match(self):
        """Test containment in either direction."""
        assert contains_match("Google", "Google LLC")
        assert contains_match("Google LLC", "google")
        assert not contains_match("Google", "Alphabet")
        assert not contains_match("", "Google")

    def test_jaccard_similarity(self):
        """Test word-set Jaccard similarity."""
        assert jaccard_similarity("data platform team", "platform team") == pytest.approx(2 / 3)
        assert jaccard_similarity("a b", "b c") == pytest.approx(1 / 3)
        assert jaccard_similarity("", "b c") == 0.0


class TestPositionalAlignment:
    """Tests for PositionalAlignment."""

    def test_pairs_by_index(self):
        """Test that the k-th entries are paired."""
        pairs = PositionalAlignment().align(["a", "b", "c"], ["x", "y"])
        assert pairs == [(0, 0), (1, 1)]

    def test_empty(self):
        """Test that nothing pairs with an empty list."""
        assert PositionalAlignment().align([], ["x"]) == []


class TestSimilarityAlignment:
    """Tests for SimilarityAlignment."""

    def test_exact_then_fuzzy_company(self):
        """Test exact company matching followed by containment."""
        original = [
            ExperienceEntry(title="Engineer", company="Acme"),
            ExperienceEntry(title="Manager", company="Globex"),
        ]
        modified = [
            ExperienceEntry(title="Manager", company="Globex Corp"),
            ExperienceEntry(title="Senior Engineer", company="ACME"),
        ]

        assert SimilarityAlignment().align(original, modified) == [(0, 1), (1, 0)]

    def test_title_containment(self):
        """Test that titles pair entries when companies differ."""
        original = [ExperienceEntry(title="Data Scientist", company="Initech")]
        modified = [
            ExperienceEntry(title="Barista", company="Coffee Co"),
            ExperienceEntry(title="Senior Data Scientist", company="Initrode"),
        ]

        assert SimilarityAlignment().align(original, modified) == [(0, 1)]

    def test_combined_word_similarity(self):
        """Test pairing on combined company and title word overlap."""
        original = [ExperienceEntry(title="Backend Engineer", company="Blue Sky Labs")]
        modified = [
            ExperienceEntry(title="Chef", company="Red Kitchen"),
            ExperienceEntry(title="Senior Software Engineer, Backend", company="Blue Sky Research"),
        ]

        assert SimilarityAlignment().align(original, modified) == [(0, 1)]

    def test_position_fallback_for_equal_lengths(self):
        """Test that unrelated entries pair by position when counts match."""
        original = [
            ExperienceEntry(title="Cook", company="Diner"),
            ExperienceEntry(title="Pilot", company="Airline"),
        ]
        modified = [
            ExperienceEntry(title="Nurse", company="Hospital"),
            ExperienceEntry(title="Librarian", company="Library"),
        ]

        assert SimilarityAlignment().align(original, modified) == [(0, 0), (1, 1)]

    def test_order_fallback_for_unequal_lengths(self):
        """Test that leftovers are paired in order."""
        original = [ExperienceEntry(title="Cook", company="Diner")]
        modified = [
            ExperienceEntry(title="Nurse", company="Hospital"),
            ExperienceEntry(title="Librarian", company="Library"),
        ]

        assert SimilarityAlignment().align(original, modified) == [(0, 0)]

    def test_each_index_used_once(self):
        """Test that a modified entry is never paired twice."""
        original = [
            ExperienceEntry(title="Engineer", company="Acme"),
            ExperienceEntry(title="Intern", company="Acme"),
        ]
        modified = [ExperienceEntry(title="Engineer", company="Acme")]

        pairs = SimilarityAlignment().align(original, modified)
        assert pairs == [(0, 0)]

    def test_education_fields(self):
        """Test pairing education entries on institution and degree."""
        original = [
            EducationEntry(degree="BSc", institution="MIT"),
            EducationEntry(degree="MSc", institution="Stanford University"),
        ]
        modified = [
            EducationEntry(degree="Master of Science", institution="Stanford"),
            EducationEntry(degree="BSc Computer Science", institution="MIT"),
        ]

        policy = SimilarityAlignment("institution", "degree")
        assert policy.align(original, modified) == [(0, 1), (1, 0)]


class TestFieldContainmentAlignment:
    """Tests for FieldContainmentAlignment."""

    def test_institution_or_degree_in_one_pass(self):
        """Test that the first entry matching either field is taken."""
        original = [
            EducationEntry(degree="MBA", institution="Wharton"),
            EducationEntry(degree="BSc", institution="Penn"),
        ]
        modified = [EducationEntry(degree="MBA", institution="Penn")]

        policy = FieldContainmentAlignment(("institution", "degree"))
        assert policy.align(original, modified) == [(0, 0)]

    def test_differs_from_exact_institution_pass(self):
        """Test that a degree match is not pre-empted by an exact institution match."""
        original = [
            EducationEntry(degree="MBA", institution="Wharton"),
            EducationEntry(degree="BSc", institution="Penn"),
        ]
        modified = [EducationEntry(degree="MBA", institution="Penn")]

        assert SimilarityAlignment("institution", "degree").align(original, modified) == [(1, 0)]

    def test_containment_on_institution(self):
        """Test that shortened institution names still pair."""
        original = [
            EducationEntry(degree="BSc", institution="MIT"),
            EducationEntry(degree="MSc", institution="Stanford University"),
        ]
        modified = [
            EducationEntry(degree="Master of Science", institution="Stanford"),
            EducationEntry(degree="Bachelor", institution="MIT"),
        ]

        assert FieldContainmentAlignment().align(original, modified) == [(0, 1), (1, 0)]

    def test_position_fallback_for_equal_lengths(self):
        """Test that unrelated entries pair by position when counts match."""
        original = [
            EducationEntry(degree="BA", institution="Oxford"),
            EducationEntry(degree="PhD", institution="Yale"),
        ]
        modified = [
            EducationEntry(degree="MD", institution="Harvard"),
            EducationEntry(degree="JD", institution="Columbia"),
        ]

        assert FieldContainmentAlignment().align(original, modified) == [(0, 0), (1, 1)]

    def test_order_fallback_for_unequal_lengths(self):
        """Test that leftovers are paired in order."""
        original = [EducationEntry(degree="BA", institution="Oxford")]
        modified = [
            EducationEntry(degree="MD", institution="Harvard"),
            EducationEntry(degree="JD", institution="Columbia"),
        ]

        assert FieldContainmentAlignment().align(original, modified) == [(0, 0)]


class TestIdentifierAlignment:
    """Tests for IdentifierAlignment."""

    def test_pairs_shared_ids(self):
        """Test that entries with the same id are paired."""
        original = [ExperienceEntry(id="a"), ExperienceEntry(id="b")]
        modified = [ExperienceEntry(id="b"), ExperienceEntry(id="c")]

        assert IdentifierAlignment().align(original, modified) == [(1, 0)]

    def test_empty_ids_never_pair(self):
        """Test that blank identifiers are ignored."""
        original = [ExperienceEntry(id="")]
        modified = [ExperienceEntry(id="")]

        assert IdentifierAlignment().align(original, modified) == []

    def test_fallback_for_unpaired(self):
        """Test that leftovers are handed to the fallback policy."""
        original = [ExperienceEntry(id="a"), ExperienceEntry(id="x")]
        modified = [ExperienceEntry(id="y"), ExperienceEntry(id="a")]

        policy = IdentifierAlignment(fallback=PositionalAlignment())
        assert policy.align(original, modified) == [(0, 1), (1, 0)]


class TestAlignmentFromName:
    """Tests for alignment_from_name factory."""

    def test_known_names(self):
        """Test that every short name builds a policy."""
        assert isinstance(alignment_from_name("position"), PositionalAlignment)
        assert isinstance(alignment_from_name("similarity"), SimilarityAlignment)

        policy = alignment_from_name("id")
        assert isinstance(policy, IdentifierAlignment)
        assert policy.fallback is None

    def test_auto_uses_section_fields(self):
        """Test that auto picks a policy per section."""
        experiences = alignment_from_name("auto", "experiences")
        assert experiences.fallback.primary_field == "company"
        assert experiences.fallback.secondary_field == "title"

        education = alignment_from_name("auto", "education")
        assert isinstance(education, IdentifierAlignment)
        assert isinstance(education.fallback, FieldContainmentAlignment)
        assert education.fallback.fields == ("institution", "degree")

    def test_default_education_alignment(self):
        """Test the default education policy."""
        policy = default_education_alignment()
        assert isinstance(policy.fallback, FieldContainmentAlignment)

    def test_unknown_name(self):
        """Test that unknown names are rejected."""
        with pytest.raises(ValueError, match="Unknown alignment policy"):
            alignment_from_name("hungarian")
