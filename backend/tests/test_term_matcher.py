"""
Tests for the term matcher (auto-linking glossary terms in case text).
"""

import pytest
from medgloss.services.term_matcher import auto_link


def _spans(result):
    return [(link.term_id, link.start, link.end) for link in result.links]


class TestAutoLink:
    """Longest match, whole-word boundaries and overlap rules"""

    @pytest.mark.unit
    def test_longest_term_wins(self, sample_corpus):
        """'atrial fibrillation' must be one span, not also 'fibrillation'"""
        text = "ECG showed atrial fibrillation at 140 bpm."
        result = auto_link(sample_corpus, text)

        assert _spans(result) == [("af", 11, 30)]
        assert text[11:30] == "atrial fibrillation"

    @pytest.mark.unit
    def test_shorter_term_matches_elsewhere(self, sample_corpus):
        """'fibrillation' still links where it stands alone"""
        text = "Atrial fibrillation can degenerate; ventricular fibrillation is lethal."
        result = auto_link(sample_corpus, text)

        ids = [link.term_id for link in result.links]
        assert ids == ["af", "fibrillation"]
        fib = result.links[1]
        assert text[fib.start:fib.end] == "fibrillation"

    @pytest.mark.unit
    def test_trailing_letter_is_not_a_match(self, sample_corpus):
        result = auto_link(sample_corpus, "Multiple fibrillations were recorded.")
        assert result.linked_count == 0
        assert result.links == []

    @pytest.mark.unit
    def test_leading_letter_is_not_a_match(self, sample_corpus):
        result = auto_link(sample_corpus, "The MIDDLE lobe and AMI were noted.")
        assert result.linked_count == 0

    @pytest.mark.unit
    def test_accented_letters_are_word_characters(self, sample_corpus):
        assert auto_link(sample_corpus, "MIé and éMI").linked_count == 0
        assert _spans(auto_link(sample_corpus, "MI é")) == [("mi", 0, 2)]

    @pytest.mark.unit
    def test_case_insensitive_with_original_offsets(self, sample_corpus):
        text = "History of mi. Now COPD exacerbation."
        result = auto_link(sample_corpus, text)

        assert [text[l.start:l.end] for l in result.links] == ["mi", "COPD"]
        assert result.original_text == text

    @pytest.mark.unit
    def test_punctuation_and_text_edges_are_boundaries(self, sample_corpus):
        text = "MI(acute),sepsis"
        result = auto_link(sample_corpus, text)
        assert _spans(result) == [("mi", 0, 2), ("sepsis", 10, 16)]

    @pytest.mark.unit
    def test_every_occurrence_is_linked(self, sample_corpus):
        text = "COPD patients; COPD exacerbation; copd clinic"
        result = auto_link(sample_corpus, text)
        assert [l.start for l in result.links] == [0, 15, 34]
        assert result.linked_count == 3

    @pytest.mark.unit
    def test_only_common_in_cases_terms_link(self, sample_corpus):
        """FEV1 is not flagged common_in_cases"""
        result = auto_link(sample_corpus, "FEV1 was 40 percent.")
        assert result.links == []

    @pytest.mark.unit
    def test_spans_sorted_and_non_overlapping(self, sample_corpus):
        text = ("Sepsis with STEMI and troponin rise; atrial fibrillation then "
                "fibrillation, MI and PRN analgesia, COPD history, sepsis again.")
        result = auto_link(sample_corpus, text)

        starts = [l.start for l in result.links]
        assert starts == sorted(starts)
        for a, b in zip(result.links, result.links[1:]):
            assert a.end <= b.start
        assert result.linked_count == len(result.links) == 9

    @pytest.mark.unit
    def test_adjacent_overlapping_candidates_rejected(self, term_factory, corpus_factory):
        """A shorter term overlapping an accepted longer span is dropped"""
        corpus = corpus_factory(
            term_factory("heart_failure", "heart failure"),
            term_factory("failure_rate", "failure rate"),
        )
        result = auto_link(corpus, "heart failure rate")
        assert _spans(result) == [("heart_failure", 0, 13)]

    @pytest.mark.unit
    def test_span_carries_term_details(self, sample_corpus):
        link = auto_link(sample_corpus, "Acute STEMI.").links[0]
        assert link.term == "STEMI"
        assert link.definition == "Infarction with ST elevation on the ECG"
        assert link.pronunciation == "STEM-ee"
        assert link.translation is None

    @pytest.mark.unit
    def test_translation_for_non_english(self, sample_corpus):
        result = auto_link(sample_corpus, "Prior MI.", language="es")
        assert result.links[0].translation == "Ataque al corazón"

    @pytest.mark.unit
    def test_regex_characters_in_terms_are_literal(self, term_factory, corpus_factory):
        corpus = corpus_factory(term_factory("ca", "Ca++"), term_factory("c", "C.diff"))
        text = "Serum Ca++ low, stool C.diff positive, Cxdiff not a term."
        result = auto_link(corpus, text)
        assert [text[l.start:l.end] for l in result.links] == ["Ca++", "C.diff"]

    @pytest.mark.unit
    def test_empty_text(self, sample_corpus):
        result = auto_link(sample_corpus, "")
        assert result.linked_count == 0
