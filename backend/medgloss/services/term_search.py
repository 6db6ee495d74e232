"""
Term Search and Lookup Service.

Relevance-ranked search over the glossary plus the read-only lookups the
API exposes: single term, related terms, terms by specialty and corpus
statistics.
"""

import logging
from collections import Counter
from typing import Any, Dict, List, Optional

from medgloss.schemas.glossary import Corpus, TermRecord
from medgloss.services.errors import TermNotFound

logger = logging.getLogger(__name__)

RELATED_DEFINITION_CHARS = 150
TOP_TAGS = 20
# Stats bucket for terms without a difficulty
UNSPECIFIED_DIFFICULTY = "unspecified"


def get_term(corpus: Corpus, term_id: str) -> TermRecord:
    """Get a term by id or raise TermNotFound."""
    term = corpus.get(term_id)
    if term is None:
        raise TermNotFound(term_id)
    return term


def relevance_score(term: TermRecord, query: str) -> int:
    """
    Additive relevance flags on the term field (case-insensitive):
    exact match +3, prefix +2, substring +1. An exact match scores 6.
    """
    name = term.term.lower()
    q = query.lower()
    score = 0
    if name == q:
        score += 3
    if name.startswith(q):
        score += 2
    if q in name:
        score += 1
    return score


def _summary(term: TermRecord, language: str) -> Dict[str, Any]:
    summary = {
        "id": term.id,
        "term": term.term,
        "full_name": term.full_name,
        "definition": term.definition,
        "pronunciation": term.pronunciation,
        "specialty": list(term.specialty),
        "difficulty": term.difficulty,
    }
    if language != "en":
        summary["translation"] = term.translation(language)
    return summary


def search_terms(
    corpus: Corpus,
    query: str,
    language: str = "en",
    specialty: Optional[str] = None,
    difficulty: Optional[str] = None,
    limit: int = 50,
) -> List[Dict[str, Any]]:
    """
    Search terms whose term, full name or definition contains the query.

    Results are ordered by relevance_score, ties keep corpus order.
    """
    q = query.lower()

    results = [
        t for t in corpus.terms
        if q in t.term.lower() or q in t.full_name.lower() or q in t.definition.lower()
    ]

    if specialty:
        results = [t for t in results if specialty in t.specialty]
    if difficulty:
        results = [t for t in results if t.difficulty == difficulty]

    results.sort(key=lambda t: relevance_score(t, query), reverse=True)

    return [_summary(t, language) for t in results[:max(limit, 0)]]


def get_related_terms(corpus: Corpus, term_id: str, limit: int = 5) -> List[Dict[str, Any]]:
    """
    Summaries of a term's related terms, in the order the term lists them.
    Ids missing from the corpus are skipped.
    """
    term = get_term(corpus, term_id)

    related = [corpus.get(rid) for rid in term.related_terms]
    related = [t for t in related if t is not None][:max(limit, 0)]

    summaries = []
    for t in related:
        definition = t.definition
        if len(definition) > RELATED_DEFINITION_CHARS:
            definition = definition[:RELATED_DEFINITION_CHARS] + "..."
        summaries.append({
            "id": t.id,
            "term": t.term,
            "full_name": t.full_name,
            "definition": definition,
            "specialty": list(t.specialty),
        })
    return summaries


def get_terms_by_specialty(
    corpus: Corpus,
    specialty: str,
    difficulty: Optional[str] = None,
    limit: int = 100,
) -> List[Dict[str, Any]]:
    terms = [t for t in corpus.terms if specialty in t.specialty]
    if difficulty:
        terms = [t for t in terms if t.difficulty == difficulty]

    return [
        {
            "id": t.id,
            "term": t.term,
            "full_name": t.full_name,
            "definition": t.definition,
            "difficulty": t.difficulty,
            "tags": list(t.tags),
        }
        for t in terms[:max(limit, 0)]
    ]


def get_glossary_stats(corpus: Corpus) -> Dict[str, Any]:
    """Aggregate counts by specialty, difficulty and tag."""
    specialty_counts: Counter = Counter()
    difficulty_counts: Counter = Counter()
    tag_counts: Counter = Counter()

    for term in corpus.terms:
        specialty_counts.update(term.specialty)
        difficulty_counts[term.difficulty or UNSPECIFIED_DIFFICULTY] += 1
        tag_counts.update(term.tags)

    return {
        "total_terms": len(corpus.terms),
        "languages": len(corpus.metadata.languages),
        "specialties": len(specialty_counts),
        "quiz_eligible": sum(1 for t in corpus.terms if t.quiz_eligible),
        "common_in_cases": sum(1 for t in corpus.terms if t.common_in_cases),
        "by_specialty": dict(specialty_counts),
        "by_difficulty": dict(difficulty_counts),
        "top_tags": [
            {"tag": tag, "count": count}
            for tag, count in tag_counts.most_common(TOP_TAGS)
        ],
    }
