"""
Term Matcher - finds glossary terms in clinical text for tooltip annotation.

Longer terms claim text first, so "atrial fibrillation" wins over
"fibrillation" inside the same phrase. Matches must sit on whole-word
boundaries and never overlap.

Cost is O(terms x text length) per call, fine for single case narratives.
Bulk indexing would want an Aho-Corasick automaton instead.
"""

import logging
import re
from typing import List

from medgloss.schemas.glossary import AnnotationSpan, AutoLinkResult, Corpus, TermRecord

logger = logging.getLogger(__name__)

_NON_WORD = re.compile(r"\W")


def _is_boundary(text: str, index: int) -> bool:
    """True when text[index] is outside the text or a non-word character."""
    if index < 0 or index >= len(text):
        return True
    return _NON_WORD.match(text[index]) is not None


def _overlaps(start: int, end: int, spans: List[AnnotationSpan]) -> bool:
    return any(start < span.end and span.start < end for span in spans)


def _linkable_terms(corpus: Corpus) -> List[TermRecord]:
    # sorted() is stable: equal-length terms keep corpus order
    candidates = [t for t in corpus.terms if t.common_in_cases]
    return sorted(candidates, key=lambda t: len(t.term), reverse=True)


def auto_link(
    corpus: Corpus,
    text: str,
    language: str = "en",
    include_common: bool = True,
) -> AutoLinkResult:
    """
    Locate every non-overlapping whole-word occurrence of a linkable term.

    Args:
        corpus: Loaded glossary
        text: Free clinical text
        language: Adds the translated definition when not "en"
        include_common: Accepted for API compatibility; the candidate set is
            always the common_in_cases terms

    Returns:
        AutoLinkResult with spans sorted by start offset
    """
    links: List[AnnotationSpan] = []

    for term in _linkable_terms(corpus):
        pattern = re.compile(re.escape(term.term), re.IGNORECASE)
        pos = 0
        while True:
            match = pattern.search(text, pos)
            if match is None:
                break
            start, end = match.start(), match.end()
            pos = start + 1

            if not (_is_boundary(text, start - 1) and _is_boundary(text, end)):
                continue
            if _overlaps(start, end, links):
                continue

            links.append(AnnotationSpan(
                term_id=term.id,
                term=term.term,
                start=start,
                end=end,
                definition=term.definition,
                pronunciation=term.pronunciation,
                translation=term.translation(language),
            ))

    links.sort(key=lambda span: span.start)
    logger.debug(f"Auto-linked {len(links)} terms in {len(text)} characters")

    return AutoLinkResult(
        original_text=text,
        linked_count=len(links),
        links=links,
    )
