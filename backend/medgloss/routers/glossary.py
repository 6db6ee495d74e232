"""
Glossary API Router.
Case study mode: term lookup, search, auto-linking for tooltips,
related terms and specialty listings.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from medgloss.dependencies.glossary import get_corpus_store
from medgloss.schemas.glossary import AutoLinkResult, Corpus
from medgloss.services.corpus_store import CorpusStore
from medgloss.services.errors import CorpusUnavailable, TermNotFound
from medgloss.services.term_matcher import auto_link
from medgloss.services.term_search import (
    get_glossary_stats,
    get_related_terms,
    get_term,
    get_terms_by_specialty,
    search_terms,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/glossary", tags=["glossary"])


# ============================================================================
# REQUEST MODELS
# ============================================================================

class SearchRequest(BaseModel):
    query: Optional[str] = None
    language: str = "en"
    specialty: Optional[str] = None
    difficulty: Optional[str] = None
    limit: int = Field(50, ge=1, le=500)


class AutoLinkRequest(BaseModel):
    text: Optional[str] = None
    language: str = "en"
    include_common: bool = Field(True, alias="includeCommon")

    class Config:
        populate_by_name = True


def load_corpus(store: CorpusStore) -> Corpus:
    """Load the corpus or fail the request with a generic 500."""
    try:
        return store.get()
    except CorpusUnavailable as e:
        logger.error(f"Glossary unavailable: {e}")
        raise HTTPException(status_code=500, detail="Glossary not available")


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.get("/health")
async def glossary_health():
    return {
        "status": "operational",
        "module": "glossary",
        "modes": {
            "case_tooltips": True,
            "quiz_generation": True,
            "multi_language": True,
        },
        "features": [
            "term_lookup",
            "auto_linking",
            "search",
            "quiz_generation",
            "quiz_grading",
            "xp_rewards",
            "related_terms",
        ],
    }


@router.get("/stats")
async def glossary_stats(store: CorpusStore = Depends(get_corpus_store)):
    """Aggregate counts by specialty, difficulty and tag."""
    corpus = load_corpus(store)
    try:
        return get_glossary_stats(corpus)
    except Exception as e:
        logger.error(f"Stats error: {e}")
        raise HTTPException(status_code=500, detail="Failed to get glossary statistics")


@router.get("/term/{term_id}")
async def get_term_by_id(
    term_id: str,
    language: str = "en",
    store: CorpusStore = Depends(get_corpus_store),
):
    """Full term record plus the requested translation."""
    corpus = load_corpus(store)
    try:
        term = get_term(corpus, term_id)
    except TermNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    response = term.model_dump()
    response["translation"] = term.translation(language)
    return response


@router.post("/search")
async def search(request: SearchRequest, store: CorpusStore = Depends(get_corpus_store)):
    if not request.query:
        raise HTTPException(status_code=400, detail="Query is required")

    corpus = load_corpus(store)
    try:
        results = search_terms(
            corpus,
            request.query,
            language=request.language,
            specialty=request.specialty,
            difficulty=request.difficulty,
            limit=request.limit,
        )
    except Exception as e:
        logger.error(f"Search error: {e}")
        raise HTTPException(status_code=500, detail="Search failed")

    return {
        "query": request.query,
        "result_count": len(results),
        "results": results,
    }


@router.post("/auto-link", response_model=AutoLinkResult)
async def auto_link_terms(request: AutoLinkRequest, store: CorpusStore = Depends(get_corpus_store)):
    """Locate glossary terms in case text for tooltip rendering."""
    if not request.text:
        raise HTTPException(status_code=400, detail="Text is required")

    corpus = load_corpus(store)
    try:
        return auto_link(
            corpus,
            request.text,
            language=request.language,
            include_common=request.include_common,
        )
    except Exception as e:
        logger.error(f"Auto-link error: {e}")
        raise HTTPException(status_code=500, detail="Auto-linking failed")


@router.get("/related/{term_id}")
async def related_terms(
    term_id: str,
    limit: int = 5,
    store: CorpusStore = Depends(get_corpus_store),
):
    corpus = load_corpus(store)
    try:
        related = get_related_terms(corpus, term_id, limit=limit)
    except TermNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {
        "term_id": term_id,
        "related_count": len(related),
        "related_terms": related,
    }


@router.get("/specialty/{specialty}")
async def specialty_terms(
    specialty: str,
    difficulty: Optional[str] = None,
    limit: int = 100,
    store: CorpusStore = Depends(get_corpus_store),
):
    corpus = load_corpus(store)
    try:
        terms = get_terms_by_specialty(corpus, specialty, difficulty=difficulty, limit=limit)
    except Exception as e:
        logger.error(f"Get specialty terms error: {e}")
        raise HTTPException(status_code=500, detail="Failed to get specialty terms")

    return {
        "specialty": specialty,
        "term_count": len(terms),
        "terms": terms,
    }
