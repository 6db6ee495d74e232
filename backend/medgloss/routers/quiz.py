"""
Glossary Quiz API Router.
Gamification mode: quiz generation, grading with XP rewards, study sets,
recommendations and quiz history.
"""

import logging
import math
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from medgloss.dependencies.glossary import get_corpus_store, get_quiz_generator, get_quiz_store
from medgloss.routers.glossary import load_corpus
from medgloss.schemas.glossary import GradingResult, Quiz, QuizOptions
from medgloss.services.corpus_store import CorpusStore
from medgloss.services.errors import QuizNotFound
from medgloss.services.grader import grade_quiz
from medgloss.services.quiz_generator import QuizGenerator
from medgloss.services.quiz_store import QuizStore
from medgloss.services.term_search import get_terms_by_specialty

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/glossary/quiz", tags=["quiz"])


# ============================================================================
# REQUEST / RESPONSE MODELS
# ============================================================================

class SubmitQuizRequest(BaseModel):
    quiz_id: Optional[str] = None
    answers: Optional[Dict[str, int]] = None  # {question_id: selected option index}
    user_id: Optional[str] = None


class StudyTermsRequest(BaseModel):
    difficulty: Optional[str] = None
    specialty: Optional[str] = None
    count: int = Field(20, ge=0, le=500)


class RecommendationsRequest(BaseModel):
    user_weak_areas: List[str] = Field(default_factory=list)
    current_difficulty: str = "intermediate"
    count: int = Field(15, ge=0, le=500)


class GenerateQuizResponse(BaseModel):
    success: bool
    quiz: Quiz


class SubmitQuizResponse(BaseModel):
    success: bool
    grading: GradingResult


# ============================================================================
# QUIZ ENDPOINTS
# ============================================================================

@router.post("/generate", response_model=GenerateQuizResponse)
async def generate_quiz(
    options: QuizOptions,
    store: CorpusStore = Depends(get_corpus_store),
    generator: QuizGenerator = Depends(get_quiz_generator),
    quiz_store: QuizStore = Depends(get_quiz_store),
):
    """
    Generate a quiz and keep its answer key for grading.
    Fewer eligible terms than requested yields a smaller quiz.
    """
    corpus = load_corpus(store)
    try:
        quiz = generator.generate(corpus, options)
        quiz_store.save_quiz(quiz)
    except Exception as e:
        logger.error(f"Quiz generation error: {e}")
        raise HTTPException(status_code=500, detail="Quiz generation failed")

    return GenerateQuizResponse(success=True, quiz=quiz)


@router.post("/submit", response_model=SubmitQuizResponse)
async def submit_quiz(
    request: SubmitQuizRequest,
    quiz_store: QuizStore = Depends(get_quiz_store),
):
    """Grade answers against the issued answer key and award XP."""
    if not request.quiz_id or request.answers is None or not request.user_id:
        raise HTTPException(
            status_code=400,
            detail="quiz_id, answers, and user_id are required"
        )

    try:
        answer_key = quiz_store.get_answer_key(request.quiz_id)
    except QuizNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    try:
        result = grade_quiz(answer_key, request.quiz_id, request.answers, request.user_id)
        quiz_store.record_attempt(result)
    except Exception as e:
        logger.error(f"Quiz grading error: {e}")
        raise HTTPException(status_code=500, detail="Quiz grading failed")

    return SubmitQuizResponse(success=True, grading=result)


@router.post("/study-terms")
async def study_terms(
    request: StudyTermsRequest,
    store: CorpusStore = Depends(get_corpus_store),
    generator: QuizGenerator = Depends(get_quiz_generator),
):
    """
    Terms to study before a quiz, one hint each. The answer is not included
    and no answer key is stored.
    """
    corpus = load_corpus(store)
    try:
        quiz = generator.generate(corpus, QuizOptions(
            count=request.count,
            difficulty=request.difficulty,
            specialty=request.specialty,
        ))
    except Exception as e:
        logger.error(f"Study terms error: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate study terms")

    terms = [
        {
            "term_id": q.term_id,
            "term": q.term,
            "difficulty": q.difficulty,
            "hint": q.hints[0] if q.hints else None,
        }
        for q in quiz.questions
    ]

    return {
        "study_set_id": quiz.quiz_id,
        "term_count": len(terms),
        "difficulty": quiz.difficulty,
        "specialty": quiz.specialty,
        "terms": terms,
    }


@router.post("/recommendations")
async def recommendations(
    request: RecommendationsRequest,
    store: CorpusStore = Depends(get_corpus_store),
    generator: QuizGenerator = Depends(get_quiz_generator),
):
    """
    Terms to practise next. Weak specialties share the count evenly;
    without weak areas a random set at the target difficulty is returned.
    """
    corpus = load_corpus(store)
    try:
        if request.user_weak_areas:
            per_specialty = math.ceil(request.count / len(request.user_weak_areas))
            recommended = []
            for specialty in request.user_weak_areas:
                recommended.extend(get_terms_by_specialty(
                    corpus,
                    specialty,
                    difficulty=request.current_difficulty,
                    limit=per_specialty,
                ))
        else:
            quiz = generator.generate(corpus, QuizOptions(
                count=request.count,
                difficulty=request.current_difficulty,
            ))
            recommended = [
                {
                    "term_id": q.term_id,
                    "term": q.term,
                    "difficulty": q.difficulty,
                    "xp_value": q.xp_value,
                }
                for q in quiz.questions
            ]
    except Exception as e:
        logger.error(f"Recommendations error: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate recommendations")

    recommended = recommended[:request.count]
    return {
        "recommendation_count": len(recommended),
        "target_difficulty": request.current_difficulty,
        "weak_areas": request.user_weak_areas,
        "recommendations": recommended,
    }


@router.get("/history/{user_id}")
async def quiz_history(
    user_id: str,
    limit: int = 20,
    quiz_store: QuizStore = Depends(get_quiz_store),
):
    """Graded attempts for a user, newest first."""
    if limit < 1 or limit > 100:
        limit = 20

    try:
        history = quiz_store.get_history(user_id, limit=limit)
    except Exception as e:
        logger.error(f"History error: {e}")
        raise HTTPException(status_code=500, detail="Failed to get quiz history")

    return {
        "user_id": user_id,
        "total_quizzes": len(history),
        "history": history,
    }
