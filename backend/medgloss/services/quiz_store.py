"""
Quiz Store Service.

Persists the answer key of every issued quiz (keyed by quiz_id) so that
submissions are graded against the options the user actually saw, and
records grading results for quiz history.
"""

import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from medgloss.models.models import GlossaryQuiz, GlossaryQuizAttempt
from medgloss.schemas.glossary import AnswerKeyEntry, GradingResult, Quiz
from medgloss.services.errors import QuizNotFound
from medgloss.services.quiz_generator import build_answer_key

logger = logging.getLogger(__name__)


class QuizStore:
    """SQLAlchemy-backed store for issued quizzes and their attempts."""

    def __init__(self, db: Session):
        self.db = db

    def save_quiz(self, quiz: Quiz) -> GlossaryQuiz:
        answer_key = {
            question_id: entry.model_dump(mode="json")
            for question_id, entry in build_answer_key(quiz).items()
        }
        record = GlossaryQuiz(
            id=quiz.quiz_id,
            language=quiz.language,
            difficulty=quiz.difficulty,
            specialty=quiz.specialty,
            question_count=quiz.question_count,
            max_xp=quiz.max_xp,
            answer_key=answer_key,
        )
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        logger.info(f"Stored answer key for quiz {quiz.quiz_id} ({quiz.question_count} questions)")
        return record

    def get_answer_key(self, quiz_id: str) -> Dict[str, AnswerKeyEntry]:
        """Answer key of an issued quiz, or QuizNotFound."""
        record = self.db.query(GlossaryQuiz).filter(GlossaryQuiz.id == quiz_id).first()
        if record is None:
            raise QuizNotFound(quiz_id)

        return {
            question_id: AnswerKeyEntry.model_validate(entry)
            for question_id, entry in (record.answer_key or {}).items()
        }

    def record_attempt(self, result: GradingResult) -> GlossaryQuizAttempt:
        attempt = GlossaryQuizAttempt(
            quiz_id=result.quiz_id,
            user_id=result.user_id,
            total_questions=result.total_questions,
            correct_answers=result.correct_answers,
            accuracy=result.accuracy,
            xp_earned=result.xp_earned,
            performance_tier=result.performance_tier.value,
            streak_eligible=result.streak_eligible,
            results=[r.model_dump(mode="json") for r in result.results],
        )
        self.db.add(attempt)
        self.db.commit()
        self.db.refresh(attempt)
        return attempt

    def get_history(self, user_id: str, limit: int = 20) -> List[Dict[str, Any]]:
        """Most recent graded attempts for a user, newest first."""
        attempts = self.db.query(GlossaryQuizAttempt).filter(
            GlossaryQuizAttempt.user_id == user_id
        ).order_by(GlossaryQuizAttempt.submitted_at.desc()).limit(limit).all()

        return [
            {
                "quiz_id": a.quiz_id,
                "completed_at": a.submitted_at.isoformat() if a.submitted_at else None,
                "difficulty": a.quiz.difficulty if a.quiz else None,
                "specialty": a.quiz.specialty if a.quiz else None,
                "questions": a.total_questions,
                "correct": a.correct_answers,
                "accuracy": a.accuracy,
                "xp_earned": a.xp_earned,
                "performance_tier": a.performance_tier,
            }
            for a in attempts
        ]
