"""
Glossary dependencies.

Routes receive the corpus store, quiz generator and quiz store through
these providers so tests can swap them with app.dependency_overrides.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from medgloss.database import get_db
from medgloss.services.corpus_store import CorpusStore, get_corpus_store as _process_corpus_store
from medgloss.services.quiz_generator import QuizGenerator
from medgloss.services.quiz_store import QuizStore


def get_corpus_store() -> CorpusStore:
    return _process_corpus_store()


def get_quiz_generator() -> QuizGenerator:
    """Fresh generator per request so a seeded quiz never reseeds another."""
    return QuizGenerator()


def get_quiz_store(db: Session = Depends(get_db)) -> QuizStore:
    return QuizStore(db)
