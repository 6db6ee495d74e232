"""
FastAPI Dependencies for MedGloss
"""

from medgloss.dependencies.glossary import (
    get_corpus_store,
    get_quiz_generator,
    get_quiz_store,
)

__all__ = [
    "get_corpus_store",
    "get_quiz_generator",
    "get_quiz_store",
]
