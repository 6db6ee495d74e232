"""
MedGloss Schemas Package

Pydantic models for the corpus, annotations, quizzes and grading results.
"""

from medgloss.schemas.glossary import (
    # Enums
    DifficultyLevel,
    QuestionType,
    PerformanceTier,

    # Corpus
    TermRecord,
    CorpusMetadata,
    Corpus,

    # Annotation
    AnnotationSpan,
    AutoLinkResult,

    # Quiz
    QuizOptions,
    QuizOption,
    QuizQuestion,
    Quiz,

    # Grading
    AnswerKeyEntry,
    QuestionResult,
    GradingResult,
)

__all__ = [
    # Enums
    "DifficultyLevel",
    "QuestionType",
    "PerformanceTier",

    # Corpus
    "TermRecord",
    "CorpusMetadata",
    "Corpus",

    # Annotation
    "AnnotationSpan",
    "AutoLinkResult",

    # Quiz
    "QuizOptions",
    "QuizOption",
    "QuizQuestion",
    "Quiz",

    # Grading
    "AnswerKeyEntry",
    "QuestionResult",
    "GradingResult",
]
