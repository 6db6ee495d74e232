"""
Glossary and Quiz Schemas for MedGloss

Pydantic models shared by the corpus store, the matcher, the quiz generator
and the grader.

Features:
- Validated, immutable term records loaded from the corpus file
- Corpus-level invariants (unique ids, non-empty terms)
- Explicit quiz configuration instead of loose keyword arguments
- Quiz, question and grading result shapes returned by the API
"""

from typing import Optional, List, Dict
from pydantic import BaseModel, Field, PrivateAttr, field_validator
from enum import Enum


# =============================================================================
# ENUMS
# =============================================================================

class DifficultyLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class QuestionType(str, Enum):
    """The four question archetypes a term can be quizzed with."""
    DEFINITION = "definition"          # Term shown, pick the definition
    TERM_MATCHING = "term_matching"    # Definition shown, pick the term
    PRONUNCIATION = "pronunciation"    # Pick the pronunciation
    CLINICAL_USAGE = "clinical_usage"  # Fill the blank in an example sentence


class PerformanceTier(str, Enum):
    DEVELOPING = "developing"
    COMPETENT = "competent"
    PROFICIENT = "proficient"
    EXPERT = "expert"
    MASTER = "master"


# =============================================================================
# CORPUS
# =============================================================================

class TermRecord(BaseModel):
    """One glossary entry. Never mutated after load."""
    id: str = Field(..., min_length=1)
    term: str = Field(..., min_length=1, description="Canonical short form, e.g. 'MI'")
    full_name: str = ""
    definition: str = ""
    pronunciation: Optional[str] = None
    specialty: List[str] = Field(default_factory=list)
    difficulty: Optional[str] = Field(
        None,
        description="beginner/intermediate/advanced/expert; missing or other values earn default XP"
    )
    tags: List[str] = Field(default_factory=list)
    common_in_cases: bool = False
    quiz_eligible: bool = False
    example_usage: Optional[str] = None
    clinical_pearls: Optional[str] = None
    related_terms: List[str] = Field(default_factory=list)
    translations: Dict[str, str] = Field(default_factory=dict)

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "id": "mi",
                "term": "MI",
                "full_name": "Myocardial Infarction",
                "definition": "Death of heart muscle caused by interrupted coronary blood flow",
                "pronunciation": "my-oh-KAR-dee-al in-FARK-shun",
                "specialty": ["cardiology"],
                "difficulty": "intermediate",
                "tags": ["emergency"],
                "common_in_cases": True,
                "quiz_eligible": True,
                "example_usage": "The ECG showed ST elevation consistent with an acute MI.",
                "related_terms": ["stemi"],
                "translations": {"es": "Infarto de miocardio"}
            }
        }

    @field_validator("term")
    @classmethod
    def term_not_blank(cls, v):
        if not v.strip():
            raise ValueError("term must not be blank")
        return v

    def translation(self, language: str) -> Optional[str]:
        """Translated definition for non-English languages, None for English."""
        if language == "en":
            return None
        return self.translations.get(language)


class CorpusMetadata(BaseModel):
    languages: List[str] = Field(default_factory=lambda: ["en"])
    version: Optional[str] = None
    last_updated: Optional[str] = None


class Corpus(BaseModel):
    """
    Full catalog of term records. Replaced wholesale on every reload and
    treated as read-only by every consumer.
    """
    metadata: CorpusMetadata = Field(default_factory=CorpusMetadata)
    terms: List[TermRecord] = Field(default_factory=list)

    _index: Dict[str, TermRecord] = PrivateAttr(default_factory=dict)

    class Config:
        frozen = True

    @field_validator("terms")
    @classmethod
    def ids_unique(cls, v):
        seen = set()
        duplicates = set()
        for record in v:
            if record.id in seen:
                duplicates.add(record.id)
            seen.add(record.id)
        if duplicates:
            raise ValueError(f"duplicate term ids: {sorted(duplicates)}")
        return v

    def model_post_init(self, __context) -> None:
        self._index = {t.id: t for t in self.terms}

    def get(self, term_id: str) -> Optional[TermRecord]:
        return self._index.get(term_id)


# =============================================================================
# ANNOTATION
# =============================================================================

class AnnotationSpan(BaseModel):
    """A located term occurrence; [start, end) offsets into the original text."""
    term_id: str
    term: str
    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)
    definition: str
    pronunciation: Optional[str] = None
    translation: Optional[str] = None


class AutoLinkResult(BaseModel):
    original_text: str
    linked_count: int
    links: List[AnnotationSpan]


# =============================================================================
# QUIZ
# =============================================================================

class QuizOptions(BaseModel):
    """
    Quiz generation settings.

    All filters are optional and conjunctive. `seed` makes term selection,
    archetype choice and option order reproducible.
    """
    count: int = Field(10, ge=0, le=500)
    difficulty: Optional[str] = None
    specialty: Optional[str] = None
    language: str = "en"
    exclude_terms: List[str] = Field(default_factory=list)
    seed: Optional[int] = None


class QuizOption(BaseModel):
    text: str
    is_correct: bool


class QuizQuestion(BaseModel):
    question_id: str
    type: QuestionType
    question: str
    term_id: str
    term: str
    options: List[QuizOption]
    difficulty: Optional[str] = None
    xp_value: int
    hints: List[str] = Field(default_factory=list)

    @property
    def correct_index(self) -> int:
        return next(i for i, option in enumerate(self.options) if option.is_correct)


class Quiz(BaseModel):
    quiz_id: str
    question_count: int
    difficulty: str
    specialty: str
    language: str
    questions: List[QuizQuestion]
    max_xp: int
    time_limit_seconds: int


# =============================================================================
# GRADING
# =============================================================================

class AnswerKeyEntry(BaseModel):
    """What the grader needs to know about one issued question."""
    term_id: str
    type: QuestionType
    correct_index: int
    correct_answer: str
    base_xp: int


class QuestionResult(BaseModel):
    question_id: str
    correct: bool
    xp_earned: int
    correct_answer: Optional[str] = None


class GradingResult(BaseModel):
    quiz_id: str
    user_id: str
    total_questions: int
    correct_answers: int
    accuracy: float = Field(..., ge=0, le=100, description="Percent, one decimal")
    xp_earned: int
    perfection_bonus: int
    speed_bonus: int
    results: List[QuestionResult]
    performance_tier: PerformanceTier
    streak_eligible: bool
