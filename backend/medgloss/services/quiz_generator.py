"""
Glossary Quiz Generator.

Builds multiple-choice quizzes from quiz-eligible glossary terms.

Each selected term gets one of four question archetypes:
- definition: term shown, pick its definition
- term_matching: definition shown, pick the term
- pronunciation: pick how the term is pronounced (only for terms with one)
- clinical_usage: fill the blank in the term's example sentence (+5 XP)

Distractors come from related parts of the corpus (shared specialty, same
difficulty, or any term with a pronunciation). When a pool holds fewer than
three candidates the question simply has fewer options.

All randomness goes through one random.Random so a seed reproduces a quiz.
"""

import logging
import random
import re
import time
import uuid
from typing import Callable, Dict, List, Optional

from medgloss.schemas.glossary import (
    AnswerKeyEntry,
    Corpus,
    DifficultyLevel,
    QuestionType,
    Quiz,
    QuizOption,
    QuizOptions,
    QuizQuestion,
    TermRecord,
)
from medgloss.services.errors import InternalComputationError

logger = logging.getLogger(__name__)

# Base XP per difficulty; anything else earns DEFAULT_XP
XP_BY_DIFFICULTY = {
    DifficultyLevel.BEGINNER.value: 10,
    DifficultyLevel.INTERMEDIATE.value: 20,
    DifficultyLevel.ADVANCED.value: 35,
    DifficultyLevel.EXPERT.value: 50,
}
DEFAULT_XP = 15
CLINICAL_USAGE_BONUS_XP = 5

SECONDS_PER_QUESTION = 60
MAX_DISTRACTORS = 3

PRONUNCIATION_CHANCE = 0.3
CLINICAL_USAGE_CHANCE = 0.4

BLANK = "____"
HINT_DEFINITION_CHARS = 80

# Never produced by slugified term ids, so the term id survives parsing
QUESTION_ID_SEPARATOR = "::"

QUESTION_ID_SUFFIXES = {
    QuestionType.DEFINITION: "def",
    QuestionType.TERM_MATCHING: "match",
    QuestionType.PRONUNCIATION: "pron",
    QuestionType.CLINICAL_USAGE: "usage",
}


def calculate_question_xp(difficulty: Optional[str]) -> int:
    """Base XP for a question about a term of the given difficulty."""
    return XP_BY_DIFFICULTY.get(difficulty or "", DEFAULT_XP)


def make_question_id(term_id: str, question_type: QuestionType) -> str:
    return f"{term_id}{QUESTION_ID_SEPARATOR}{QUESTION_ID_SUFFIXES[question_type]}"


def parse_question_id(question_id: str) -> str:
    """Recover the term id from a question id (split on the last separator)."""
    term_id, sep, _ = question_id.rpartition(QUESTION_ID_SEPARATOR)
    return term_id if sep else question_id


def generate_quiz_id() -> str:
    return f"quiz_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


def _shares_specialty(a: TermRecord, b: TermRecord) -> bool:
    return any(s in b.specialty for s in a.specialty)


class QuizGenerator:
    """
    Stateless quiz builder. Selection is independent per quiz; nothing is
    remembered between calls.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        id_factory: Callable[[], str] = generate_quiz_id,
    ):
        self.rng = rng or random.Random()
        self._id_factory = id_factory

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def eligible_terms(self, corpus: Corpus, options: QuizOptions) -> List[TermRecord]:
        terms = [t for t in corpus.terms if t.quiz_eligible]

        if options.difficulty:
            terms = [t for t in terms if t.difficulty == options.difficulty]
        if options.specialty:
            terms = [t for t in terms if options.specialty in t.specialty]
        if options.exclude_terms:
            excluded = set(options.exclude_terms)
            terms = [t for t in terms if t.id not in excluded]

        return terms

    def select_terms(self, corpus: Corpus, options: QuizOptions) -> List[TermRecord]:
        """Uniformly shuffle the eligible terms and take up to options.count."""
        terms = self.eligible_terms(corpus, options)
        self.rng.shuffle(terms)
        return terms[:min(options.count, len(terms))]

    def select_question_type(self, term: TermRecord) -> QuestionType:
        types = [QuestionType.DEFINITION, QuestionType.TERM_MATCHING]

        if term.pronunciation and self.rng.random() < PRONUNCIATION_CHANCE:
            types.append(QuestionType.PRONUNCIATION)
        if term.example_usage and self.rng.random() < CLINICAL_USAGE_CHANCE:
            types.append(QuestionType.CLINICAL_USAGE)

        return self.rng.choice(types)

    def _pick(self, pool: List[str]) -> List[str]:
        return self.rng.sample(pool, min(MAX_DISTRACTORS, len(pool)))

    def _options(self, correct: str, distractors: List[str]) -> List[QuizOption]:
        options = [QuizOption(text=correct, is_correct=True)]
        options.extend(QuizOption(text=d, is_correct=False) for d in distractors)
        self.rng.shuffle(options)
        return options

    # ------------------------------------------------------------------
    # Question builders
    # ------------------------------------------------------------------

    def build_definition_question(self, term: TermRecord, all_terms: List[TermRecord]) -> QuizQuestion:
        pool = [t.definition for t in all_terms if t.id != term.id and _shares_specialty(term, t)]

        return QuizQuestion(
            question_id=make_question_id(term.id, QuestionType.DEFINITION),
            type=QuestionType.DEFINITION,
            question=f"What is the definition of {term.term} ({term.full_name})?",
            term_id=term.id,
            term=term.term,
            options=self._options(term.definition, self._pick(pool)),
            difficulty=term.difficulty,
            xp_value=calculate_question_xp(term.difficulty),
            hints=[
                f"This term is used in {', '.join(term.specialty)}",
                term.clinical_pearls or "Consider the clinical context",
            ],
        )

    def build_term_matching_question(self, term: TermRecord, all_terms: List[TermRecord]) -> QuizQuestion:
        pool = [t.term for t in all_terms if t.id != term.id and t.difficulty == term.difficulty]

        return QuizQuestion(
            question_id=make_question_id(term.id, QuestionType.TERM_MATCHING),
            type=QuestionType.TERM_MATCHING,
            question=f'Which term matches this definition: "{term.definition}"',
            term_id=term.id,
            term=term.term,
            options=self._options(term.term, self._pick(pool)),
            difficulty=term.difficulty,
            xp_value=calculate_question_xp(term.difficulty),
            hints=[
                f"Pronunciation: {term.pronunciation or 'not available'}",
                f"Specialty: {', '.join(term.specialty)}",
            ],
        )

    def build_pronunciation_question(self, term: TermRecord, all_terms: List[TermRecord]) -> QuizQuestion:
        pool = [t.pronunciation for t in all_terms if t.id != term.id and t.pronunciation]

        return QuizQuestion(
            question_id=make_question_id(term.id, QuestionType.PRONUNCIATION),
            type=QuestionType.PRONUNCIATION,
            question=f'How is "{term.term}" pronounced?',
            term_id=term.id,
            term=term.term,
            options=self._options(term.pronunciation, self._pick(pool)),
            difficulty=term.difficulty,
            xp_value=calculate_question_xp(term.difficulty),
            hints=[f"Full name: {term.full_name}"],
        )

    def build_clinical_usage_question(self, term: TermRecord, all_terms: List[TermRecord]) -> QuizQuestion:
        blanked = re.sub(re.escape(term.term), BLANK, term.example_usage, flags=re.IGNORECASE)
        pool = [t.term for t in all_terms if t.id != term.id and _shares_specialty(term, t)]

        return QuizQuestion(
            question_id=make_question_id(term.id, QuestionType.CLINICAL_USAGE),
            type=QuestionType.CLINICAL_USAGE,
            question=f"Fill in the blank: {blanked}",
            term_id=term.id,
            term=term.term,
            options=self._options(term.term, self._pick(pool)),
            difficulty=term.difficulty,
            xp_value=calculate_question_xp(term.difficulty) + CLINICAL_USAGE_BONUS_XP,
            hints=[
                f"Definition: {term.definition[:HINT_DEFINITION_CHARS]}...",
                f"Specialty: {', '.join(term.specialty)}",
            ],
        )

    def build_question(self, term: TermRecord, all_terms: List[TermRecord]) -> QuizQuestion:
        question_type = self.select_question_type(term)
        builders = {
            QuestionType.DEFINITION: self.build_definition_question,
            QuestionType.TERM_MATCHING: self.build_term_matching_question,
            QuestionType.PRONUNCIATION: self.build_pronunciation_question,
            QuestionType.CLINICAL_USAGE: self.build_clinical_usage_question,
        }
        return builders[question_type](term, all_terms)

    # ------------------------------------------------------------------
    # Quiz
    # ------------------------------------------------------------------

    def generate(self, corpus: Corpus, options: QuizOptions) -> Quiz:
        """
        Generate a quiz. Asking for more questions than there are eligible
        terms returns a smaller quiz, never an error.
        """
        if options.seed is not None:
            self.rng.seed(options.seed)

        selected = self.select_terms(corpus, options)
        try:
            questions = [self.build_question(term, corpus.terms) for term in selected]
        except (TypeError, ValueError, AttributeError) as e:
            logger.error(f"Quiz generation failed on corpus data: {e}")
            raise InternalComputationError("Quiz generation failed") from e

        quiz = Quiz(
            quiz_id=self._id_factory(),
            question_count=len(questions),
            difficulty=options.difficulty or "mixed",
            specialty=options.specialty or "mixed",
            language=options.language,
            questions=questions,
            max_xp=sum(q.xp_value for q in questions),
            time_limit_seconds=len(questions) * SECONDS_PER_QUESTION,
        )
        logger.info(
            f"Generated quiz {quiz.quiz_id}: {quiz.question_count}/{options.count} questions, "
            f"max_xp={quiz.max_xp}"
        )
        return quiz


def build_answer_key(quiz: Quiz) -> Dict[str, AnswerKeyEntry]:
    """Answer key the grader checks submissions against."""
    return {
        q.question_id: AnswerKeyEntry(
            term_id=q.term_id,
            type=q.type,
            correct_index=q.correct_index,
            correct_answer=q.options[q.correct_index].text,
            base_xp=calculate_question_xp(q.difficulty),
        )
        for q in quiz.questions
    }
