# Services module

# Corpus loading and caching
from medgloss.services.corpus_store import (
    CorpusStore,
    get_corpus_store,
    load_corpus_file,
)

# Annotation and lookup
from medgloss.services.term_matcher import auto_link
from medgloss.services.term_search import (
    get_term,
    search_terms,
    get_related_terms,
    get_terms_by_specialty,
    get_glossary_stats,
)

# Quiz generation, storage and grading
from medgloss.services.quiz_generator import (
    QuizGenerator,
    calculate_question_xp,
    build_answer_key,
)
from medgloss.services.quiz_store import QuizStore
from medgloss.services.grader import grade_quiz, get_performance_tier

# Errors
from medgloss.services.errors import (
    GlossaryError,
    CorpusUnavailable,
    NotFoundError,
    TermNotFound,
    QuizNotFound,
    InternalComputationError,
)
