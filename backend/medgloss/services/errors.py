"""
Glossary service errors.

Routers map these onto HTTP status codes; nothing below the router layer
knows about HTTP.
"""


class GlossaryError(Exception):
    """Base class for glossary engine failures."""
    pass


class CorpusUnavailable(GlossaryError):
    """Corpus file could not be read, parsed or validated."""
    pass


class NotFoundError(GlossaryError):
    pass


class TermNotFound(NotFoundError):
    def __init__(self, term_id: str):
        self.term_id = term_id
        super().__init__(f"Term not found: {term_id}")


class QuizNotFound(NotFoundError):
    def __init__(self, quiz_id: str):
        self.quiz_id = quiz_id
        super().__init__(f"Quiz not found: {quiz_id}")


class InternalComputationError(GlossaryError):
    """Corpus data had a shape the engine could not work with."""
    pass
