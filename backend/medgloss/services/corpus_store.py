"""
Corpus Store for MedGloss

Loads the medical glossary JSON file into a validated Corpus and keeps it in
memory for a fixed time window.

Features:
- TTL cache (default 1 hour) refreshed transparently on the next call
- Failed reloads propagate; a stale corpus is never served after expiry
- Injectable clock and loader so tests control expiry and content
- Process-wide instance via get_corpus_store(), used as a FastAPI dependency

Usage:
    from medgloss.services.corpus_store import get_corpus_store

    corpus = get_corpus_store().get()
    term = corpus.get("mi")
"""

import json
import logging
import os
import time
from pathlib import Path
from typing import Callable, Optional

from pydantic import ValidationError

from medgloss.schemas.glossary import Corpus
from medgloss.services.errors import CorpusUnavailable

logger = logging.getLogger(__name__)

DEFAULT_GLOSSARY_PATH = Path(__file__).resolve().parent.parent / "data" / "medical_glossary.json"
DEFAULT_TTL_SECONDS = 3600


def load_corpus_file(path: Path) -> Corpus:
    """
    Read and validate a corpus file.

    Raises:
        CorpusUnavailable: file missing/unreadable, invalid JSON, or records
            violating the corpus schema
    """
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except OSError as e:
        logger.error(f"Failed to read glossary at {path}: {e}")
        raise CorpusUnavailable("Glossary not available") from e
    except json.JSONDecodeError as e:
        logger.error(f"Glossary at {path} is not valid JSON: {e}")
        raise CorpusUnavailable("Glossary not available") from e

    try:
        return Corpus.model_validate(raw)
    except ValidationError as e:
        logger.error(f"Glossary at {path} failed validation: {e.error_count()} errors")
        raise CorpusUnavailable("Glossary not available") from e


class CorpusStore:
    """
    Time-based cache around a corpus loader.

    Reloads are whole-object replacements, so concurrent callers can at worst
    load twice; no lock is taken.
    """

    def __init__(
        self,
        path: Optional[Path] = None,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        loader: Optional[Callable[[Path], Corpus]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            path: Corpus JSON file (default: packaged glossary)
            ttl_seconds: How long a loaded corpus is served before reloading
            loader: Function turning a path into a Corpus
            clock: Monotonic seconds source
        """
        self.path = Path(path) if path else DEFAULT_GLOSSARY_PATH
        self.ttl_seconds = ttl_seconds
        self._loader = loader or load_corpus_file
        self._clock = clock
        self._corpus: Optional[Corpus] = None
        self._loaded_at: float = 0.0

    @property
    def is_loaded(self) -> bool:
        return self._corpus is not None

    def get(self) -> Corpus:
        """Return the cached corpus, reloading it once the TTL has elapsed."""
        now = self._clock()
        if self._corpus is not None and now - self._loaded_at < self.ttl_seconds:
            return self._corpus

        corpus = self._loader(self.path)
        self._corpus = corpus
        self._loaded_at = now
        logger.info(f"Loaded {len(corpus.terms)} medical terms from {self.path}")
        return corpus

    def invalidate(self) -> None:
        """Drop the cached corpus; the next get() reloads."""
        self._corpus = None
        self._loaded_at = 0.0


# Singleton instance
_corpus_store: Optional[CorpusStore] = None


def get_corpus_store() -> CorpusStore:
    """Get the process-wide CorpusStore configured from the environment."""
    global _corpus_store
    if _corpus_store is None:
        path = os.getenv("GLOSSARY_PATH")
        ttl = int(os.getenv("GLOSSARY_CACHE_TTL_SECONDS", str(DEFAULT_TTL_SECONDS)))
        _corpus_store = CorpusStore(path=Path(path) if path else None, ttl_seconds=ttl)
    return _corpus_store


def reset_corpus_store() -> None:
    """Forget the process-wide store (tests, config reloads)."""
    global _corpus_store
    _corpus_store = None
