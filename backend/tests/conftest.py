"""
Pytest configuration and fixtures for MedGloss backend tests.

Provides:
- Test database setup/teardown for the quiz store
- A fixed in-memory glossary injected in place of the corpus file
- FastAPI test client with dependency overrides
- Seeded quiz generators
"""

import os
import random
import pytest
from typing import Any, Dict, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

# Set test environment before importing app
os.environ["DATABASE_URL"] = "sqlite:///./test_medgloss.db"
os.environ["ENABLE_CORPUS_WARMING"] = "false"

from medgloss.main import app
from medgloss.database import Base, get_db
from medgloss.dependencies.glossary import get_corpus_store, get_quiz_generator
from medgloss.schemas.glossary import Corpus, CorpusMetadata, TermRecord
from medgloss.services.corpus_store import CorpusStore
from medgloss.services.quiz_generator import QuizGenerator


# Test database setup
TEST_DATABASE_URL = "sqlite:///./test_medgloss.db"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database tables once per test session"""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()
    if os.path.exists("./test_medgloss.db"):
        os.remove("./test_medgloss.db")


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Provide a database session for each test, with rollback after"""
    connection = test_engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


# =========================================================================
# Corpus Fixtures
# =========================================================================

def make_term(term_id: str, term: str, **fields: Any) -> TermRecord:
    """Build a TermRecord with quiz/case flags on and sensible defaults."""
    data: Dict[str, Any] = {
        "id": term_id,
        "term": term,
        "full_name": fields.pop("full_name", term.title()),
        "definition": fields.pop("definition", f"Definition of {term}"),
        "specialty": fields.pop("specialty", ["cardiology"]),
        "difficulty": fields.pop("difficulty", "intermediate"),
        "common_in_cases": fields.pop("common_in_cases", True),
        "quiz_eligible": fields.pop("quiz_eligible", True),
    }
    data.update(fields)
    return TermRecord(**data)


def make_corpus(*terms: TermRecord, languages=None) -> Corpus:
    return Corpus(
        metadata=CorpusMetadata(languages=languages or ["en", "es"]),
        terms=list(terms),
    )


@pytest.fixture
def term_factory():
    """Expose make_term to tests that need a custom corpus"""
    return make_term


@pytest.fixture
def corpus_factory():
    return make_corpus


@pytest.fixture
def sample_corpus() -> Corpus:
    """Small glossary covering every archetype and filter"""
    return make_corpus(
        make_term(
            "mi", "MI",
            full_name="Myocardial Infarction",
            definition="Heart attack caused by blocked coronary blood flow",
            example_usage="An acute MI was confirmed by troponin.",
            clinical_pearls="Time is muscle.",
            related_terms=["stemi", "not_in_corpus", "troponin"],
            tags=["emergency", "acs"],
            translations={"es": "Ataque al corazón"},
        ),
        make_term(
            "stemi", "STEMI",
            full_name="ST-Elevation Myocardial Infarction",
            definition="Infarction with ST elevation on the ECG",
            pronunciation="STEM-ee",
            tags=["emergency", "ecg", "acs"],
        ),
        make_term(
            "af", "atrial fibrillation",
            full_name="Atrial Fibrillation",
            definition="Irregularly irregular supraventricular arrhythmia",
            pronunciation="AY-tree-al fib-rih-LAY-shun",
            example_usage="Atrial fibrillation with rapid ventricular response was seen.",
            related_terms=["fibrillation"],
            tags=["arrhythmia", "ecg"],
        ),
        make_term(
            "fibrillation", "fibrillation",
            definition="Rapid uncoordinated contraction of muscle fibres",
            difficulty="beginner",
            pronunciation="fib-rih-LAY-shun",
            tags=["arrhythmia"],
        ),
        make_term(
            "troponin", "troponin",
            full_name="Cardiac Troponin",
            definition=("Regulatory protein released from injured cardiac myocytes and measured "
                        "as the preferred biomarker of myocardial infarction in serial blood "
                        "samples drawn several hours apart after symptom onset"),
            specialty=["cardiology", "laboratory_medicine"],
            difficulty="beginner",
            tags=["biomarker"],
        ),
        make_term(
            "copd", "COPD",
            full_name="Chronic Obstructive Pulmonary Disease",
            definition="Persistent airflow limitation usually caused by smoking",
            specialty=["pulmonology"],
            difficulty="beginner",
            pronunciation="see-oh-pee-DEE",
            tags=["chronic"],
        ),
        make_term(
            "fev1", "FEV1",
            full_name="Forced Expiratory Volume in One Second",
            definition="Air volume exhaled in the first second",
            specialty=["pulmonology"],
            common_in_cases=False,
            tags=["spirometry"],
        ),
        make_term(
            "sepsis", "sepsis",
            definition="Organ dysfunction caused by a dysregulated response to infection",
            specialty=["infectious_disease"],
            difficulty="expert",
            tags=["emergency"],
        ),
        make_term(
            "prn", "PRN",
            full_name="Pro Re Nata",
            definition="Given as needed",
            specialty=["pharmacology"],
            difficulty="beginner",
            quiz_eligible=False,
        ),
    )


@pytest.fixture
def corpus_store(sample_corpus: Corpus) -> CorpusStore:
    """CorpusStore that serves the sample corpus without touching disk"""
    return CorpusStore(loader=lambda path: sample_corpus)


@pytest.fixture
def seeded_generator() -> QuizGenerator:
    return QuizGenerator(rng=random.Random(1234))


# =========================================================================
# Client Fixtures
# =========================================================================

@pytest.fixture(scope="function")
def client(db: Session, corpus_store: CorpusStore) -> Generator[TestClient, None, None]:
    """Provide FastAPI test client with database and corpus overrides"""
    def override_get_db():
        try:
            yield db
        finally:
            pass  # Don't close - let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_corpus_store] = lambda: corpus_store
    app.dependency_overrides[get_quiz_generator] = lambda: QuizGenerator(rng=random.Random(42))
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
