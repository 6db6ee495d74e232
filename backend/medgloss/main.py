# Load environment variables FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

import os
import logging
import sentry_sdk
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from medgloss.database import engine, Base
from medgloss.middleware.request_timing import RequestTimingMiddleware
from medgloss.models import models  # noqa: F401  (registers tables on Base)
from medgloss.routers import glossary, quiz
from medgloss.services.corpus_store import get_corpus_store
from medgloss.services.errors import CorpusUnavailable

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize Sentry for error monitoring
sentry_dsn = os.getenv("SENTRY_DSN")
if sentry_dsn:
    sentry_sdk.init(
        dsn=sentry_dsn,
        traces_sample_rate=0.1,
        environment=os.getenv("ENVIRONMENT", "development"),
    )

# Create quiz store tables
Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - runs on startup and shutdown."""
    # STARTUP: Warm the corpus cache so the first request doesn't pay for the load
    if os.getenv("ENABLE_CORPUS_WARMING", "true").lower() == "true":
        try:
            corpus = get_corpus_store().get()
            logger.info("Glossary warmed with %d terms", len(corpus.terms))
        except CorpusUnavailable as e:
            # Requests will retry the load and fail individually
            logger.warning("Glossary warm-up failed: %s", e)
    else:
        logger.info("Corpus warming disabled via ENABLE_CORPUS_WARMING=false")

    yield  # Application runs here

    logger.info("Shutting down...")

# OpenAPI tag metadata for organized documentation
tags_metadata = [
    {
        "name": "glossary",
        "description": "Term lookup, search, related terms and auto-linking of terms in case text.",
    },
    {
        "name": "quiz",
        "description": "Glossary quiz generation, grading with XP rewards, study sets and history.",
    },
]

app = FastAPI(
    title="MedGloss API",
    description="""
## MedGloss Medical Glossary & Quiz Engine

### Features
- **Auto-linking** - Find glossary terms in clinical case text for tooltips
- **Search** - Relevance-ranked term search with specialty/difficulty filters
- **Quizzes** - Four question archetypes generated from the glossary
- **Grading** - XP rewards, perfection bonus and performance tiers

### XP per question
| Difficulty | XP |
|------------|----|
| Beginner | 10 |
| Intermediate | 20 |
| Advanced | 35 |
| Expert | 50 |

Clinical usage questions carry +5 XP. A perfect quiz earns a 50 XP bonus.
    """,
    version="1.0.0",
    lifespan=lifespan,
    openapi_tags=tags_metadata,
)

ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",  # Vite dev server
]

# Allow additional origins from environment (for deployed frontends)
extra_origins = os.getenv("CORS_ALLOWED_ORIGINS", "")
if extra_origins:
    ALLOWED_ORIGINS.extend([o.strip() for o in extra_origins.split(",") if o.strip()])

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Requested-With", "Accept"],
)

app.add_middleware(RequestTimingMiddleware)

# Include routers
app.include_router(glossary.router)  # Case study mode
app.include_router(quiz.router)  # Gamification quiz mode


@app.get("/")
def root():
    return {
        "message": "MedGloss API",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health")
def health_check():
    return {"status": "healthy"}
