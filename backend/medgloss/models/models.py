from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
from medgloss.database import Base

def generate_uuid():
    return str(uuid.uuid4())


class GlossaryQuiz(Base):
    """Answer key of an issued quiz. Question text is not stored."""
    __tablename__ = "glossary_quizzes"

    id = Column(String, primary_key=True)  # quiz_id handed to the client
    language = Column(String, nullable=False, default="en")
    difficulty = Column(String, nullable=False, default="mixed")
    specialty = Column(String, nullable=False, default="mixed")
    question_count = Column(Integer, nullable=False, default=0)
    max_xp = Column(Integer, nullable=False, default=0)

    # {question_id: {"term_id", "type", "correct_index", "correct_answer", "base_xp"}}
    answer_key = Column(JSON, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    # Relationships
    attempts = relationship("GlossaryQuizAttempt", back_populates="quiz")


class GlossaryQuizAttempt(Base):
    __tablename__ = "glossary_quiz_attempts"

    id = Column(String, primary_key=True, default=generate_uuid)
    quiz_id = Column(String, ForeignKey("glossary_quizzes.id"), nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)

    total_questions = Column(Integer, nullable=False)
    correct_answers = Column(Integer, nullable=False)
    accuracy = Column(Float, nullable=False)
    xp_earned = Column(Integer, nullable=False)
    performance_tier = Column(String, nullable=False)
    streak_eligible = Column(Boolean, default=False)
    results = Column(JSON, nullable=True)  # Per-question grading rows

    submitted_at = Column(DateTime, default=datetime.utcnow, index=True)

    # Relationships
    quiz = relationship("GlossaryQuiz", back_populates="attempts")
