"""
Quiz Grader.

Scores submitted option indices against the answer key issued with a quiz,
then works out XP, bonuses and the performance tier.

XP rules:
- Correct answer earns the term's base difficulty XP (no clinical-usage bonus)
- Perfect score (every answered question correct) adds 50
- Speed bonus is reserved and always 0; no timing is submitted
"""

import logging
from typing import Dict, List

from medgloss.schemas.glossary import (
    AnswerKeyEntry,
    GradingResult,
    PerformanceTier,
    QuestionResult,
)

logger = logging.getLogger(__name__)

PERFECTION_BONUS_XP = 50
SPEED_BONUS_XP = 0
STREAK_ACCURACY_THRESHOLD = 70

# Checked top-down; first threshold the accuracy reaches wins
TIER_THRESHOLDS = [
    (95, PerformanceTier.MASTER),
    (85, PerformanceTier.EXPERT),
    (75, PerformanceTier.PROFICIENT),
    (60, PerformanceTier.COMPETENT),
]


def get_performance_tier(accuracy: float) -> PerformanceTier:
    for threshold, tier in TIER_THRESHOLDS:
        if accuracy >= threshold:
            return tier
    return PerformanceTier.DEVELOPING


def grade_quiz(
    answer_key: Dict[str, AnswerKeyEntry],
    quiz_id: str,
    answers: Dict[str, int],
    user_id: str,
) -> GradingResult:
    """
    Grade a submission.

    Args:
        answer_key: Issued questions of the quiz, keyed by question_id
        quiz_id: Quiz being graded
        answers: {question_id: selected option index}
        user_id: Submitting user

    Answers for question ids that were not issued with this quiz are
    ignored and do not count towards the totals.
    """
    results: List[QuestionResult] = []
    correct_count = 0
    question_xp = 0

    for question_id, selected_index in answers.items():
        entry = answer_key.get(question_id)
        if entry is None:
            logger.warning(f"Quiz {quiz_id}: ignoring answer for unknown question {question_id}")
            continue

        if selected_index == entry.correct_index:
            correct_count += 1
            question_xp += entry.base_xp
            results.append(QuestionResult(
                question_id=question_id,
                correct=True,
                xp_earned=entry.base_xp,
            ))
        else:
            results.append(QuestionResult(
                question_id=question_id,
                correct=False,
                xp_earned=0,
                correct_answer=entry.correct_answer,
            ))

    total = len(results)
    raw_accuracy = (correct_count / total) * 100 if total else 0.0
    perfection_bonus = PERFECTION_BONUS_XP if total and correct_count == total else 0

    result = GradingResult(
        quiz_id=quiz_id,
        user_id=user_id,
        total_questions=total,
        correct_answers=correct_count,
        accuracy=round(raw_accuracy, 1),
        xp_earned=question_xp + perfection_bonus + SPEED_BONUS_XP,
        perfection_bonus=perfection_bonus,
        speed_bonus=SPEED_BONUS_XP,
        results=results,
        performance_tier=get_performance_tier(raw_accuracy),
        streak_eligible=raw_accuracy >= STREAK_ACCURACY_THRESHOLD,
    )

    logger.info(
        f"Graded quiz {quiz_id} for user {user_id}: {correct_count}/{total} "
        f"({result.accuracy}%), {result.xp_earned} XP, tier={result.performance_tier.value}"
    )
    return result
