"""
Quiz grading service
Multiple-choice questions graded by exact option index match
"""
import logging
from dataclasses import dataclass
from typing import Dict, Any, List

logger = logging.getLogger(__name__)

OPTIONS_PER_QUESTION = 4


@dataclass(frozen=True)
class QuizScore:
    """Outcome of grading one submission"""
    correct: int
    total: int
    percent: int
    passed: bool


def normalize_answers(answers: Dict[Any, Any]) -> Dict[int, int]:
    """
    Normalize submitted answers to {question_index: option_index}

    JSON object keys arrive as strings, so "0" and 0 are treated the same.
    Entries that are not integers are dropped and count as unanswered.
    """
    normalized = {}
    for key, value in (answers or {}).items():
        try:
            index = int(key)
        except (TypeError, ValueError):
            continue
        if isinstance(value, bool) or not isinstance(value, int):
            continue
        normalized[index] = value
    return normalized


class GradingService:
    """
    Service for grading quiz submissions

    Strategy:
    - Every question has exactly four options and one correct index
    - Score is the rounded percentage of exact matches
    - Pass when the score reaches the quiz's passing threshold
    """

    def missing_answers(self, questions: List[Dict[str, Any]], answers: Dict[Any, Any]) -> List[int]:
        """Indices of questions without a submitted answer"""
        normalized = normalize_answers(answers)
        return [index for index in range(len(questions)) if index not in normalized]

    def score_quiz(
        self,
        questions: List[Dict[str, Any]],
        answers: Dict[Any, Any],
        passing_score: int
    ) -> QuizScore:
        """
        Grade a complete quiz submission

        Args:
            questions: Question dictionaries with a correct_index
            answers: User's answers {question_index: option_index}
            passing_score: Threshold percentage (0-100)

        Returns:
            QuizScore with correct count, percentage and pass flag
        """
        normalized = normalize_answers(answers)
        total = len(questions)

        correct = sum(
            1 for index, question in enumerate(questions)
            if normalized.get(index) == question.get("correct_index")
        )

        # Half-up rounding: 62.5 -> 63
        percent = int(100 * correct / total + 0.5) if total else 0
        passed = percent >= passing_score

        logger.info(f"Quiz graded: {correct}/{total} correct, {percent}% (pass mark {passing_score}%), passed={passed}")

        return QuizScore(correct=correct, total=total, percent=percent, passed=passed)

    def validate_questions(self, questions: List[Dict[str, Any]]) -> List[str]:
        """
        Check authored questions before they are stored

        Returns:
            List of problems; empty when the quiz is well formed
        """
        problems = []
        for index, question in enumerate(questions):
            number = index + 1
            if not str(question.get("question", "")).strip():
                problems.append(f"Question {number} has no prompt")
            options = question.get("options") or []
            if len(options) != OPTIONS_PER_QUESTION:
                problems.append(f"Question {number} must have {OPTIONS_PER_QUESTION} options")
            elif any(not str(option).strip() for option in options):
                problems.append(f"Question {number} has an empty option")
            correct_index = question.get("correct_index")
            if not isinstance(correct_index, int) or not 0 <= correct_index < OPTIONS_PER_QUESTION:
                problems.append(f"Question {number} has an invalid correct option")
        return problems

    def public_questions(self, questions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Questions as shown to a learner, without the answer key"""
        return [
            {"question": question.get("question", ""), "options": list(question.get("options") or [])}
            for question in questions
        ]

    def feedback(self, score: QuizScore, passing_score: int, xp_value: int) -> str:
        """Short result message shown after submitting"""
        if score.passed and xp_value:
            return f"You Passed! You scored {score.percent}% and earned {xp_value} XP."
        if score.passed:
            return f"You Passed! You scored {score.percent}%."
        return f"Not Quite. You scored {score.percent}%; you need {passing_score}% to pass."


# Global instance
grading_service = GradingService()
