"""
Quiz persistence: the quiz itself, the answer log and the final result.
"""

import logging

from onboarding_tutor.agents.models import AnswerCheck, Quiz, QuizAnswer, QuizResult
from onboarding_tutor.core.workspace import (
    QUIZ_ANSWERS_FILENAME,
    QUIZ_FILENAME,
    QUIZ_RESULT_FILENAME,
    WorkspaceConfig,
)
from onboarding_tutor.services.json_store import JsonDocumentStore, LoadResult

logger = logging.getLogger(__name__)


class QuizStore:
    def __init__(self, config: WorkspaceConfig):
        self.config = config
        self._quiz_store: JsonDocumentStore[Quiz] = JsonDocumentStore(
            config.state_file(QUIZ_FILENAME), Quiz
        )
        self._answers_store: JsonDocumentStore[list[QuizAnswer]] = JsonDocumentStore(
            config.state_file(QUIZ_ANSWERS_FILENAME), list[QuizAnswer]
        )
        self._result_store: JsonDocumentStore[QuizResult] = JsonDocumentStore(
            config.state_file(QUIZ_RESULT_FILENAME), QuizResult
        )

    def save_quiz(self, quiz: Quiz) -> None:
        """Save a new quiz. Answers and any result of the previous quiz are cleared."""
        self._quiz_store.write(quiz)
        self.clear_answers()
        self._result_store.delete()
        logger.info(f"💾 Saved quiz {quiz.id} ({len(quiz.questions)} questions)")

    def load_quiz(self) -> LoadResult[Quiz]:
        return self._quiz_store.load()

    def exists(self) -> bool:
        return self._quiz_store.exists()

    def delete_quiz(self) -> None:
        self._quiz_store.delete()
        self._result_store.delete()
        self.clear_answers()
        logger.info("🗑️  Deleted quiz, answers and result")

    def record_answer(self, answer: QuizAnswer) -> None:
        """Record an answer, replacing any earlier answer to the same question."""
        answers = self.get_answers()
        for index, existing in enumerate(answers):
            if existing.question_id == answer.question_id:
                answers[index] = answer
                break
        else:
            answers.append(answer)

        self._answers_store.write(answers)
        logger.debug(f"Recorded answer for {answer.question_id} ({len(answers)} total)")

    def get_answers(self) -> list[QuizAnswer]:
        return self._answers_store.read() or []

    def clear_answers(self) -> None:
        self._answers_store.delete()

    def check_answer(
        self, quiz_id: str, question_id: str, selected_choice_id: str
    ) -> AnswerCheck | None:
        """
        Evaluate a choice against the stored quiz without recording it.

        Returns:
            AnswerCheck, or None when the quiz or question does not exist
        """
        quiz = self._quiz_store.read()
        if quiz is None or quiz.id != quiz_id:
            logger.warning(f"⚠️  Quiz {quiz_id} not found")
            return None

        question = quiz.find_question(question_id)
        if question is None:
            logger.warning(f"⚠️  Question {question_id} not found in quiz {quiz_id}")
            return None

        correct = question.correct_choice
        correct_id = correct.id if correct else ""
        return AnswerCheck(
            is_correct=bool(correct_id) and correct_id == selected_choice_id,
            correct_choice_id=correct_id,
            explanation=question.explanation,
        )

    def save_result(self, result: QuizResult) -> None:
        self._result_store.write(result)
        logger.info(f"💾 Saved quiz result ({result.overall_level}, score {result.overall_score:.2f})")

    def load_result(self) -> LoadResult[QuizResult]:
        return self._result_store.load()
