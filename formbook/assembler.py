import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from .exceptions import AnswerTypeError, ResponseValidationError
from .fields import BoundField, is_blank, normalize_answer, render_field
from .schemas import AnswerValue, QuestionBase

logger = logging.getLogger(__name__)

Persist = Callable[[Dict[str, AnswerValue]], Awaitable[Any]]

REASON_REQUIRED = "required"
REASON_UNKNOWN = "unknown question"


class ResponseAssembler:
    """
    Collects one answer per question id and hands the finished mapping to
    `persist` on submit.

    Only questions that were edited appear in the mapping. Submission is
    refused locally, before `persist` runs, when a required question is blank,
    an answer does not fit its question type, or an answer names a question
    the form does not have. Duplicate submissions are not guarded here.
    """

    def __init__(self, questions: Sequence[QuestionBase], persist: Optional[Persist] = None):
        self.questions = list(questions)
        self._by_id = {q.id: q for q in self.questions}
        self._persist = persist
        self._answers: Dict[str, AnswerValue] = {}

    @property
    def answers(self) -> Dict[str, AnswerValue]:
        return dict(self._answers)

    def set_answer(self, question_id: str, value: AnswerValue) -> None:
        self._answers[question_id] = value

    def update(self, answers: Dict[str, AnswerValue]) -> None:
        for question_id, value in answers.items():
            self.set_answer(question_id, value)

    def render(self, preview: bool = False) -> List[BoundField]:
        """One bound control per question, in form order, wired to set_answer."""
        return [
            render_field(
                question,
                self._answers.get(question.id),
                on_change=self._setter(question.id),
                preview=preview,
            )
            for question in self.questions
        ]

    def _setter(self, question_id: str):
        def on_change(value):
            self.set_answer(question_id, value)

        return on_change

    @property
    def failures(self) -> Dict[str, str]:
        reasons: Dict[str, str] = {}
        for question in self.questions:
            value = self._answers.get(question.id)
            if question.required and is_blank(value):
                reasons[question.id] = REASON_REQUIRED
                continue
            try:
                normalize_answer(question, value)
            except AnswerTypeError as e:
                reasons[question.id] = e.reason
        for question_id in self._answers:
            if question_id not in self._by_id:
                reasons[question_id] = REASON_UNKNOWN
        return reasons

    def validate(self) -> List[str]:
        """Ids of the questions blocking submission; empty when it may proceed."""
        return list(self.failures)

    def assemble(self) -> Dict[str, AnswerValue]:
        """The normalized response mapping. Raises ResponseValidationError."""
        reasons = self.failures
        if reasons:
            raise ResponseValidationError(list(reasons), reasons)
        return {
            question_id: normalize_answer(self._by_id[question_id], value)
            for question_id, value in self._answers.items()
        }

    async def submit(self):
        if self._persist is None:
            raise RuntimeError("ResponseAssembler has no persistence callable")
        try:
            response = self.assemble()
        except ResponseValidationError as e:
            logger.info("Submission rejected, failing questions: %s", e.question_ids)
            raise
        return await self._persist(response)
