from typing import Dict, List


class AnswerTypeError(ValueError):
    """An answer value does not fit the declared type of its question."""

    def __init__(self, question_id: str, message: str):
        super().__init__(f"{question_id}: {message}")
        self.question_id = question_id
        self.reason = message


class ResponseValidationError(Exception):
    """Submission blocked before any persistence call.

    `question_ids` lists the offending questions in form order, `reasons`
    maps each of them to a short explanation.
    """

    def __init__(self, question_ids: List[str], reasons: Dict[str, str]):
        super().__init__(
            f"{len(question_ids)} question(s) failed validation: {', '.join(question_ids)}"
        )
        self.question_ids = question_ids
        self.reasons = reasons
