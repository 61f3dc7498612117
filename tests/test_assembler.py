import asyncio

import pytest

from formbook.assembler import ResponseAssembler
from formbook.exceptions import ResponseValidationError
from formbook.schemas import QuestionBase

PICK = QuestionBase(id="mc", type="multipleChoice", title="Pick one", required=True, options=["A", "B"])
NOTES = QuestionBase(id="txt", type="shortText", title="Notes")


class RecordingPersist:
    def __init__(self):
        self.calls = []

    async def __call__(self, answers):
        self.calls.append(answers)
        return {"id": len(self.calls), "answers": answers}


def test_required_question_blocks_submission_then_succeeds():
    persist = RecordingPersist()
    assembler = ResponseAssembler([PICK, NOTES], persist)

    with pytest.raises(ResponseValidationError) as exc:
        asyncio.run(assembler.submit())
    assert exc.value.question_ids == ["mc"]
    assert exc.value.reasons == {"mc": "required"}
    assert persist.calls == []

    assembler.set_answer("mc", "B")
    result = asyncio.run(assembler.submit())
    assert persist.calls == [{"mc": "B"}]
    assert result["answers"] == {"mc": "B"}


def test_only_edited_questions_are_submitted():
    assembler = ResponseAssembler([PICK, NOTES])
    assembler.update({"mc": "A", "txt": ""})
    assert assembler.assemble() == {"mc": "A", "txt": ""}


@pytest.mark.parametrize("blank", ["", "   ", [], [""], ["  "], None])
def test_blank_values_fail_required_questions(blank):
    assembler = ResponseAssembler([PICK])
    assembler.set_answer("mc", blank)
    assert assembler.validate() == ["mc"]


def test_blank_optional_choice_is_stored_as_no_selection():
    optional = QuestionBase(id="mc", type="multipleChoice", title="Pick", options=["A", "B"])
    assembler = ResponseAssembler([optional])
    assembler.set_answer("mc", "   ")
    assert assembler.assemble() == {"mc": None}
    assembler.set_answer("mc", ["", "  "])
    assert assembler.assemble() == {"mc": []}


def test_wrong_answer_type_is_reported_with_a_reason():
    assembler = ResponseAssembler([PICK, NOTES])
    assembler.update({"mc": "C", "txt": 12})
    failures = assembler.failures
    assert failures["mc"] == "'C' is not one of the options"
    assert failures["txt"] == "expected text for a shortText question"


def test_answers_for_unknown_questions_are_rejected():
    persist = RecordingPersist()
    assembler = ResponseAssembler([PICK], persist)
    assembler.update({"mc": "A", "ghost": "boo"})
    with pytest.raises(ResponseValidationError) as exc:
        asyncio.run(assembler.submit())
    assert exc.value.question_ids == ["ghost"]
    assert persist.calls == []


def test_required_unsupported_question_only_needs_a_value():
    legacy = QuestionBase(id="sig", type="signature", title="Sign here", required=True)
    assembler = ResponseAssembler([legacy])
    assert assembler.validate() == ["sig"]
    assembler.set_answer("sig", "J. Doe")
    assert assembler.assemble() == {"sig": "J. Doe"}


def test_rendered_controls_write_back_into_the_mapping():
    assembler = ResponseAssembler([PICK, NOTES])
    pick, notes = assembler.render()
    assert pick.change("B") is True
    assert notes.change("see you") is True
    assert assembler.answers == {"mc": "B", "txt": "see you"}


def test_preview_controls_do_not_touch_the_mapping():
    assembler = ResponseAssembler([PICK, NOTES])
    assembler.set_answer("txt", "draft")
    controls = assembler.render(preview=True)
    assert [bound.control.read_only for bound in controls] == [True, True]
    assert controls[1].control.value == "draft"
    assert controls[0].change("A") is False
    assert assembler.answers == {"txt": "draft"}


def test_answers_property_is_a_copy():
    assembler = ResponseAssembler([NOTES])
    assembler.answers["txt"] = "sneaky"
    assert assembler.answers == {}


def test_submit_without_persistence_is_an_error():
    assembler = ResponseAssembler([NOTES])
    with pytest.raises(RuntimeError):
        asyncio.run(assembler.submit())
