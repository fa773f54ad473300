# tests/helpers.py
import base64

from aceai.models.enums import QuestionType
from aceai.models.question import Question
from aceai.models.syllabus import Syllabus, SyllabusModule


class FakeLLMClient:
    """Scripted stand-in for the model service; records every call it receives."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []

    def queue(self, *responses):
        self.responses.extend(responses)

    async def complete(self, system, content, variant):
        self.calls.append({"system": system, "content": content, "variant": variant})
        if not self.responses:
            raise AssertionError("FakeLLMClient received an unexpected call")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_question(question_id="q1", text="What does TCP stand for?", tags=("networking",), **overrides) -> Question:
    data = {
        "id": question_id,
        "type": QuestionType.SINGLE_CHOICE,
        "text": text,
        "options": ["Transmission Control Protocol", "Trivial Copy Program"],
        "correct_answer": "Transmission Control Protocol",
        "explanation": "TCP is the Transmission Control Protocol.",
        "tags": list(tags),
    }
    data.update(overrides)
    return Question(**data)


def make_syllabus(syllabus_id="s1", course_name="Computer Networks", **overrides) -> Syllabus:
    data = {
        "id": syllabus_id,
        "course_name": course_name,
        "description": "Undergraduate networking course",
        "modules": [SyllabusModule(title="Transport Layer", key_points=["TCP", "UDP", "Congestion control"])],
        "added_at": 1700000000000,
    }
    data.update(overrides)
    return Syllabus(**data)


def b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")
