# Data model for questions in the knowledge base
# aceai/models/question.py
import json
import string
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from aceai.models.enums import Difficulty, QuestionType

Answer = Union[str, List[str]]


class CamelModel(BaseModel):
    """Base model: snake_case attributes, camelCase JSON."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _option_for(answer: str, options: List[str]) -> Optional[str]:
    """Resolves an answer to one of the options, either verbatim or by its letter label."""
    candidate = answer.strip()
    if candidate in options:
        return candidate
    label = candidate.rstrip(".)").upper()
    if len(label) == 1 and label in string.ascii_uppercase:
        index = string.ascii_uppercase.index(label)
        if index < len(options):
            return options[index]
    return None


class Question(CamelModel):
    id: str = Field(min_length=1)
    type: QuestionType
    text: str
    options: Optional[List[str]] = None  # For single/multi choice
    correct_answer: Optional[Answer] = None  # Option string, option list, or rubric text
    explanation: str = ""
    tags: List[str] = Field(default_factory=list)
    hint: Optional[str] = None
    code_snippet: Optional[str] = None  # Question context only, never the solution
    source: Optional[str] = None
    difficulty: Optional[Difficulty] = None

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, tags: List[str]) -> List[str]:
        unique = []
        for tag in tags:
            tag = tag.strip()
            if tag and tag not in unique:
                unique.append(tag)
        return unique

    @model_validator(mode="after")
    def check_choice_answer(self) -> "Question":
        if not self.type.is_choice:
            return self
        if not self.options:
            raise ValueError(f"{self.type.value} question requires a non-empty options list")
        if self.correct_answer is None:
            raise ValueError(f"{self.type.value} question requires a correct answer")

        answer = self.correct_answer
        if self.type == QuestionType.MULTI_CHOICE and isinstance(answer, str):
            # The model sometimes returns a JSON-stringified array
            try:
                decoded = json.loads(answer)
            except json.JSONDecodeError:
                decoded = [answer]
            answer = decoded if isinstance(decoded, list) else [str(decoded)]

        answers = answer if isinstance(answer, list) else [answer]
        if not answers:
            raise ValueError("choice question has an empty correct answer")
        for item in answers:
            if _option_for(str(item), self.options) is None:
                raise ValueError(f"correct answer '{item}' is not one of the options")

        if self.type == QuestionType.MULTI_CHOICE:
            self.correct_answer = [str(item) for item in answers]
        return self
