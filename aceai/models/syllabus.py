# aceai/models/syllabus.py
from typing import List, Optional

from pydantic import Field

from aceai.models.question import CamelModel, Question


class SyllabusModule(CamelModel):
    title: str
    key_points: List[str] = Field(default_factory=list)


class Syllabus(CamelModel):
    id: str = Field(min_length=1)
    course_name: str
    description: str = ""
    semester: Optional[str] = None
    modules: List[SyllabusModule] = Field(default_factory=list)
    added_at: int  # Epoch milliseconds


class ImportResult(CamelModel):
    """What a mixed extraction produced; either part may be absent."""
    syllabus: Optional[Syllabus] = None
    questions: List[Question] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.syllabus is None and not self.questions


class KnowledgeBackup(CamelModel):
    """Shape of the bulk backup file."""
    syllabuses: List[Syllabus] = Field(default_factory=list)
    question_bank: List[Question] = Field(default_factory=list)
