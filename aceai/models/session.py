# Data models for quiz attempts, submitted answers and grading verdicts
# aceai/models/session.py
from typing import Dict, List, Optional, Union

from pydantic import Field

from aceai.models.question import CamelModel, Question


class AnswerBlob(CamelModel):
    """Binary submission (e.g. a photographed diagram), base64 encoded."""
    media_type: str = "image/png"
    data: str


SubmittedAnswer = Union[AnswerBlob, str, List[str]]


class UserAnswer(CamelModel):
    question_id: str
    answer: SubmittedAnswer
    is_correct: Optional[bool] = None
    ai_feedback: Optional[str] = None
    score: Optional[float] = Field(default=None, ge=0, le=100)


class QuizSession(CamelModel):
    id: str
    title: str
    questions: List[Question] = Field(default_factory=list)
    answers: Dict[str, UserAnswer] = Field(default_factory=dict)
    is_completed: bool = False
    score: float = 0.0  # 0-1 aggregate
    start_time: int  # Epoch milliseconds
    import_failure: Optional[str] = None  # Why the uploaded files added nothing to the knowledge base

    def has_question(self, question_id: str) -> bool:
        return any(q.id == question_id for q in self.questions)

    def get_question(self, question_id: str) -> Optional[Question]:
        return next((q for q in self.questions if q.id == question_id), None)


class GradingResult(CamelModel):
    score: float = Field(ge=0, le=100)
    is_correct: bool
    feedback: str = Field(min_length=1)


class ActivityEntry(CamelModel):
    date: str
    score: float


class UserStats(CamelModel):
    total_quizzes: int = 0
    average_score: float = 0.0  # 0-100
    topic_strength: Dict[str, float] = Field(default_factory=dict)
    recent_activity: List[ActivityEntry] = Field(default_factory=list)
    weak_points: List[str] = Field(default_factory=list)
