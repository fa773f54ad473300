# Endpoints to run a quiz: generate, answer, grade and finish
# aceai/endpoints/quizzes.py
from typing import List

from fastapi import APIRouter
from pydantic import Field

from aceai.models.content import UploadedFile
from aceai.models.enums import Difficulty
from aceai.models.question import CamelModel
from aceai.models.session import QuizSession, SubmittedAnswer, UserAnswer
from aceai.state_manager import quiz_service
from aceai.utils.exceptions import AceAIError, app_error_to_http
from aceai.utils.logger import logger

router = APIRouter()


class QuizRequest(CamelModel):
    topic: str = Field(min_length=1)
    difficulty: Difficulty = Difficulty.MEDIUM
    count: int = Field(default=5, ge=1, le=50)
    files: List[UploadedFile] = Field(default_factory=list)


class AnswerRequest(CamelModel):
    answer: SubmittedAnswer


@router.post("/", response_model=QuizSession)
async def create_quiz(request: QuizRequest):
    logger.info(f"Quiz requested: topic='{request.topic}', difficulty={request.difficulty.value}, count={request.count}")
    try:
        return await quiz_service.generate_quiz(
            request.files, request.topic, request.difficulty.value, request.count,
        )
    except AceAIError as e:
        raise app_error_to_http(e)


@router.get("/{session_id}", response_model=QuizSession)
async def get_quiz(session_id: str):
    try:
        return quiz_service.get_session(session_id)
    except AceAIError as e:
        raise app_error_to_http(e)


@router.put("/{session_id}/answers/{question_id}", response_model=UserAnswer)
async def submit_answer(session_id: str, question_id: str, request: AnswerRequest):
    try:
        return quiz_service.record_answer(session_id, question_id, request.answer)
    except AceAIError as e:
        raise app_error_to_http(e)


@router.post("/{session_id}/answers/{question_id}/grade", response_model=UserAnswer)
async def grade_answer(session_id: str, question_id: str):
    try:
        return await quiz_service.grade_answer(session_id, question_id)
    except AceAIError as e:
        raise app_error_to_http(e)


@router.post("/{session_id}/finish", response_model=QuizSession)
async def finish_quiz(session_id: str):
    """Scores the session and folds it into the learner statistics. Idempotent."""
    try:
        return quiz_service.finish_session(session_id)
    except AceAIError as e:
        raise app_error_to_http(e)
