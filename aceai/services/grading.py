# aceai/services/grading.py
import base64
import json
from typing import List

from aceai.models.content import ContentPart
from aceai.models.enums import QuestionType
from aceai.models.question import Question
from aceai.models.session import AnswerBlob, GradingResult, SubmittedAnswer
from aceai.services import prompt_library as prompts
from aceai.services.content_normalizer import decode_transport
from aceai.services.orchestration import ModelOrchestrator
from aceai.services.response_parser import Ok, failure_reason, parse_model
from aceai.utils.logger import logger, preview

GRADING_FAILED_FEEDBACK = "Error grading submission."


def fallback_verdict() -> GradingResult:
    return GradingResult(score=0, is_correct=False, feedback=GRADING_FAILED_FEEDBACK)


def serialize_answer(answer: SubmittedAnswer) -> str:
    if isinstance(answer, AnswerBlob):
        return json.dumps(f"[binary submission: {answer.media_type}]")
    return json.dumps(answer, ensure_ascii=False)


class GradingOrchestrator(ModelOrchestrator):

    def build_content(self, question: Question, answer: SubmittedAnswer) -> List[ContentPart]:
        correct_answer = question.correct_answer
        if isinstance(correct_answer, list):
            correct_answer = json.dumps(correct_answer, ensure_ascii=False)
        content = [ContentPart.text(prompts.GRADING_QUESTION.format(
            question_type=question.type.value,
            question_text=question.text,
            correct_answer=correct_answer,
            explanation=question.explanation,
        ))]

        if question.type == QuestionType.DIAGRAM and isinstance(answer, AnswerBlob):
            # Re-encode so only well-formed base64 is forwarded
            payload = decode_transport(answer.data)
            content.append(ContentPart.image(answer.media_type, base64.b64encode(payload).decode("ascii")))
            content.append(ContentPart.text("Student submitted the attached diagram."))
        else:
            content.append(ContentPart.text(f"Student Answer: {serialize_answer(answer)}"))
        return content

    async def grade_answer(self, question: Question, answer: SubmittedAnswer) -> GradingResult:
        """
        Grades one submission. A malformed verdict yields the fixed fallback
        verdict; credential and transport errors are raised.
        """
        self._begin()
        try:
            content = self.build_content(question, answer)
        except ValueError as e:
            logger.warning(f"Could not read submitted diagram for question {question.id}: {e}")
            content = self.build_content(question, "[unreadable diagram submission]")

        system = prompts.GRADING_SYSTEM_PROMPT.format(language=self.config.output_language)
        response = await self._invoke(system, content)

        result = parse_model(response, GradingResult)
        if not isinstance(result, Ok):
            reason = failure_reason(result)
            self._fail(reason)
            logger.error(f"Failed to parse grading response for question {question.id} ({reason}). Raw: {preview(response)}")
            return fallback_verdict()

        self._done()
        logger.info(f"Graded question {question.id}: score={result.value.score}, correct={result.value.is_correct}")
        return result.value
