# Builds generation prompts, calls the model and turns its JSON into domain entities
# aceai/services/generation.py
import json
from typing import Any, List, Optional, Sequence, Union

from pydantic import Field

from aceai.models.content import ContentPart, UploadedFile
from aceai.models.question import CamelModel, Question
from aceai.models.syllabus import ImportResult, Syllabus, SyllabusModule
from aceai.services import prompt_library as prompts
from aceai.services.content_normalizer import normalize_files
from aceai.services.orchestration import ModelOrchestrator, new_entity_id, now_millis
from aceai.services.response_parser import Ok, SchemaError, failure_reason, parse_json, parse_model, validate_payload
from aceai.utils.logger import logger, preview

GENERATED_SOURCE = "generated"
DEFAULT_UPLOAD_SOURCE = "Uploaded File"
STUDY_PLAN_FALLBACK = "Could not generate plan."


class QuestionDraft(Question):
    """A question as returned by the model; its id is never trusted."""
    id: Optional[str] = None


class SyllabusDraft(CamelModel):
    course_name: str
    description: str = ""
    semester: Optional[str] = None
    modules: List[SyllabusModule] = Field(default_factory=list)


def validate_questions(items: Any, raw: str = "") -> Union[Ok[List[QuestionDraft]], SchemaError]:
    """
    Validates each question record on its own and drops the invalid ones.
    Fails only when the payload is not a list, or when no record survives.
    """
    if not isinstance(items, list):
        return SchemaError(f"expected a list of questions, got {type(items).__name__}", raw)
    drafts: List[QuestionDraft] = []
    rejected: List[str] = []
    for index, item in enumerate(items):
        result = validate_payload(item, QuestionDraft, raw)
        if isinstance(result, Ok):
            drafts.append(result.value)
        else:
            rejected.append(f"#{index}: {result.reason}")
            logger.warning(f"Dropping question #{index} from model output: {failure_reason(result)}")
    if rejected and not drafts:
        return SchemaError(f"all {len(items)} question(s) invalid; first {rejected[0]}", raw)
    return Ok(drafts)


def finalize_questions(drafts: Sequence[QuestionDraft], source: str) -> List[Question]:
    """Assigns fresh ids and provenance to model-produced questions."""
    finalized = []
    for draft in drafts:
        data = draft.model_dump(exclude={"id", "source"})
        finalized.append(Question(id=new_entity_id(), source=source, **data))
    return finalized


def finalize_syllabus(draft: SyllabusDraft) -> Syllabus:
    return Syllabus(id=new_entity_id(), added_at=now_millis(), **draft.model_dump())


def render_examples(examples: Sequence[Question]) -> str:
    lines = ["Relevant Example Questions:"]
    for i, question in enumerate(examples, start=1):
        answer = question.correct_answer
        if isinstance(answer, list):
            answer = json.dumps(answer, ensure_ascii=False)
        lines.append(f"Example {i} ({question.type.value}): {question.text}")
        if question.options:
            lines.append(f"Options: {' | '.join(question.options)}")
        lines.append(f"Answer: {answer}")
    lines.append("---")
    return "\n".join(lines)


def render_syllabuses(syllabuses: Sequence[Syllabus]) -> str:
    lines = ["Relevant Syllabus Content:"]
    for syllabus in syllabuses:
        lines.append(f"Course: {syllabus.course_name}")
        for module in syllabus.modules:
            lines.append(f"- Module: {module.title}")
            lines.append(f"  Key Points: {', '.join(module.key_points)}")
        lines.append("")
    lines.append("---")
    return "\n".join(lines)


class GenerationOrchestrator(ModelOrchestrator):
    """
    idle -> building-context -> awaiting-model -> parsing -> done | failed

    Contract violations in the model output end in `failed` with an empty
    (or None) result. Credential and transport errors are raised.
    """

    def __init__(self, config, client=None, max_examples: int = 5):
        super().__init__(config, client)
        self.max_examples = max_examples

    def build_quiz_content(
        self,
        topic: str,
        difficulty: str,
        count: int,
        parts: Sequence[ContentPart] = (),
        examples: Sequence[Question] = (),
        syllabuses: Sequence[Syllabus] = (),
    ) -> List[ContentPart]:
        """Uploaded parts, example questions, syllabus content, then instructions."""
        content: List[ContentPart] = list(parts)
        capped_examples = list(examples)[: self.max_examples]
        if capped_examples:
            content.append(ContentPart.text(render_examples(capped_examples)))
        if syllabuses:
            content.append(ContentPart.text(render_syllabuses(syllabuses)))

        grounding = prompts.GROUNDING_CONSTRAINT if content else ""
        content.append(ContentPart.text(prompts.QUIZ_INSTRUCTIONS.format(
            topic=topic, difficulty=difficulty, count=count, grounding=grounding,
        )))
        return content

    async def generate_quiz(
        self,
        topic: str,
        difficulty: str,
        count: int,
        parts: Sequence[ContentPart] = (),
        examples: Sequence[Question] = (),
        syllabuses: Sequence[Syllabus] = (),
    ) -> List[Question]:
        self._begin()
        content = self.build_quiz_content(topic, difficulty, count, parts, examples, syllabuses)
        system = prompts.QUIZ_SYSTEM_PROMPT.format(
            topic=topic, difficulty=difficulty, count=count, language=self.config.output_language,
        )
        logger.info(
            f"Generating {count} '{difficulty}' questions on '{topic}' "
            f"({len(parts)} uploaded part(s), {min(len(examples), self.max_examples)} example(s), "
            f"{len(syllabuses)} syllabus(es))"
        )
        response = await self._invoke(system, content)
        return self._finish_questions(response, source=GENERATED_SOURCE)

    async def parse_raw_questions(self, raw_text: str, source_name: str) -> List[Question]:
        self._begin()
        system = prompts.RAW_QUESTIONS_SYSTEM_PROMPT.format(
            source_name=source_name, language=self.config.output_language,
        )
        response = await self._invoke(system, raw_text)
        return self._finish_questions(response, source=source_name)

    async def parse_syllabus(self, raw_text: str) -> Optional[Syllabus]:
        self._begin()
        system = prompts.SYLLABUS_SYSTEM_PROMPT.format(language=self.config.output_language)
        response = await self._invoke(system, raw_text)

        result = parse_model(response, SyllabusDraft)
        if not isinstance(result, Ok):
            self._reject(result, "syllabus")
            return None
        self._done()
        return finalize_syllabus(result.value)

    async def analyze_and_import_file(
        self, files: Sequence[UploadedFile], topic_hint: str, parts: Optional[Sequence[ContentPart]] = None,
    ) -> Optional[ImportResult]:
        """
        Mixed extraction of a syllabus and/or questions from uploaded material.
        `parts` may carry already-normalized content for `files`.
        """
        self._begin()
        content = list(parts) if parts is not None else await normalize_files(files)
        if not content:
            self._fail("no content could be extracted from the uploaded files")
            logger.warning("Nothing to analyze: no content parts were produced.")
            return None

        content.append(ContentPart.text(prompts.IMPORT_INSTRUCTIONS.format(topic_hint=topic_hint)))
        system = prompts.IMPORT_SYSTEM_PROMPT.format(language=self.config.output_language)
        response = await self._invoke(system, content)

        parsed = parse_json(response)
        if not isinstance(parsed, Ok) or not isinstance(parsed.value, dict):
            reason = failure_reason(parsed) if not isinstance(parsed, Ok) else "schema error: expected a JSON object"
            self._fail(reason)
            logger.error(f"Failed to parse analyzed file: {reason}. Raw response: {preview(response)}")
            return None

        payload = parsed.value
        result = ImportResult()
        source = files[0].name if files else DEFAULT_UPLOAD_SOURCE

        syllabus_data = payload.get("syllabusData")
        if syllabus_data:
            syllabus = validate_payload(syllabus_data, SyllabusDraft, response)
            if isinstance(syllabus, Ok):
                result.syllabus = finalize_syllabus(syllabus.value)
            else:
                logger.warning(f"Dropping extracted syllabus: {failure_reason(syllabus)}")

        questions_data = payload.get("questionsData")
        if questions_data:
            batch = validate_questions(questions_data, response)
            if isinstance(batch, Ok):
                result.questions = finalize_questions(batch.value, source=source)
            else:
                logger.warning(f"Dropping extracted questions: {failure_reason(batch)}")

        if result.is_empty:
            self._fail("model output contained neither a syllabus nor questions")
            logger.error(f"Nothing usable in analyzed file response: {preview(response)}")
            return None

        self._done()
        logger.info(
            f"Extracted {'a syllabus and ' if result.syllabus else ''}{len(result.questions)} question(s) from upload."
        )
        return result

    async def generate_study_plan(self, weak_points: Sequence[str], recent_scores: Sequence[float]) -> str:
        self._begin()
        prompt = prompts.STUDY_PLAN_PROMPT.format(
            language=self.config.output_language,
            weak_points=", ".join(weak_points) or "none identified yet",
            recent_scores=", ".join(f"{s:g}" for s in recent_scores) or "no quizzes yet",
        )
        response = await self._invoke(None, prompt)
        if not response or not response.strip():
            self._fail("empty study plan response")
            return STUDY_PLAN_FALLBACK
        self._done()
        return response

    def _finish_questions(self, response: str, source: str) -> List[Question]:
        parsed = parse_json(response)
        if isinstance(parsed, Ok) and isinstance(parsed.value, dict) and "questions" in parsed.value:
            result = validate_questions(parsed.value["questions"], response)
        elif isinstance(parsed, Ok):
            result = SchemaError("expected an object with a 'questions' list", response)
        else:
            result = parsed
        if not isinstance(result, Ok):
            self._reject(result, "questions")
            return []
        self._done()
        questions = finalize_questions(result.value, source=source)
        logger.info(f"Parsed {len(questions)} question(s) from model output.")
        return questions

    def _reject(self, result, what: str):
        reason = failure_reason(result)
        self._fail(reason)
        logger.error(f"Failed to parse {what} response ({reason}). Raw response: {preview(result.raw)}")
