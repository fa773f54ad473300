# Durable repository for the question bank and syllabuses
# aceai/services/knowledge_store.py
from typing import Iterable, List

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from aceai.models.question import Question
from aceai.models.records import QuestionRecord, QuestionTag, SyllabusRecord
from aceai.models.syllabus import Syllabus
from aceai.utils.exceptions import StorageError
from aceai.utils.logger import logger


def _apply_question(record: QuestionRecord, question: Question) -> None:
    record.type = question.type.value
    record.text = question.text
    record.options = question.options
    record.correct_answer = question.correct_answer
    record.explanation = question.explanation
    record.hint = question.hint
    record.code_snippet = question.code_snippet
    record.source = question.source
    record.difficulty = question.difficulty.value if question.difficulty else None
    record.tags = [QuestionTag(tag=tag, position=i) for i, tag in enumerate(question.tags)]


def _question_from_record(record: QuestionRecord) -> Question:
    return Question(
        id=record.id,
        type=record.type,
        text=record.text,
        options=record.options,
        correct_answer=record.correct_answer,
        explanation=record.explanation or "",
        tags=[t.tag for t in record.tags],
        hint=record.hint,
        code_snippet=record.code_snippet,
        source=record.source,
        difficulty=record.difficulty,
    )


def _apply_syllabus(record: SyllabusRecord, syllabus: Syllabus) -> None:
    record.course_name = syllabus.course_name
    record.description = syllabus.description
    record.semester = syllabus.semester
    record.modules = [m.model_dump(by_alias=True) for m in syllabus.modules]
    record.added_at = syllabus.added_at


def _syllabus_from_record(record: SyllabusRecord) -> Syllabus:
    return Syllabus(
        id=record.id,
        course_name=record.course_name,
        description=record.description or "",
        semester=record.semester,
        modules=record.modules or [],
        added_at=record.added_at,
    )


class KnowledgeStore:
    """
    Two collections keyed by identifier, with a tag index over questions.
    Every write call runs in a single transaction, so a batch is visible
    to later reads either completely or not at all.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    # --- Writes ---

    async def put_question(self, question: Question) -> None:
        await self.put_questions([question])

    async def put_questions(self, questions: Iterable[Question]) -> None:
        await self.put_knowledge([], questions)

    async def put_syllabus(self, syllabus: Syllabus) -> None:
        await self.put_syllabuses([syllabus])

    async def put_syllabuses(self, syllabuses: Iterable[Syllabus]) -> None:
        await self.put_knowledge(syllabuses, [])

    async def put_knowledge(self, syllabuses: Iterable[Syllabus], questions: Iterable[Question]) -> None:
        """Upserts syllabuses and questions together; both commit or neither does."""
        valid_syllabuses = [self._validate(Syllabus, s) for s in syllabuses]
        valid_questions = [self._validate(Question, q) for q in questions]
        if not valid_syllabuses and not valid_questions:
            return
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    await self._upsert(session, SyllabusRecord, valid_syllabuses, _apply_syllabus)
                    await self._upsert(session, QuestionRecord, valid_questions, _apply_question)
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to store {len(valid_syllabuses)} syllabus(es) and {len(valid_questions)} question(s): {e}"
            )
            raise StorageError("write", str(e)) from e
        logger.debug(f"Stored {len(valid_syllabuses)} syllabus(es) and {len(valid_questions)} question(s).")

    async def delete_question(self, question_id: str) -> bool:
        return await self._delete(QuestionRecord, question_id)

    async def delete_syllabus(self, syllabus_id: str) -> bool:
        return await self._delete(SyllabusRecord, syllabus_id)

    # --- Reads ---

    async def get_all_questions(self) -> List[Question]:
        records = await self._scan(select(QuestionRecord))
        return [_question_from_record(r) for r in records]

    async def get_all_syllabuses(self) -> List[Syllabus]:
        records = await self._scan(select(SyllabusRecord))
        return [_syllabus_from_record(r) for r in records]

    async def get_questions_by_tag(self, tag: str) -> List[Question]:
        """Exact match on one of the question's tags."""
        stmt = (
            select(QuestionRecord)
            .join(QuestionTag, QuestionTag.question_id == QuestionRecord.id)
            .where(QuestionTag.tag == tag)
        )
        records = await self._scan(stmt)
        return [_question_from_record(r) for r in records]

    # --- Helpers ---

    @staticmethod
    def _validate(model, entity):
        # Re-run validation so that mutated or hand-built instances never reach the table
        try:
            return model.model_validate(entity.model_dump())
        except ValidationError as e:
            raise StorageError("validation", str(e)) from e

    @staticmethod
    async def _upsert(session: AsyncSession, record_type, entities, apply) -> None:
        # Sequential upserts: the last write for an id in the batch wins
        for entity in entities:
            record = await session.get(record_type, entity.id)
            if record is None:
                record = record_type(id=entity.id)
                session.add(record)
            apply(record, entity)
            await session.flush()

    async def _scan(self, stmt):
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                return result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Knowledge store read failed: {e}")
            raise StorageError("read", str(e)) from e

    async def _delete(self, record_type, entity_id: str) -> bool:
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    record = await session.get(record_type, entity_id)
                    if record is None:
                        return False
                    await session.delete(record)
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete {record_type.__tablename__} '{entity_id}': {e}")
            raise StorageError("delete", str(e)) from e
        logger.info(f"Deleted {record_type.__tablename__} '{entity_id}'.")
        return True
