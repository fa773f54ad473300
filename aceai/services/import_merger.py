# aceai/services/import_merger.py
from typing import Iterable, List, Sequence, TypeVar

from pydantic import BaseModel, Field

from aceai.models.question import Question
from aceai.models.syllabus import ImportResult, KnowledgeBackup, Syllabus
from aceai.services.knowledge_store import KnowledgeStore
from aceai.utils.logger import logger

Entity = TypeVar("Entity", Question, Syllabus)


class MergeReport(BaseModel):
    added: List[str] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)

    def extend(self, other: "MergeReport") -> "MergeReport":
        return MergeReport(added=self.added + other.added, skipped=self.skipped + other.skipped)


def split_new(existing: Sequence[Entity], incoming: Iterable[Entity]) -> tuple[List[Entity], List[str]]:
    """
    Returns the incoming entities whose id is not already present (prior state
    wins, and the first occurrence wins among duplicate incoming ids), in input
    order, plus the ids that were skipped.
    """
    seen = {e.id for e in existing}
    fresh: List[Entity] = []
    skipped: List[str] = []
    for entity in incoming:
        if entity.id in seen:
            skipped.append(entity.id)
            continue
        seen.add(entity.id)
        fresh.append(entity)
    return fresh, skipped


class KnowledgeBase:
    """
    In-memory view of the question bank and syllabuses, kept consistent with
    the knowledge store: new entities are persisted first and only appended to
    memory once the write succeeded.
    """

    def __init__(self, store: KnowledgeStore):
        self.store = store
        self.questions: List[Question] = []
        self.syllabuses: List[Syllabus] = []

    def reset(self):
        self.questions = []
        self.syllabuses = []

    async def load(self) -> MergeReport:
        """Merges everything currently persisted into the in-memory collections."""
        stored_questions = await self.store.get_all_questions()
        stored_syllabuses = await self.store.get_all_syllabuses()

        fresh_q, skipped_q = split_new(self.questions, stored_questions)
        fresh_s, skipped_s = split_new(self.syllabuses, stored_syllabuses)
        self.questions = self.questions + fresh_q
        self.syllabuses = self.syllabuses + fresh_s

        logger.info(f"Loaded {len(fresh_q)} questions and {len(fresh_s)} syllabuses from the knowledge store.")
        return MergeReport(
            added=[e.id for e in fresh_q + fresh_s],
            skipped=skipped_q + skipped_s,
        )

    async def merge_questions(self, incoming: Iterable[Question]) -> MergeReport:
        _, question_report = await self._merge([], incoming)
        return question_report

    async def merge_syllabuses(self, incoming: Iterable[Syllabus]) -> MergeReport:
        syllabus_report, _ = await self._merge(incoming, [])
        return syllabus_report

    async def merge_import_result(self, result: ImportResult) -> MergeReport:
        syllabuses = [result.syllabus] if result.syllabus is not None else []
        syllabus_report, question_report = await self._merge(syllabuses, result.questions)
        return syllabus_report.extend(question_report)

    async def import_backup(self, backup: KnowledgeBackup) -> dict:
        syllabus_report, question_report = await self._merge(backup.syllabuses, backup.question_bank)
        return {"syllabuses": syllabus_report, "questionBank": question_report}

    async def _merge(
        self, syllabuses: Iterable[Syllabus], questions: Iterable[Question]
    ) -> tuple[MergeReport, MergeReport]:
        fresh_s, skipped_s = split_new(self.syllabuses, syllabuses)
        fresh_q, skipped_q = split_new(self.questions, questions)
        if fresh_s or fresh_q:
            # One transaction for both collections; on StorageError neither list changes
            await self.store.put_knowledge(fresh_s, fresh_q)
            self.syllabuses = self.syllabuses + fresh_s
            self.questions = self.questions + fresh_q
        logger.info(
            f"Merged {len(fresh_s)} syllabuses and {len(fresh_q)} questions "
            f"({len(skipped_s) + len(skipped_q)} already present)."
        )
        return (
            MergeReport(added=[s.id for s in fresh_s], skipped=skipped_s),
            MergeReport(added=[q.id for q in fresh_q], skipped=skipped_q),
        )

    def export_backup(self) -> KnowledgeBackup:
        return KnowledgeBackup(syllabuses=list(self.syllabuses), question_bank=list(self.questions))

    async def delete_question(self, question_id: str) -> bool:
        removed = await self.store.delete_question(question_id)
        in_memory = any(q.id == question_id for q in self.questions)
        self.questions = [q for q in self.questions if q.id != question_id]
        return removed or in_memory

    async def delete_syllabus(self, syllabus_id: str) -> bool:
        removed = await self.store.delete_syllabus(syllabus_id)
        in_memory = any(s.id == syllabus_id for s in self.syllabuses)
        self.syllabuses = [s for s in self.syllabuses if s.id != syllabus_id]
        return removed or in_memory
