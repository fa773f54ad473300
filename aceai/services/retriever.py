# Tag/substring retrieval of stored knowledge for a free-text topic
# aceai/services/retriever.py
from typing import List

from aceai.models.question import Question
from aceai.models.syllabus import Syllabus
from aceai.services.knowledge_store import KnowledgeStore
from aceai.utils.logger import logger


def question_matches(question: Question, query: str) -> bool:
    needle = query.lower()
    return any(needle in tag.lower() for tag in question.tags) or needle in question.text.lower()


def syllabus_matches(syllabus: Syllabus, query: str) -> bool:
    needle = query.lower()
    if needle in syllabus.course_name.lower():
        return True
    return any(
        needle in module.title.lower() or any(needle in point.lower() for point in module.key_points)
        for module in syllabus.modules
    )


async def find_relevant_questions(store: KnowledgeStore, query: str) -> List[Question]:
    """Full scan + filter; keeps the store's scan order. Callers truncate."""
    questions = await store.get_all_questions()
    matches = [q for q in questions if question_matches(q, query)]
    logger.debug(f"Retrieved {len(matches)}/{len(questions)} questions for query '{query}'")
    return matches


async def find_relevant_syllabuses(store: KnowledgeStore, query: str) -> List[Syllabus]:
    syllabuses = await store.get_all_syllabuses()
    matches = [s for s in syllabuses if syllabus_matches(s, query)]
    logger.debug(f"Retrieved {len(matches)}/{len(syllabuses)} syllabuses for query '{query}'")
    return matches
