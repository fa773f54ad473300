# tests/test_retriever.py
import pytest

from aceai.models.syllabus import SyllabusModule
from aceai.services.retriever import (
    find_relevant_questions,
    find_relevant_syllabuses,
    question_matches,
    syllabus_matches,
)

from helpers import make_question, make_syllabus

pytestmark = pytest.mark.store


def test_question_matches_tag_substring_case_insensitive():
    question = make_question(tags=("Computer Networking",))
    assert question_matches(question, "network")
    assert question_matches(question, "NETWORKING")


def test_question_matches_text_substring():
    question = make_question(text="Explain the three-way handshake", tags=())
    assert question_matches(question, "HANDSHAKE")
    assert not question_matches(question, "routing")


def test_syllabus_matches_course_module_and_key_points():
    syllabus = make_syllabus(
        course_name="Operating Systems",
        modules=[SyllabusModule(title="Scheduling", key_points=["Round Robin", "Priority inversion"])],
    )
    assert syllabus_matches(syllabus, "operating")
    assert syllabus_matches(syllabus, "schedul")
    assert syllabus_matches(syllabus, "round robin")
    assert not syllabus_matches(syllabus, "paging")


def test_description_alone_does_not_match():
    syllabus = make_syllabus(description="Covers databases in depth", modules=[])
    assert not syllabus_matches(syllabus, "databases")


def test_find_relevant_filters_stored_knowledge(with_store):
    async def scenario(store):
        await store.put_questions([
            make_question("q1", tags=("networking",)),
            make_question("q2", text="What is a page fault?", tags=("os",)),
            make_question("q3", text="Define network latency", tags=()),
        ])
        await store.put_syllabuses([
            make_syllabus("s1"),
            make_syllabus("s2", course_name="Compilers", modules=[]),
        ])
        return (
            await find_relevant_questions(store, "Network"),
            await find_relevant_syllabuses(store, "tcp"),
            await find_relevant_questions(store, "quantum"),
        )

    questions, syllabuses, nothing = with_store(scenario)
    assert {q.id for q in questions} == {"q1", "q3"}
    assert [s.id for s in syllabuses] == ["s1"]
    assert nothing == []


def test_empty_query_matches_everything():
    assert question_matches(make_question(tags=()), "")
    assert syllabus_matches(make_syllabus(modules=[]), "")
