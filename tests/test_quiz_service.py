# tests/test_quiz_service.py
import json

import pytest

from aceai.models.content import UploadedFile
from aceai.services.generation import GenerationOrchestrator
from aceai.services.grading import GradingOrchestrator
from aceai.services.import_merger import KnowledgeBase
from aceai.services.quiz_service import QuizService
from aceai.services.stats_service import StatsTracker
from aceai.models.session import GradingResult
from aceai.utils.exceptions import (
    AnswerNotRecordedError,
    SessionCompletedError,
    SessionNotFoundError,
    UnknownQuestionError,
)

from helpers import b64, make_question, make_syllabus

QUIZ = json.dumps({"questions": [
    {"type": "ESSAY", "text": "Explain flow control.", "correctAnswer": "Receiver window", "tags": ["tcp"]},
    {"type": "FILL_IN_BLANK", "text": "TCP uses a ___-way handshake.", "correctAnswer": "three", "tags": ["tcp"]},
]})


def _service(store, llm_config, fake_llm):
    return QuizService(
        KnowledgeBase(store),
        GenerationOrchestrator(llm_config, client=fake_llm, max_examples=5),
        GradingOrchestrator(llm_config, client=fake_llm),
        StatsTracker(),
        max_examples=1,
    )


def test_generate_quiz_uses_retrieved_context(with_store, llm_config, fake_llm):
    fake_llm.queue(QUIZ)

    async def scenario(store):
        service = _service(store, llm_config, fake_llm)
        await service.knowledge_base.merge_questions([
            make_question("q1", text="TCP example one", tags=("tcp",)),
            make_question("q2", text="TCP example two", tags=("tcp",)),
        ])
        await service.knowledge_base.merge_syllabuses([make_syllabus()])
        return await service.generate_quiz([], "TCP", "Medium", 2)

    session = with_store(scenario)
    assert session.title == "TCP - Medium"
    assert len(session.questions) == 2
    assert session.is_completed is False

    texts = [p.value for p in fake_llm.calls[0]["content"]]
    examples = next(t for t in texts if t.startswith("Relevant Example Questions:"))
    assert ("TCP example one" in examples) != ("TCP example two" in examples)
    assert any(t.startswith("Relevant Syllabus Content:") for t in texts)


def test_uploaded_files_are_imported_before_generation(with_store, llm_config, fake_llm):
    fake_llm.queue(
        json.dumps({"questionsData": [
            {"type": "ESSAY", "text": "Imported TCP question", "correctAnswer": "x", "tags": ["tcp"]},
        ]}),
        QUIZ,
    )
    files = [UploadedFile(name="review.txt", type="text/plain", data=b64(b"TCP review outline"))]

    async def scenario(store):
        service = _service(store, llm_config, fake_llm)
        session = await service.generate_quiz(files, "TCP", "Easy", 2)
        return service, session, await store.get_all_questions()

    service, session, stored = with_store(scenario)
    assert [q.text for q in stored] == ["Imported TCP question"]
    assert service.last_import.added == [stored[0].id]

    quiz_texts = [p.value for p in fake_llm.calls[1]["content"]]
    assert quiz_texts[0] == "Material (review.txt):\nTCP review outline"
    assert any("Imported TCP question" in t for t in quiz_texts)
    assert "STRICT CONSTRAINT" in quiz_texts[-1]


def test_answer_grade_finish_flow(with_store, llm_config, fake_llm):
    fake_llm.queue(QUIZ, json.dumps({"score": 100, "isCorrect": True, "feedback": "Correct"}))

    async def scenario(store):
        service = _service(store, llm_config, fake_llm)
        session = await service.generate_quiz([], "TCP", "Easy", 2)
        first, second = session.questions
        service.record_answer(session.id, first.id, "receiver advertises a window")
        graded = await service.grade_answer(session.id, first.id)
        service.record_answer(session.id, second.id, "three")
        finished = service.finish_session(session.id)
        again = service.finish_session(session.id)
        return service, graded, finished, again

    service, graded, finished, again = with_store(scenario)
    assert graded.score == 100 and graded.is_correct and graded.ai_feedback == "Correct"
    assert finished.is_completed
    assert finished.score == 0.5
    assert again is finished
    assert service.stats.stats.total_quizzes == 1


def test_changing_an_answer_discards_the_verdict(with_store, llm_config, fake_llm):
    fake_llm.queue(QUIZ, json.dumps({"score": 10, "isCorrect": False, "feedback": "No"}))

    async def scenario(store):
        service = _service(store, llm_config, fake_llm)
        session = await service.generate_quiz([], "TCP", "Easy", 2)
        qid = session.questions[0].id
        service.record_answer(session.id, qid, "first try")
        await service.grade_answer(session.id, qid)
        return service.record_answer(session.id, qid, "second try")

    answer = with_store(scenario)
    assert answer.answer == "second try"
    assert answer.score is None and answer.ai_feedback is None


def test_session_errors(with_store, llm_config, fake_llm):
    fake_llm.queue(QUIZ)

    async def scenario(store):
        service = _service(store, llm_config, fake_llm)
        session = await service.generate_quiz([], "TCP", "Easy", 2)
        with pytest.raises(SessionNotFoundError):
            service.get_session("missing")
        with pytest.raises(UnknownQuestionError):
            service.record_answer(session.id, "not-in-session", "x")
        with pytest.raises(AnswerNotRecordedError):
            await service.grade_answer(session.id, session.questions[0].id)
        return True

    assert with_store(scenario)


def test_finished_session_rejects_answers(with_store, llm_config, fake_llm):
    fake_llm.queue(QUIZ)

    async def scenario(store):
        service = _service(store, llm_config, fake_llm)
        session = await service.generate_quiz([], "TCP", "Easy", 2)
        first = session.questions[0].id
        service.record_answer(session.id, first, "three")
        finished = service.finish_session(session.id)
        score = finished.score
        with pytest.raises(SessionCompletedError):
            service.record_answer(session.id, first, "a better answer")
        with pytest.raises(SessionCompletedError):
            await service.grade_answer(session.id, first)
        return finished, score

    finished, score = with_store(scenario)
    assert finished.score == score
    assert list(finished.answers) == [finished.questions[0].id]
    assert finished.answers[finished.questions[0].id].answer == "three"
    assert len(fake_llm.calls) == 1


def test_grade_arriving_after_finish_is_discarded(with_store, llm_config, fake_llm):
    fake_llm.queue(QUIZ)

    class FinishingGrader:
        """Finishes the session while the verdict is still being produced."""

        def __init__(self):
            self.service = None
            self.session_id = None

        async def grade_answer(self, question, answer):
            self.service.finish_session(self.session_id)
            return GradingResult(score=100, is_correct=True, feedback="Correct")

    async def scenario(store):
        service = _service(store, llm_config, fake_llm)
        grader = FinishingGrader()
        service.grading = grader
        session = await service.generate_quiz([], "TCP", "Easy", 2)
        grader.service, grader.session_id = service, session.id
        qid = session.questions[0].id
        service.record_answer(session.id, qid, "receiver window")
        with pytest.raises(SessionCompletedError):
            await service.grade_answer(session.id, qid)
        return session, qid

    session, qid = with_store(scenario)
    assert session.is_completed
    assert session.score == 0.0
    assert session.answers[qid].score is None


def test_failed_file_analysis_is_reported_on_the_session(with_store, llm_config, fake_llm):
    fake_llm.queue("the model rambled instead of answering in JSON", QUIZ)
    files = [UploadedFile(name="notes.txt", type="text/plain", data=b64(b"TCP notes"))]

    async def scenario(store):
        service = _service(store, llm_config, fake_llm)
        session = await service.generate_quiz(files, "TCP", "Easy", 2)
        return service, session

    service, session = with_store(scenario)
    assert len(session.questions) == 2
    assert session.import_failure.startswith("parse error")
    assert service.last_import is None
    assert service.generation.last_failure is None


def test_unreadable_upload_is_reported_on_the_session(with_store, llm_config, fake_llm):
    fake_llm.queue(QUIZ)
    files = [UploadedFile(name="empty.txt", type="text/plain", data="")]

    async def scenario(store):
        service = _service(store, llm_config, fake_llm)
        return await service.generate_quiz(files, "TCP", "Easy", 2)

    session = with_store(scenario)
    assert session.import_failure == "no content could be extracted from the uploaded files"
    assert len(fake_llm.calls) == 1


def test_session_without_uploads_has_no_import_failure(with_store, llm_config, fake_llm):
    fake_llm.queue(QUIZ)

    async def scenario(store):
        return await _service(store, llm_config, fake_llm).generate_quiz([], "TCP", "Easy", 2)

    assert with_store(scenario).import_failure is None
