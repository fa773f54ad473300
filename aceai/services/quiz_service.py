# End-to-end quiz flow: import uploads, retrieve context, generate, grade, finish
# aceai/services/quiz_service.py
from typing import Dict, List, Optional, Sequence

from aceai.models.content import UploadedFile
from aceai.models.session import GradingResult, QuizSession, SubmittedAnswer, UserAnswer
from aceai.services.content_normalizer import normalize_files
from aceai.services.generation import GenerationOrchestrator
from aceai.services.grading import GradingOrchestrator
from aceai.services.import_merger import KnowledgeBase, MergeReport
from aceai.services.orchestration import new_entity_id, now_millis
from aceai.services.retriever import find_relevant_questions, find_relevant_syllabuses
from aceai.services.session_scorer import finalize_session
from aceai.services.stats_service import StatsTracker
from aceai.utils.exceptions import (
    AnswerNotRecordedError,
    SessionCompletedError,
    SessionNotFoundError,
    UnknownQuestionError,
)
from aceai.utils.logger import logger


class QuizService:
    def __init__(
        self,
        knowledge_base: KnowledgeBase,
        generation: GenerationOrchestrator,
        grading: GradingOrchestrator,
        stats: StatsTracker,
        max_examples: int = 5,
    ):
        self.knowledge_base = knowledge_base
        self.generation = generation
        self.grading = grading
        self.stats = stats
        self.max_examples = max_examples
        self.sessions: Dict[str, QuizSession] = {}
        self.last_import: Optional[MergeReport] = None

    def reset(self):
        self.sessions.clear()
        self.last_import = None

    async def generate_quiz(
        self,
        files: Sequence[UploadedFile],
        topic: str,
        difficulty: str,
        count: int,
    ) -> QuizSession:
        parts = []
        import_failure = None
        self.last_import = None
        if files:
            # Uploaded material is imported first so retrieval already sees it
            logger.info(f"Processing {len(files)} uploaded file(s)...")
            parts = await normalize_files(files)
            if not parts:
                import_failure = "no content could be extracted from the uploaded files"
            else:
                import_result = await self.generation.analyze_and_import_file(files, topic, parts=parts)
                if import_result is None:
                    # Read before the next orchestrator call resets it
                    import_failure = self.generation.last_failure or "file analysis returned nothing usable"
                else:
                    self.last_import = await self.knowledge_base.merge_import_result(import_result)
            if import_failure:
                logger.warning(f"Uploaded files were not imported: {import_failure}")

        store = self.knowledge_base.store
        examples = await find_relevant_questions(store, topic)
        syllabuses = await find_relevant_syllabuses(store, topic)
        logger.info(f"Found {len(examples)} examples and {len(syllabuses)} syllabuses for topic: {topic}")

        questions = await self.generation.generate_quiz(
            topic,
            difficulty,
            count,
            parts=parts,
            examples=examples[: self.max_examples],
            syllabuses=syllabuses,
        )

        session = QuizSession(
            id=new_entity_id(),
            title=f"{topic} - {difficulty}",
            questions=questions,
            start_time=now_millis(),
            import_failure=import_failure,
        )
        self.sessions[session.id] = session
        logger.info(f"Created quiz session {session.id} with {len(questions)} question(s).")
        return session

    def get_session(self, session_id: str) -> QuizSession:
        session = self.sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def list_sessions(self) -> List[QuizSession]:
        return list(self.sessions.values())

    def _open_session(self, session_id: str) -> QuizSession:
        session = self.get_session(session_id)
        if session.is_completed:
            raise SessionCompletedError(session_id)
        return session

    def record_answer(self, session_id: str, question_id: str, answer: SubmittedAnswer) -> UserAnswer:
        session = self._open_session(session_id)
        if not session.has_question(question_id):
            raise UnknownQuestionError(session_id, question_id)
        # A changed answer discards any previous verdict
        user_answer = UserAnswer(question_id=question_id, answer=answer)
        session.answers[question_id] = user_answer
        return user_answer

    async def grade_answer(self, session_id: str, question_id: str) -> UserAnswer:
        session = self._open_session(session_id)
        question = session.get_question(question_id)
        if question is None:
            raise UnknownQuestionError(session_id, question_id)
        user_answer = session.answers.get(question_id)
        if user_answer is None:
            raise AnswerNotRecordedError(session_id, question_id)

        verdict: GradingResult = await self.grading.grade_answer(question, user_answer.answer)
        if session.is_completed:
            # Finished while the model was grading; the final score stays as recorded
            raise SessionCompletedError(session_id)
        graded = user_answer.model_copy(update={
            "is_correct": verdict.is_correct,
            "score": verdict.score,
            "ai_feedback": verdict.feedback,
        })
        session.answers[question_id] = graded
        return graded

    def finish_session(self, session_id: str) -> QuizSession:
        session = self.get_session(session_id)
        if session.is_completed:
            return session
        finalize_session(session)
        self.stats.record_session(session)
        return session
