# aceai/services/session_scorer.py
from aceai.models.session import QuizSession
from aceai.utils.logger import logger


def score_session(session: QuizSession) -> float:
    """
    Mean of the answer scores over ALL questions in the session, scaled to 0-1.
    Unanswered or ungraded questions count as 0.
    """
    if not session.questions:
        return 0.0
    question_ids = {q.id for q in session.questions}
    total = sum(
        answer.score or 0
        for question_id, answer in session.answers.items()
        if question_id in question_ids
    )
    return total / len(session.questions) / 100


def finalize_session(session: QuizSession) -> QuizSession:
    session.score = score_session(session)
    session.is_completed = True
    logger.info(
        f"Session {session.id} finished: {len(session.answers)}/{len(session.questions)} answered, "
        f"score {session.score:.2f}"
    )
    return session
