# Learner statistics that feed the study plan
# aceai/services/stats_service.py
from datetime import datetime, timezone
from typing import Dict, List

from aceai.models.session import ActivityEntry, QuizSession, UserStats
from aceai.utils.config import settings
from aceai.utils.logger import logger


class StatsTracker:
    def __init__(self, weak_point_threshold: float = settings.weak_point_threshold):
        self.weak_point_threshold = weak_point_threshold
        self.stats = UserStats()
        # tag -> [score total, answer count]
        self._tag_totals: Dict[str, List[float]] = {}

    def reset(self):
        self.stats = UserStats()
        self._tag_totals = {}

    def record_session(self, session: QuizSession) -> UserStats:
        """Folds a finished session into the running statistics."""
        stats = self.stats
        session_score = session.score * 100
        stats.average_score = (
            (stats.average_score * stats.total_quizzes + session_score) / (stats.total_quizzes + 1)
        )
        stats.total_quizzes += 1
        stats.recent_activity.append(
            ActivityEntry(date=datetime.now(timezone.utc).isoformat(), score=session_score)
        )

        for question in session.questions:
            answer = session.answers.get(question.id)
            score = answer.score if answer and answer.score is not None else 0
            for tag in question.tags:
                totals = self._tag_totals.setdefault(tag, [0.0, 0])
                totals[0] += score
                totals[1] += 1

        stats.topic_strength = {
            tag: total / count for tag, (total, count) in self._tag_totals.items() if count
        }
        stats.weak_points = sorted(
            (tag for tag, strength in stats.topic_strength.items() if strength < self.weak_point_threshold),
            key=lambda tag: stats.topic_strength[tag],
        )
        logger.info(
            f"Stats updated: {stats.total_quizzes} quizzes, average {stats.average_score:.1f}, "
            f"weak points: {stats.weak_points}"
        )
        return stats

    def recent_scores(self, n: int = settings.recent_scores_for_plan) -> List[float]:
        return [entry.score for entry in self.stats.recent_activity[-n:]]
