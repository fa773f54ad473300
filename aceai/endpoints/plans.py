# Learner statistics and study plan generation
# aceai/endpoints/plans.py
from typing import List

from fastapi import APIRouter

from aceai.models.question import CamelModel
from aceai.models.session import UserStats
from aceai.state_manager import generation_orchestrator, stats_tracker
from aceai.utils.exceptions import AceAIError, app_error_to_http
from aceai.utils.logger import logger

router = APIRouter()


class StudyPlanResponse(CamelModel):
    plan: str
    weak_points: List[str]
    recent_scores: List[float]


@router.get("/stats", response_model=UserStats)
async def get_stats():
    return stats_tracker.stats


@router.post("/", response_model=StudyPlanResponse)
async def create_study_plan():
    """Builds a plan from the current weak points and the last few quiz scores."""
    weak_points = list(stats_tracker.stats.weak_points)
    recent_scores = stats_tracker.recent_scores()
    logger.info(f"Study plan requested: weak points {weak_points}, recent scores {recent_scores}")
    try:
        plan = await generation_orchestrator.generate_study_plan(weak_points, recent_scores)
    except AceAIError as e:
        raise app_error_to_http(e)
    return StudyPlanResponse(plan=plan, weak_points=weak_points, recent_scores=recent_scores)
