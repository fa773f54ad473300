# Process-wide service instances shared by the endpoints
# aceai/state_manager.py
from aceai.services.generation import GenerationOrchestrator
from aceai.services.grading import GradingOrchestrator
from aceai.services.import_merger import KnowledgeBase
from aceai.services.knowledge_store import KnowledgeStore
from aceai.services.quiz_service import QuizService
from aceai.services.stats_service import StatsTracker
from aceai.utils.config import settings
from aceai.utils.db import AsyncSessionLocal

knowledge_store = KnowledgeStore(AsyncSessionLocal)
knowledge_base = KnowledgeBase(knowledge_store)

# Shared across requests: `state` and `last_failure` reflect the latest call only
generation_orchestrator = GenerationOrchestrator(
    settings.llm_config(),
    max_examples=settings.max_example_questions,
)
grading_orchestrator = GradingOrchestrator(settings.llm_config())

stats_tracker = StatsTracker(settings.weak_point_threshold)

quiz_service = QuizService(
    knowledge_base,
    generation_orchestrator,
    grading_orchestrator,
    stats_tracker,
    max_examples=settings.max_example_questions,
)


def reset_state():
    """Forgets everything held in memory. The persistent store is not touched."""
    knowledge_base.reset()
    stats_tracker.reset()
    quiz_service.reset()
