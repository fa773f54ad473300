# aceai/models/enums.py
from enum import Enum


class QuestionType(str, Enum):
    """Question formats understood by the quiz and grading flows."""
    SINGLE_CHOICE = "SINGLE_CHOICE"
    MULTI_CHOICE = "MULTI_CHOICE"
    FILL_IN_BLANK = "FILL_IN_BLANK"
    CODE = "CODE"
    ESSAY = "ESSAY"  # Definitions, calculations, logic
    DIAGRAM = "DIAGRAM"

    @property
    def is_choice(self) -> bool:
        return self in (QuestionType.SINGLE_CHOICE, QuestionType.MULTI_CHOICE)


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class ContentKind(str, Enum):
    """Kinds of multimodal content parts sent to the model."""
    TEXT = "text"
    IMAGE = "image"


class ModelVariant(str, Enum):
    """Capability-based model selection."""
    TEXT = "text"
    VISION = "vision"


class GenerationState(str, Enum):
    IDLE = "idle"
    BUILDING_CONTEXT = "building-context"
    AWAITING_MODEL = "awaiting-model"
    PARSING = "parsing"
    DONE = "done"
    FAILED = "failed"
