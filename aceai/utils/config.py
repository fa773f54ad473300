# aceai/utils/config.py
import os
from pydantic import BaseModel
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load .env file before defining settings
load_dotenv()


class LLMConfig(BaseModel):
    """Explicit model-service configuration handed to the orchestrators."""
    api_key: str | None = None
    base_url: str = "https://dashscope.aliyuncs.com/compatible-mode/v1"
    text_model: str = "qwen-plus"
    vision_model: str = "qwen-vl-max"
    temperature: float = 0.7
    output_language: str = "Simplified Chinese"


class Settings(BaseSettings):
    # Storage
    database_url: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./aceai.db")

    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_preview_chars: int = 400  # Raw model output is cut to this length in log lines

    # --- LLM Service (OpenAI-compatible endpoint) ---
    llm_api_key: str | None = os.getenv("DASHSCOPE_API_KEY")
    llm_base_url: str = os.getenv("LLM_BASE_URL", "https://dashscope.aliyuncs.com/compatible-mode/v1")
    llm_text_model: str = os.getenv("LLM_TEXT_MODEL", "qwen-plus")
    llm_vision_model: str = os.getenv("LLM_VISION_MODEL", "qwen-vl-max")
    llm_temperature: float = 0.7
    llm_output_language: str = os.getenv("LLM_OUTPUT_LANGUAGE", "Simplified Chinese")

    # Ingestion
    max_pdf_pages: int = 30  # Caps rasterized pages per PDF to bound payload size
    pdf_render_scale: float = 1.5

    # Generation context
    max_example_questions: int = 5

    # Stats
    weak_point_threshold: float = 60.0
    recent_scores_for_plan: int = 3

    def llm_config(self) -> LLMConfig:
        return LLMConfig(
            api_key=self.llm_api_key or None,
            base_url=self.llm_base_url,
            text_model=self.llm_text_model,
            vision_model=self.llm_vision_model,
            temperature=self.llm_temperature,
            output_language=self.llm_output_language,
        )


settings = Settings()
