# tests/conftest.py
import asyncio
import logging
import os
import tempfile

import pytest

# Point the app at a throwaway database and a dummy credential before it is imported
TEST_DB_DIR = tempfile.mkdtemp(prefix="aceai-tests-")
TEST_DB_PATH = os.path.join(TEST_DB_DIR, "aceai_test.db")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["DASHSCOPE_API_KEY"] = "test-key"

from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from aceai.services.knowledge_store import KnowledgeStore
from aceai.utils.config import LLMConfig
from aceai.utils.db import init_db

from helpers import FakeLLMClient

# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# --- Fixtures ---

@pytest.fixture
def llm_config():
    return LLMConfig(api_key="test-key")


@pytest.fixture
def fake_llm():
    return FakeLLMClient()


@pytest.fixture
def with_store(tmp_path):
    """
    Runs `scenario(store)` against a fresh on-disk store and returns its result.
    The engine is created and disposed inside the same event loop.
    """
    def run(scenario, db_name="store.db"):
        async def _run():
            engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / db_name}")
            try:
                await init_db(engine)
                store = KnowledgeStore(async_sessionmaker(engine, expire_on_commit=False))
                return await scenario(store)
            finally:
                await engine.dispose()
        return asyncio.run(_run())
    return run


@pytest.fixture
def app_llm(monkeypatch):
    """Swaps the model client of the app-wide orchestrators for a scripted fake."""
    from aceai import state_manager

    fake = FakeLLMClient()
    monkeypatch.setattr(state_manager.generation_orchestrator, "client", fake)
    monkeypatch.setattr(state_manager.grading_orchestrator, "client", fake)
    return fake


@pytest.fixture
def client(app_llm):
    """TestClient on an empty database with all in-memory state cleared."""
    from aceai.main import app
    from aceai.state_manager import reset_state

    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)
    reset_state()
    with TestClient(app) as c:
        yield c
    reset_state()
