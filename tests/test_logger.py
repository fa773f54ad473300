# tests/test_logger.py
import asyncio
import logging

from aceai.services.generation import GenerationOrchestrator
from aceai.utils.logger import logger, preview

from helpers import b64


def test_logger_writes_to_its_own_handler():
    assert logger.name == "aceai"
    assert logger.propagate is False
    assert len(logger.handlers) == 1


def test_preview_cuts_long_model_output():
    text = preview("x" * 50, limit=10)
    assert text == repr("x" * 10 + "... [40 more chars]")


def test_preview_hides_inline_image_payloads():
    data_url = f"data:image/png;base64,{b64(b'not really a png' * 20)}"
    text = preview(f'{{"answer": "{data_url}"}}', limit=1000)
    assert "base64" not in text
    assert f"<image/png image, {len(data_url)} chars>" in text


def test_preview_handles_missing_output():
    assert preview(None) == "''"
    assert preview("") == "''"


def test_model_parse_failure_logs_a_preview(caplog, llm_config, fake_llm):
    orchestrator = GenerationOrchestrator(llm_config, client=fake_llm)
    fake_llm.queue("y" * 5000)
    logger.propagate = True
    try:
        with caplog.at_level(logging.ERROR, logger="aceai"):
            asyncio.run(orchestrator.generate_quiz("TCP", "Easy", 1))
    finally:
        logger.propagate = False
    message = next(r.getMessage() for r in caplog.records if "Failed to parse questions" in r.getMessage())
    assert "more chars]" in message
    assert "y" * 5000 not in message
