# Shared plumbing for components that call the model service
# aceai/services/orchestration.py
import random
import string
import time
from typing import Optional

from aceai.models.enums import GenerationState, ModelVariant
from aceai.services.llm_client import ChatCompletionClient, LLMClient, UserContent, select_variant
from aceai.utils.config import LLMConfig
from aceai.utils.exceptions import AceAIError, CredentialMissingError
from aceai.utils.logger import logger

_ID_ALPHABET = string.ascii_lowercase + string.digits


def new_entity_id() -> str:
    """
    Epoch milliseconds followed by nine random base-36 characters. Unique enough
    within one process; not a cryptographic identifier.
    """
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{now_millis()}{suffix}"


def now_millis() -> int:
    return int(time.time() * 1000)


class ModelOrchestrator:
    """
    Base for orchestrators: checks the credential, picks the model variant,
    and keeps the state and last failure reason of the most recent call.
    """

    def __init__(self, config: LLMConfig, client: Optional[LLMClient] = None):
        self.config = config
        self.client: LLMClient = client or ChatCompletionClient(config)
        self.state = GenerationState.IDLE
        self.last_failure: Optional[str] = None

    def _begin(self):
        if not self.config.api_key:
            self._fail("credential missing")
            raise CredentialMissingError()
        self.state = GenerationState.BUILDING_CONTEXT
        self.last_failure = None

    async def _invoke(self, system: Optional[str], content: UserContent) -> str:
        variant: ModelVariant = select_variant(content)
        self.state = GenerationState.AWAITING_MODEL
        logger.info(f"{type(self).__name__}: requesting '{variant.value}' model completion")
        try:
            response = await self.client.complete(system, content, variant)
        except AceAIError as e:
            self._fail(e.message)
            raise
        self.state = GenerationState.PARSING
        return response

    def _fail(self, reason: str):
        self.state = GenerationState.FAILED
        self.last_failure = reason

    def _done(self):
        self.state = GenerationState.DONE
        self.last_failure = None
