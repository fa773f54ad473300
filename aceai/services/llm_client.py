"""
Model-service boundary.

One call type: a system instruction plus user content (text and/or image
parts) goes in, a single text completion comes out. The default client talks
to any OpenAI-compatible chat endpoint through LangChain's ChatOpenAI.
"""

from typing import Protocol, Sequence, Union

import openai
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_core.output_parsers import StrOutputParser
from langchain_openai import ChatOpenAI

from aceai.models.content import ContentPart
from aceai.models.enums import ModelVariant
from aceai.utils.config import LLMConfig
from aceai.utils.exceptions import (
    CredentialInvalidError,
    CredentialMissingError,
    LLMConnectionError,
    LLMServiceError,
)
from aceai.utils.logger import logger

UserContent = Union[str, Sequence[ContentPart]]


class LLMClient(Protocol):
    async def complete(self, system: str | None, content: UserContent, variant: ModelVariant) -> str:
        ...


def select_variant(content: UserContent) -> ModelVariant:
    """Vision-capable model whenever any image part is present."""
    if isinstance(content, str):
        return ModelVariant.TEXT
    return ModelVariant.VISION if any(part.is_image for part in content) else ModelVariant.TEXT


def to_message_content(content: UserContent) -> Union[str, list]:
    if isinstance(content, str):
        return content
    blocks = []
    for part in content:
        if part.is_image:
            blocks.append({"type": "image_url", "image_url": {"url": part.value}})
        else:
            blocks.append({"type": "text", "text": part.value})
    return blocks


class ChatCompletionClient:
    """LangChain-backed client for an OpenAI-compatible chat completion endpoint."""

    def __init__(self, config: LLMConfig):
        self.config = config
        self._models: dict[ModelVariant, ChatOpenAI] = {}

    def _model_name(self, variant: ModelVariant) -> str:
        return self.config.vision_model if variant == ModelVariant.VISION else self.config.text_model

    def _get_model(self, variant: ModelVariant) -> ChatOpenAI:
        if not self.config.api_key:
            raise CredentialMissingError()
        if variant not in self._models:
            logger.info(f"Initializing chat model '{self._model_name(variant)}' for variant '{variant.value}'")
            self._models[variant] = ChatOpenAI(
                api_key=self.config.api_key,
                base_url=self.config.base_url,
                model=self._model_name(variant),
                temperature=self.config.temperature,
                max_retries=0,  # Retries are user-initiated
            )
        return self._models[variant]

    async def complete(self, system: str | None, content: UserContent, variant: ModelVariant) -> str:
        chain = self._get_model(variant) | StrOutputParser()
        messages = []
        if system:
            messages.append(SystemMessage(content=system))
        messages.append(HumanMessage(content=to_message_content(content)))

        try:
            return await chain.ainvoke(messages)
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            logger.error(f"LLM service rejected the credential: {e}")
            raise CredentialInvalidError(_response_body(e)) from e
        except openai.APIStatusError as e:
            logger.error(f"LLM service returned status {e.status_code}: {e}")
            raise LLMServiceError(e.status_code, _response_body(e)) from e
        except openai.APIConnectionError as e:
            logger.error(f"LLM service unreachable: {e}")
            raise LLMConnectionError(str(e)) from e


def _response_body(error: openai.APIStatusError) -> str:
    try:
        return error.response.text
    except Exception:
        return str(error)
