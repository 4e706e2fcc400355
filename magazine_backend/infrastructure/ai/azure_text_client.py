"""Azure OpenAI chat client used for metadata drafting."""
from __future__ import annotations

import logging
from typing import Any, Optional

from azure.identity import DefaultAzureCredential, get_bearer_token_provider
from openai import AzureOpenAI, OpenAIError

from magazine_backend.config import Settings, get_settings
from magazine_backend.domain.exceptions import ExternalServiceError

from .prompt_builder import PromptBundle

logger = logging.getLogger(__name__)

SERVICE = "Azure OpenAI"


class AzureTextClient:
    """Adapter that sends a PromptBundle and returns the trimmed completion text."""

    def __init__(self, *, client: Optional[AzureOpenAI] = None, settings: Optional[Settings] = None) -> None:
        settings = settings or get_settings()
        endpoint = settings.ensure_endpoint()
        model = settings.azure_openai_text_model or settings.azure_openai_deployment_name

        if client is None and (not endpoint or not model):
            raise ExternalServiceError(SERVICE, "Azure OpenAI configuration is incomplete for text generation")

        if client is not None:
            self._client = client
        elif settings.azure_openai_api_key:
            self._client = AzureOpenAI(
                api_key=settings.azure_openai_api_key,
                api_version=settings.azure_openai_api_version,
                azure_endpoint=endpoint,
            )
        else:
            token_provider = get_bearer_token_provider(
                DefaultAzureCredential(),
                "https://cognitiveservices.azure.com/.default",
            )
            self._client = AzureOpenAI(
                api_version=settings.azure_openai_api_version,
                azure_endpoint=endpoint,
                azure_ad_token_provider=token_provider,
            )
        self._model = model or "gpt-4o-mini"

    def complete(self, bundle: PromptBundle) -> str:
        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": bundle.messages,
            "temperature": bundle.temperature,
            "top_p": bundle.top_p,
            "max_tokens": bundle.max_tokens,
            "n": 1,
        }
        try:
            response = self._client.chat.completions.create(**kwargs)
        except OpenAIError as exc:
            logger.error("Azure OpenAI request failed: %s", exc)
            raise ExternalServiceError(SERVICE, str(exc)) from exc

        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None) or ""
        return content.strip()
