"""Infrastructure adapter for OpenAI topic augmentation.

This adapter implements the domain's TopicAugmenter interface using the
OpenAI chat completions API. It asks the model for the main themes of a chat
sample and returns them as domain TopicTheme values.
"""

import asyncio
import logging
from typing import List, Optional, Sequence

import aiohttp
import backoff
from pydantic import BaseModel, Field, ValidationError

from ..domain.exceptions import TopicAugmentationError
from ..domain.models import ChatMessage, TopicTheme
from .config import OpenAIConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an expert at analyzing live chat conversations.
Extract the main topics/themes being discussed. Return a JSON object with:
{
  "topics": ["topic1", "topic2", ...],
  "themes": [
    {
      "topic": "theme name",
      "description": "brief description",
      "keywords": ["key1", "key2"]
    }
  ],
  "summary": "brief overall summary of chat themes"
}

Be concise. Return valid JSON only, no markdown."""


class ThemeSchema(BaseModel):
    """A single theme in the model's response."""

    topic: str = Field(min_length=1)
    description: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)


class TopicAnalysisResponse(BaseModel):
    """Structured topic analysis returned by the model."""

    topics: List[str] = Field(default_factory=list)
    themes: List[ThemeSchema] = Field(default_factory=list)
    summary: str = ""


def _strip_code_fence(content: str) -> str:
    text = content.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


class OpenAITopicAugmenter:
    """OpenAI implementation of the topic augmenter."""

    def __init__(
        self,
        config: OpenAIConfig,
        sample_size: int = 500,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """Initialize the augmenter.

        Args:
            config: OpenAI configuration
            sample_size: Most recent messages sent to the model
            session: Optional shared aiohttp session
        """
        self.config = config
        self.sample_size = sample_size
        self._session = session
        self._post_with_retry = backoff.on_exception(
            backoff.expo,
            (aiohttp.ClientError, asyncio.TimeoutError),
            max_tries=max(1, config.max_retries),
            max_time=config.request_timeout * 2,
        )(self._post)

    async def themes_for(self, messages: Sequence[ChatMessage]) -> List[TopicTheme]:
        """Ask the model for the main themes of a chat.

        Args:
            messages: Messages of one stream session

        Returns:
            Themes proposed by the model

        Raises:
            TopicAugmentationError: If the key is missing, the request fails or
                the response is malformed
        """
        if not self.config.is_configured:
            raise TopicAugmentationError("OpenAI API key not configured")

        if not messages:
            return []

        sample = list(messages)[-self.sample_size:]
        transcript = "\n".join(f"{msg.author}: {msg.text}" for msg in sample)

        try:
            content = await self._post_with_retry(self._build_payload(transcript))
            response = TopicAnalysisResponse.model_validate_json(
                _strip_code_fence(content)
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TopicAugmentationError(f"OpenAI request failed: {e}", cause=e) from e
        except ValidationError as e:
            raise TopicAugmentationError(
                "OpenAI returned malformed topic analysis", cause=e
            ) from e

        logger.info(f"OpenAI proposed {len(response.themes)} topic themes")
        return [
            TopicTheme(
                topic=theme.topic,
                keywords=tuple(theme.keywords) or (theme.topic,),
                description=theme.description,
            )
            for theme in response.themes
        ]

    def _build_payload(self, transcript: str) -> dict:
        return {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": f"Analyze this live chat and identify main topics:\n\n{transcript}",
                },
            ],
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }

    async def _post(self, payload: dict) -> str:
        """Send one chat completion request and return the message content."""
        headers = {
            "Authorization": f"Bearer {self.config.api_key.get_secret_value()}",
            "Content-Type": "application/json",
        }
        url = f"{self.config.base_url.rstrip('/')}/chat/completions"

        if self._session is not None:
            return await self._send(self._session, url, payload, headers)

        timeout = aiohttp.ClientTimeout(total=self.config.request_timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            return await self._send(session, url, payload, headers)

    async def _send(
        self,
        session: aiohttp.ClientSession,
        url: str,
        payload: dict,
        headers: dict,
    ) -> str:
        async with session.post(url, json=payload, headers=headers) as response:
            response.raise_for_status()
            data = await response.json()

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise TopicAugmentationError("No content in OpenAI response", cause=e) from e

        if not content:
            raise TopicAugmentationError("No content in OpenAI response")
        return content
