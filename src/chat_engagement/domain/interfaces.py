"""Domain interface for external topic augmentation.

An augmenter proposes topic themes for a stream's chat, typically backed by
a language model. It is optional and fallible: the analyzer treats any
failure exactly like "no augmentation available".
"""

from abc import abstractmethod
from typing import List, Protocol, Sequence, runtime_checkable

from .models import ChatMessage, TopicTheme


@runtime_checkable
class TopicAugmenter(Protocol):
    """Protocol for external topic theme providers."""

    @abstractmethod
    async def themes_for(self, messages: Sequence[ChatMessage]) -> List[TopicTheme]:
        """Propose topic themes for a set of chat messages.

        Args:
            messages: Messages of one stream session

        Returns:
            Zero or more themes

        Raises:
            TopicAugmentationError: If the themes could not be produced
        """
        ...
