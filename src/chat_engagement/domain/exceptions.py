"""Engagement analysis exceptions.

Empty inputs and "nothing found" outcomes are never errors in this package;
these exceptions only cover malformed ingestion payloads and failures of the
optional topic augmentation collaborator.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any


@dataclass(frozen=True)
class ErrorContext:
    """Structured error context using dataclass."""

    entity_type: Optional[str] = None
    entity_id: Optional[Any] = None
    field_name: Optional[str] = None
    invalid_value: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format."""
        result = {}
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id is not None:
            result["entity_id"] = self.entity_id
        if self.field_name:
            result["field_name"] = self.field_name
        if self.invalid_value is not None:
            result["invalid_value"] = self.invalid_value
        return result


class EngagementAnalysisError(Exception):
    """Base exception for all engagement analysis errors."""

    def __init__(self, message: str, *, context: Optional[ErrorContext] = None):
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()

    def __str__(self) -> str:
        parts = [self.message]

        if self.context.entity_type:
            if self.context.entity_id:
                parts.append(f"[{self.context.entity_type}:{self.context.entity_id}]")
            else:
                parts.append(f"[{self.context.entity_type}]")

        if self.context.field_name:
            parts.append(f"Field: {self.context.field_name}")

        return " - ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"context={self.context!r})"
        )


class InvalidMessageError(EngagementAnalysisError):
    """Raised when a raw chat payload lacks a required field or has a bad value.

    Callers are expected to filter these out before analysis.
    """

    def __init__(
        self,
        field_name: str,
        message_id: Optional[Any] = None,
        invalid_value: Optional[Any] = None,
    ):
        context = ErrorContext(
            entity_type="ChatMessage",
            entity_id=message_id,
            field_name=field_name,
            invalid_value=invalid_value,
        )
        if invalid_value is None:
            message = f"Chat message is missing '{field_name}'"
        else:
            message = f"Chat message has invalid '{field_name}': {invalid_value!r}"
        super().__init__(message, context=context)


class TopicAugmentationError(EngagementAnalysisError):
    """Raised when an external topic augmenter fails."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message, context=ErrorContext(entity_type="TopicAugmenter"))
        self.cause = cause
