"""Classification provider interface for the semantic diff engine."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..models.enums import ClassifierModel


@dataclass(frozen=True)
class ClassificationRequest:
    """Prompt sent to the classification provider."""
    prompt: str
    model: ClassifierModel = ClassifierModel.FAST
    max_tokens: int = 100
    temperature: float = 0.0


@dataclass(frozen=True)
class ClassificationResponse:
    """Raw completion returned by the classification provider."""
    content: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    latency_ms: int = 0


class IClassificationProvider(ABC):
    """
    Abstract interface for an external text-classification provider.

    Implementations wrap an LLM API client. Calls may block; callers bound
    them with a timeout.
    """

    @abstractmethod
    def execute(self, request: ClassificationRequest) -> ClassificationResponse:
        """
        Run a classification prompt.

        Args:
            request: The prompt and generation parameters.

        Returns:
            The provider's completion together with token usage.

        Raises:
            Exception: Any transport or provider error.
        """
        pass
