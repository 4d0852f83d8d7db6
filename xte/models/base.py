"""
Base class for all entailment models.
"""

from abc import ABC, abstractmethod

from ..data.schema import EntailmentDecision, ModelName


class BaseModel(ABC):
    """Base class for all entailment models."""

    name: ModelName

    @abstractmethod
    def decide(self, text: str, hyp: str) -> EntailmentDecision:
        """Decide whether the hypothesis is entailed by the text."""

    def get_model_info(self) -> dict:
        """Get information about the model."""
        return {
            "model_name": self.name.value,
            "model_type": self.__class__.__name__,
        }
