"""
Model factory for creating the entailment models.
"""

from typing import Dict, Type

from .base import BaseModel
from .graph_navigation import GraphNavigationModel
from .tree_edit import StructuralSimilarityModel


class ModelFactory:
    """Factory for creating entailment models."""

    _models: Dict[str, Type[BaseModel]] = {
        "structural_similarity": StructuralSimilarityModel,
        "graph_navigation": GraphNavigationModel,
    }

    @classmethod
    def register_model(cls, name: str, model_class: Type[BaseModel]):
        """Register a new model type."""
        cls._models[name] = model_class

    @classmethod
    def create_model(cls, model_type: str, **kwargs) -> BaseModel:
        """Create a model instance."""
        if model_type not in cls._models:
            raise ValueError(f"Unknown model type: {model_type}. Available: {list(cls._models.keys())}")

        model_class = cls._models[model_type]
        return model_class(**kwargs)

    @classmethod
    def get_available_models(cls) -> Dict[str, Type[BaseModel]]:
        """Get all available model types."""
        return cls._models.copy()
