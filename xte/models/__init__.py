"""
Entailment models and the strategy router.
"""

from .base import BaseModel
from .router import ModelRouter
from .tree_edit import StructuralSimilarityModel, TreeFormatError
from .graph_navigation import GraphNavigationModel
from .factory import ModelFactory

__all__ = [
    "BaseModel", "ModelRouter", "StructuralSimilarityModel", "TreeFormatError",
    "GraphNavigationModel", "ModelFactory",
]
