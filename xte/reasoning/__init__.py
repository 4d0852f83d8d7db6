"""
Context veto, similarity scoring, candidate selection and search paths.
"""

from .context import ContextVeto
from .paths import PathArena, PathStep, Role
from .similarity import SimilarityScorer, IndraScorer, SentenceTransformerScorer, create_scorer
from .candidates import CandidateSelector

__all__ = [
    "ContextVeto", "PathArena", "PathStep", "Role",
    "SimilarityScorer", "IndraScorer", "SentenceTransformerScorer", "create_scorer",
    "CandidateSelector",
]
