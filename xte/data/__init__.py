"""
Data schema, dataset loading and linguistic preprocessing.
"""

from .schema import (
    Decision, EntailmentDecision, EntailmentPair, ErrorKind, ModelName,
    Phrase, Result, ScoredPair, Token,
)
from .datasets import DatasetLoader, TextDatasetLoader, GlueRTELoader, get_dataset_loader, write_results
from .preprocessing import DependencyGraph, Preprocessor, SpacyPreprocessor

__all__ = [
    "Decision", "EntailmentDecision", "EntailmentPair", "ErrorKind", "ModelName",
    "Phrase", "Result", "ScoredPair", "Token",
    "DatasetLoader", "TextDatasetLoader", "GlueRTELoader", "get_dataset_loader", "write_results",
    "DependencyGraph", "Preprocessor", "SpacyPreprocessor",
]
