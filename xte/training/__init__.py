"""
Training modules for the entailment models.
"""

from .threshold import ThresholdLearner

__all__ = ["ThresholdLearner"]
