"""
Evaluation metrics for entailment decisions.
"""

from .metrics import compute_metrics, format_summary

__all__ = ["compute_metrics", "format_summary"]
